"""Allow ``python -m prouter``."""

from prouter.app import main


if __name__ == "__main__":
    main()
