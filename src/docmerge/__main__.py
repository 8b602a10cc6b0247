"""Allow ``python -m docmerge``."""

from docmerge.ui.cli import main


if __name__ == "__main__":
    main()
