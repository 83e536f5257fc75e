# src/taskconf/__main__.py
"""Allow `python -m taskconf`."""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
