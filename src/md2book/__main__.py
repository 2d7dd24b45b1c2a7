"""Module entry point for running with python -m md2book."""

import sys

from md2book.cli import main

if __name__ == "__main__":
    sys.exit(main())
