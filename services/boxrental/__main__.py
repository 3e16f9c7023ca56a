"""
Entry point for running the box rental toolkit as a module.

Usage:
    python -m services.boxrental rut validate 12.345.678-5
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
