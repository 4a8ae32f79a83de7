"""Allows the package to be run as: python -m mysql_to_access_pkg"""
import sys

from mysql_to_access_pkg.runner import main

if __name__ == "__main__":
    sys.exit(main())
