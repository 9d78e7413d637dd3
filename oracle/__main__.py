#!/usr/bin/env python3
"""
Allows the engine to be run as a module: python3 -m oracle
"""

import sys

from oracle.app.cli import main

if __name__ == "__main__":
    sys.exit(main())
