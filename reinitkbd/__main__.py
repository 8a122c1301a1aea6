#!/usr/bin/env python3
"""
reinitkbd main entry point for running as a module: python3 -m reinitkbd
"""

import sys
from reinitkbd.cli import main

if __name__ == '__main__':
    sys.exit(main())
