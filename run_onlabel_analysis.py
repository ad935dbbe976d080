#!/usr/bin/env python
"""
Run On-Label Analysis
This script runs the on-label therapy analysis pipeline
"""

import sys

from genie_onlabel.main import main

if __name__ == "__main__":
    sys.exit(main())
