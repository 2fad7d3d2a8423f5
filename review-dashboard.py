#!/usr/bin/env python3
"""
Code Review Dashboard
Syncs pull request review statistics for a GitHub repository.
"""

import sys

from review_dashboard.cli import main


if __name__ == "__main__":
    sys.exit(main())
