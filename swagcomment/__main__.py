#!/usr/bin/env python3
"""
Enable running swagcomment via: python -m swagcomment

Usage:
    python -m swagcomment --handlers ./internal/api/http/web/handler
"""

import sys

from swagcomment.cli import main

if __name__ == "__main__":
    sys.exit(main())
