#!/usr/bin/env python3
"""Allow ``python -m aliaskit``."""

import sys

from aliaskit.cli import main

if __name__ == '__main__':
    sys.exit(main())
