#!/usr/bin/env python3
"""Entry point for ``python -m secrets_cli.cli``."""

import sys

from .secrets_config import main

if __name__ == "__main__":
    sys.exit(main())
