#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/__main__.py
"""Allow running flare2adoc as ``python -m flare2adoc``."""

import sys

from flare2adoc.cli import main

if __name__ == "__main__":
    sys.exit(main())
