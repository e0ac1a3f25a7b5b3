"""
Convenience entrypoint for clipscribe.

Allows running `python main.py` in addition to `python -m clipscribe`.
"""

import sys

from clipscribe.cli import main


if __name__ == "__main__":
    sys.exit(main())
