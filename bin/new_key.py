# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Print a fresh credential (same generator as GET /new-key):
    python bin/new_key.py

Nothing is stored.  Whoever holds the printed value owns its partition.
"""

import sys
import os

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.keys import new_key   # noqa: E402


if __name__ == "__main__":
    print(new_key())
