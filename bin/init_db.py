# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the targets_tags and likes tables.

Run once before the first start when AUTO_CREATE_TABLES is disabled and
Alembic is not in use:
    python bin/init_db.py

Reads DATABASE_URL from etc/app.conf or the environment.  Existing tables
are left untouched.
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/init_db.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from sqlalchemy import inspect                       # noqa: E402

from core.config import settings                     # noqa: E402
from database import build_engine, create_tables     # noqa: E402


def init_db():
    engine = build_engine(settings.database_url)
    try:
        create_tables(engine)
        tables = sorted(inspect(engine).get_table_names())
        print(f"[init_db] Tables present: {', '.join(tables)}")
    finally:
        engine.dispose()


if __name__ == "__main__":
    init_db()
