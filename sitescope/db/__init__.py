"""Database layer package.

Public re-exports so callers can write::

    from sitescope.db import get_connection, init_db
    from sitescope.db import results
"""

from sitescope.db.connection import get_connection
from sitescope.db.migrations import init_db
from sitescope.db import results

__all__ = ["get_connection", "init_db", "results"]
