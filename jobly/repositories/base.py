"""
Shared plumbing for repositories.

Responsibilities:
- Run $k statements on the session and log them.
- Commit writes, roll back and re-raise on failure.

Non-Responsibilities:
- No SQL building; fragments come from jobly.sql.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..database import execute
from ..logger import get_logger


class Repository:
    """Base class holding the session a repository works on."""

    table = ""

    def __init__(self, session: Session):
        self.session = session

    def fetch_all(self, sql: str, values: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        """Run a read and return every row as a dict."""
        logger = get_logger()
        try:
            rows = [dict(row._mapping) for row in execute(self.session, sql, values)]
        except Exception as e:
            # A failed statement leaves the transaction aborted on PostgreSQL
            self.session.rollback()
            logger.record_query_failure(self.table, type(e).__name__)
            logger.error(f"Query on {self.table} failed: {e}", values=values)
            raise
        logger.record_query(self.table, rows=len(rows))
        logger.debug(f"Query on {self.table}", sql=" ".join(sql.split()), rows=len(rows))
        return rows

    def fetch_one(self, sql: str, values: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        rows = self.fetch_all(sql, values)
        return rows[0] if rows else None

    def write(self, sql: str, values: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Run a write, commit, and return the first RETURNING row (if any).

        Raises:
            Whatever the database raised, after rolling back
        """
        logger = get_logger()
        try:
            result = execute(self.session, sql, values)
            row = result.fetchone() if result.returns_rows else None
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.record_query_failure(self.table, type(e).__name__)
            logger.error(f"Write to {self.table} failed: {e}", values=values)
            raise
        logger.record_query(self.table, rows=1 if row is not None else 0)
        return dict(row._mapping) if row is not None else None
