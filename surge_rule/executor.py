# query executor collaborator
# the rule only sees the protocol; SqlQueryExecutor is the postgres-backed one

import asyncio
from typing import Any, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from db.models import Database, get_database
from surge_rule.config import settings
from surge_rule.errors import DataAvailabilityError
from surge_rule.queries import WindowCountQuery


class QueryExecutor(Protocol):
    """anything that can run a window-count query and hand back its rows"""
    
    async def fetch_all(self, query: WindowCountQuery) -> List[Any]:
        ...


class SqlQueryExecutor:
    """
    runs window-count queries on an async sqlalchemy session
    
    timeouts and driver failures are reported as DataAvailabilityError so the
    caller can tell "could not read history" apart from a legitimate zero
    """
    
    def __init__(self, database: Optional[Database] = None, timeout_seconds: Optional[float] = None):
        self._database = database
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.query_timeout_seconds
    
    @property
    def database(self) -> Database:
        # the global engine is only built when a query actually runs
        if self._database is None:
            self._database = get_database()
        return self._database
    
    async def fetch_all(self, query: WindowCountQuery) -> List[Any]:
        """
        execute the query and return every row's first column
        
        args:
            query: window count to run
            
        returns:
            list of scalars (a count query yields exactly one)
        """
        statement = query.to_statement()
        try:
            async with self.database.async_session() as session:
                result = await asyncio.wait_for(session.execute(statement), timeout=self.timeout_seconds)
                return list(result.scalars().all())
        except asyncio.TimeoutError as e:
            raise DataAvailabilityError(
                f"query timed out after {self.timeout_seconds}s for account {query.creditor_account_id}"
            ) from e
        except SQLAlchemyError as e:
            raise DataAvailabilityError(f"query failed: {e}") from e


def unwrap(rows: Any) -> Any:
    """
    one level of unwrapping: first element of a result list
    
    a nested first row ([[n]]) yields its own first element; an empty or
    missing result yields None
    """
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        return None
    first = rows[0]
    if isinstance(first, (list, tuple)):
        return first[0] if len(first) > 0 else None
    return first
