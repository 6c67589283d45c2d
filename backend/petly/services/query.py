"""
Petly Backend: Storage Query Executor
=======================================

What:  Runs parameterized SQL written with positional `$1, $2, ...`
       placeholders against an async SQLAlchemy session.
How:   Placeholders are rewritten to SQLAlchemy named binds (`:p1, :p2`)
       and executed through `text()`. Rows come back as plain dicts keyed by
       the column label, so `SELECT phone_number AS "phoneNumber"` yields
       `{"phoneNumber": ...}`.
Who:   Every store, the favorites ledger and the breed store.

Transactions:
    execute() runs inside the session's open transaction.
    mutate() executes and commits, so each mutation is one autocommit unit.
    Integrity violations roll back and propagate unchanged so callers can map
    them (duplicate username, bad foreign key). Any other SQLAlchemy failure
    is logged and wrapped in DatabaseError.
"""

import logging
import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from petly.exceptions import DatabaseError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_PLACEHOLDER = re.compile(r"\$(\d+)")


def to_named_binds(sql: str) -> str:
    """Rewrites `$N` placeholders into `:pN` named binds."""
    return _PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", sql)


def bind_values(values: Sequence[Any]) -> Dict[str, Any]:
    """Maps a positional value list onto the `pN` names (1-based)."""
    return {f"p{index}": value for index, value in enumerate(values, start=1)}


class QueryExecutor:
    """
    Thin positional-SQL facade over one AsyncSession.

    One executor is created per request (see petly.dependencies.get_executor)
    and never shared between tasks.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def execute(self, sql: str, values: Sequence[Any] = ()) -> List[Row]:
        """
        Run one statement and return its rows as dicts.

        Statements that return no rows (plain INSERT/DELETE without
        RETURNING) yield an empty list.

        Raises:
            IntegrityError: unique or foreign-key violation (after rollback)
            DatabaseError:  any other SQLAlchemy failure
        """
        try:
            result = await self.session.execute(text(to_named_binds(sql)), bind_values(values))
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings().all()]
        except IntegrityError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Query failed: %s | SQL: %s", str(e), sql, exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def mutate(self, sql: str, values: Sequence[Any] = ()) -> List[Row]:
        """execute() followed by a commit."""
        rows = await self.execute(sql, values)
        await self.commit()
        return rows

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Commit failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})
