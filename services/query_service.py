"""
Query Service

Executes one parameterized statement on a pooled connection and reports the
outcome as a typed value. Handlers shape the result; nothing here raises past
`run`.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Sequence

from databases import Database

from db import paramstyle
from db.database import Dialect
from models.query import (
    ClientError,
    ExecutionError,
    Mutation,
    Outcome,
    QueryRequest,
    QueryResult,
    Rows,
    Success,
)
from services.result_shaping import ResultShaper, encode_value

logger = logging.getLogger(__name__)

NO_QUERY_MESSAGE = "No query provided"


def _error_message(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or exc.__class__.__name__


class QueryService:
    """Thin execution layer over the shared `databases` pool."""

    def __init__(self, database: Database, dialect: Dialect, support_big_numbers: bool = True):
        self.database = database
        self.dialect = dialect
        self.support_big_numbers = support_big_numbers
        self._connect_lock = asyncio.Lock()

    async def _ensure_connected(self) -> None:
        if self.database.is_connected:
            return
        async with self._connect_lock:
            if not self.database.is_connected:
                await self.database.connect()

    async def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Run `query` with `params` bound positionally.

        The pooled connection is held only for the duration of the statement and
        released on every exit path. Closing the cursor discards any further
        result sets a multi-statement query produced; the first one wins.
        """
        statement = paramstyle.translate(query, self.dialect.paramstyle)
        args = tuple(params or ())

        await self._ensure_connected()
        async with self.database.connection() as connection:
            raw = connection.raw_connection
            cursor = await raw.cursor()
            try:
                await cursor.execute(statement, args)
                if cursor.description is None:
                    return Mutation(
                        affected_rows=max(cursor.rowcount or 0, 0),
                        insert_id=cursor.lastrowid or 0,
                    )
                columns: List[str] = [col[0] for col in cursor.description]
                records = await cursor.fetchall()
                return Rows(rows=[dict(zip(columns, record)) for record in records])
            finally:
                await cursor.close()

    async def run(
        self,
        request: QueryRequest,
        shaper: ResultShaper,
        require_query: bool = False,
    ) -> Outcome:
        if require_query and not request.query:
            return ClientError(NO_QUERY_MESSAGE)

        try:
            result = await self.execute(request.query or "", request.params)
        except Exception as e:
            logger.warning(f"[query] execution failed: {_error_message(e)}")
            return ExecutionError(_error_message(e))

        try:
            return Success(encode_value(shaper(result), self.support_big_numbers))
        except Exception as e:
            logger.warning(f"[query] result not representable as JSON: {_error_message(e)}")
            return ExecutionError(_error_message(e))
