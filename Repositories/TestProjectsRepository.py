"""
Data access for the TestProjects table.

Every public method pins the search path, runs exactly one parameterized
statement and commits. Driver failures are rolled back and re-raised as
DatabaseError so callers only ever see one error type.
"""

import logging
from typing import Any, List, Optional, Sequence

import psycopg
from psycopg import sql

from Models.TestProjects import TestProject
from Repositories.DatabaseErrors import wrap_database_error

logger = logging.getLogger(__name__)

# "$user" must stay a literal identifier, not a bound value
SET_SEARCH_PATH = sql.SQL('SET search_path = {schema}, "$user"')

SELECT_ALL = 'SELECT "Id", "Name" FROM "TestProjects" ORDER BY "Id"'
SELECT_BY_ID = 'SELECT "Id", "Name" FROM "TestProjects" WHERE "Id" = %s'
INSERT = 'INSERT INTO "TestProjects" ("Name") VALUES (%s) RETURNING "Id", "Name"'
UPDATE = 'UPDATE "TestProjects" SET "Name" = %s WHERE "Id" = %s RETURNING "Id", "Name"'
DELETE = 'DELETE FROM "TestProjects" WHERE "Id" = %s'

class TestProjectsRepository:
    def __init__(self, conn: psycopg.AsyncConnection, schema: str = "public"):
        self.conn = conn
        self.schema = schema

    async def list(self) -> List[TestProject]:
        rows, _ = await self._execute(SELECT_ALL, fetch="all")
        return [TestProject.from_row(row) for row in rows]

    async def get(self, id: int) -> Optional[TestProject]:
        row, _ = await self._execute(SELECT_BY_ID, (id,), fetch="one")
        return TestProject.from_row(row) if row else None

    async def create(self, name: Optional[str]) -> TestProject:
        row, _ = await self._execute(INSERT, (name,), fetch="one")
        return TestProject.from_row(row)

    async def update(self, id: int, name: Optional[str]) -> Optional[TestProject]:
        row, _ = await self._execute(UPDATE, (name, id), fetch="one")
        return TestProject.from_row(row) if row else None

    async def delete(self, id: int) -> bool:
        _, rowcount = await self._execute(DELETE, (id,))
        return rowcount == 1

    async def _execute(self, query: str, params: Sequence[Any] = (), fetch: Optional[str] = None):
        """Run one statement after pinning the search path. Returns (rows, rowcount)."""
        try:
            async with self.conn.cursor() as cur:
                await cur.execute(SET_SEARCH_PATH.format(schema=sql.Identifier(self.schema)))
                await cur.execute(query, params)
                if fetch == "all":
                    result = await cur.fetchall()
                elif fetch == "one":
                    result = await cur.fetchone()
                else:
                    result = None
                rowcount = cur.rowcount
            await self.conn.commit()
            return result, rowcount
        except psycopg.Error as e:
            logger.error(f"Query failed: {query} - {e}")
            await self._rollback()
            raise wrap_database_error(e) from e

    async def _rollback(self):
        try:
            await self.conn.rollback()
        except psycopg.Error as e:
            # connection already broken, keep the original error
            logger.warning(f"Rollback failed: {e}")
