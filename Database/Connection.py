"""
Per-request database connection management
"""

import logging
from typing import AsyncIterator

import psycopg
from psycopg import AsyncConnection
from psycopg.rows import dict_row

from Repositories.DatabaseErrors import DatabaseConnectionError
from Settings import get_database_url

logger = logging.getLogger(__name__)

async def open_connection() -> AsyncConnection:
    """Open a fresh async connection - only called when an endpoint is accessed, not on import"""
    connection_string = get_database_url()
    if not connection_string:
        raise DatabaseConnectionError("DATABASE_URL environment variable not set")
    try:
        return await AsyncConnection.connect(connection_string, row_factory=dict_row)
    except psycopg.Error as e:
        logger.error(f"Database connection error: {e}", exc_info=True)
        raise DatabaseConnectionError(str(e)) from e

async def get_db_connection() -> AsyncIterator[AsyncConnection]:
    """FastAPI dependency: one connection per request, always closed on exit"""
    conn = await open_connection()
    try:
        yield conn
    finally:
        await conn.close()
