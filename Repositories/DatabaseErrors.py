"""Database layer exceptions. Every driver failure surfaces as a DatabaseError."""

import psycopg

class DatabaseError(Exception):
    """Any failure talking to the database. The message is safe to echo to clients."""

    def __init__(self, message: str):
        super().__init__(f"Database error: {message}")

class DatabaseConnectionError(DatabaseError):
    """Connectivity or server-side operational failure."""

class ConstraintViolationError(DatabaseError):
    """Integrity failure, e.g. a NULL name on a NOT NULL column."""

def wrap_database_error(exc: Exception) -> DatabaseError:
    """Map a psycopg exception to the matching DatabaseError subclass"""
    message = str(exc).strip() or type(exc).__name__
    if isinstance(exc, psycopg.IntegrityError):
        return ConstraintViolationError(message)
    if isinstance(exc, psycopg.OperationalError):
        return DatabaseConnectionError(message)
    return DatabaseError(message)
