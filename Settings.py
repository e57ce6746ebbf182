"""
Configuration settings for the Backend API, read from the process environment
"""

import os

SERVICE_NAME = "Backend API"
SERVICE_VERSION = "1.0.0"

DB_SCHEMA = os.getenv("DB_SCHEMA", "public")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

def get_database_url():
    """Current connection string, read at call time rather than import time"""
    return os.getenv("DATABASE_URL") or None

def require_database_url():
    """Fail startup when no connection string is configured"""
    database_url = get_database_url()
    if not database_url:
        raise RuntimeError("DATABASE_URL environment variable is required")
    return database_url
