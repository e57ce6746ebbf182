"""
Logging setup, imported once by main.py before any module logs
"""

import logging

from Settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

# Keep uvicorn's per-request access lines at the same threshold as the app
logging.getLogger("uvicorn.access").setLevel(LOG_LEVEL)
