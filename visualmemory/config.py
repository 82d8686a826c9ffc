"""Runtime configuration for VisualMemory.

Values come from the environment (optionally via a local `.env` file).
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Database URL - SQLite by default (single-device local store)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./visualmemory.db")

# Echo SQL statements
DEBUG = os.getenv("DEBUG", "False").lower() == "true"

# Period of the automatic ranking cycle
RECALC_INTERVAL_SECONDS = float(os.getenv("DPS_RECALC_INTERVAL_SEC", "30"))

# HTTP feed
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
