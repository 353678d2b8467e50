"""Environment-driven settings. Values come from the process environment,
with a local .env file merged in first."""

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


APP_NAME: str = os.getenv("APP_NAME", "VeriFake Detection API")
APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")

HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# Populate the store with the admin user and sample snapshots at startup
SEED_ON_STARTUP: bool = _as_bool(os.getenv("SEED_ON_STARTUP", "1"))

# Fixed seed for the detection heuristic's random source (unset = nondeterministic)
_seed = os.getenv("DETECTION_SEED", "").strip()
DETECTION_SEED: Optional[int] = int(_seed) if _seed else None

# Query windows
DASHBOARD_RECENT_LIMIT: int = int(os.getenv("DASHBOARD_RECENT_LIMIT", "10"))
ACTIVITY_SCAN_LIMIT: int = int(os.getenv("ACTIVITY_SCAN_LIMIT", "20"))
ACTIVITY_LIMIT: int = int(os.getenv("ACTIVITY_LIMIT", "10"))
TRENDS_WINDOW_DAYS: int = int(os.getenv("TRENDS_WINDOW_DAYS", "30"))
METRICS_HISTORY_HOURS: int = int(os.getenv("METRICS_HISTORY_HOURS", "24"))
