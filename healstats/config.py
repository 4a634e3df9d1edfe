import os

DB_PATH = os.environ.get("DB_PATH", "/app/data/healstats.db")
LOG_LEVEL = os.environ.get("HEALSTATS_LOG_LEVEL", "INFO").upper()
BUSY_TIMEOUT_MS = 5000
DEFAULT_LEADERBOARD_LIMIT = 5
