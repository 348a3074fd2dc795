"""Configuration: env, Telegram credentials, paging defaults."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of savedmsgs package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so TG_APP_ID etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = BASE_DIR / "data"

# API
API_HOST = os.getenv("SAVEDMSGS_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("PORT") or os.getenv("SAVEDMSGS_API_PORT", "8080"))

# Telegram (MTProto app credentials from my.telegram.org)
TG_APP_ID = os.getenv("TG_APP_ID", "")
TG_APP_HASH = os.getenv("TG_APP_HASH", "")
# Telethon appends ".session" to this path
SESSION_PATH = Path(os.getenv("SAVEDMSGS_SESSION_PATH", str(DATA_DIR / "session")))

# Paging
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = int(os.getenv("SAVEDMSGS_DEFAULT_LIMIT", "20"))
# After this long the archive total is re-probed before a jump to the oldest page
TOTAL_MAX_AGE_SEC = float(os.getenv("SAVEDMSGS_TOTAL_MAX_AGE_SEC", "30.0"))
# Sessions untouched for this long are dropped
SESSION_MAX_IDLE_SEC = float(os.getenv("SAVEDMSGS_SESSION_MAX_IDLE_SEC", "3600"))


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    SESSION_PATH.parent.mkdir(parents=True, exist_ok=True)
