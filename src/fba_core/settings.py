import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def _env_int(name: str, default: int) -> int:
    """Reads an integer from the environment, falling back to the default on bad input."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# --- Logging ---
LOG_LEVEL = os.getenv("FBA_LOG_LEVEL", "INFO").upper()
LOG_DIR = BASE_DIR / os.getenv("FBA_LOG_DIR", "logs")
LOG_TO_FILE = _env_flag("FBA_LOG_TO_FILE")

# --- Input Files ---
INPUT_DIR = BASE_DIR / os.getenv("FBA_INPUT_DIR", "input")
MAX_FILE_SIZE_MB = _env_int("FBA_MAX_FILE_SIZE_MB", 5)

# --- Restock Forecast Defaults ---
# Users can override these per view; they are never stored on a snapshot.
DEFAULT_LEAD_TIME_DAYS = _env_int("FBA_LEAD_TIME_DAYS", 30)
DEFAULT_SAFETY_STOCK_DAYS = _env_int("FBA_SAFETY_STOCK_DAYS", 14)
DEFAULT_DEMAND_FORECAST_PERCENT = _env_int("FBA_DEMAND_FORECAST_PERCENT", 0)

# --- Presentation ---
ITEMS_PER_PAGE = _env_int("FBA_ITEMS_PER_PAGE", 25)
PROMPT_TOP_N = _env_int("FBA_PROMPT_TOP_N", 5)
