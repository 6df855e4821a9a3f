"""Application configuration and constants."""
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float_env(name: str, default: float) -> float:
    """Parse float from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Remote evaluator backend
EVALUATOR_API_URL = os.environ.get("EVALUATOR_API_URL", "http://127.0.0.1:3000").rstrip("/")
REQUEST_TIMEOUT_SECONDS = _parse_float_env("REQUEST_TIMEOUT_SECONDS", 30)
UPLOAD_TIMEOUT_SECONDS = _parse_float_env("UPLOAD_TIMEOUT_SECONDS", 60)

# Directories
DATA_DIR = Path(os.environ.get("EVALUATOR_DATA_DIR", Path.cwd() / "data"))
DRAFTS_DIR = Path(os.environ.get("DRAFTS_DIR", DATA_DIR / "drafts"))
DRAFTS_DIR.mkdir(parents=True, exist_ok=True)

# Stored bearer token and user data
TOKEN_PATH = Path(os.environ.get("TOKEN_PATH", DATA_DIR / "session.json"))

# Evaluation retries
EVALUATION_MAX_RETRIES = _parse_int_env("EVALUATION_MAX_RETRIES", 3)
BATCH_DELAY_SECONDS = _parse_float_env("BATCH_DELAY_SECONDS", 5)
