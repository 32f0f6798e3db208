"""Configuration for the Q&A check-in service, read from environment variables."""

import os
import re
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database configuration
DB_PATH = os.getenv("QA_DB_PATH", "./data/questions_answers.db")
BUCKET_NAME = os.getenv("QA_BUCKET", "qa_data")
BUSY_TIMEOUT_SEC = float(os.getenv("QA_BUSY_TIMEOUT_SEC", "5.0"))

# Transport configuration
STATIC_DIR = os.getenv("QA_STATIC_DIR", "./frontend/dist")
API_HOST = os.getenv("QA_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("QA_API_PORT", "8080"))
LOG_LEVEL = os.getenv("QA_LOG_LEVEL", "info")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Version string
VERSION = "1.0.0"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def get_db_path() -> str:
    """Database file path, re-read so tests can point it elsewhere."""
    return os.getenv("QA_DB_PATH", DB_PATH)


def get_bucket_name() -> str:
    """Name of the table holding the records."""
    name = os.getenv("QA_BUCKET", BUCKET_NAME)
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid bucket name: {name!r}")
    return name


def get_busy_timeout() -> float:
    return float(os.getenv("QA_BUSY_TIMEOUT_SEC", str(BUSY_TIMEOUT_SEC)))


def get_static_dir() -> str:
    return os.getenv("QA_STATIC_DIR", STATIC_DIR)


def get_log_level() -> str:
    return os.getenv("QA_LOG_LEVEL", LOG_LEVEL).upper()


def log_level_valid() -> bool:
    return get_log_level() in LOG_LEVELS


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str = None) -> None:
    """Ensure the database directory exists."""
    Path(db_path or get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if not _IDENTIFIER.match(os.getenv("QA_BUCKET", BUCKET_NAME)):
        issues.append(f"Invalid QA_BUCKET: {os.getenv('QA_BUCKET', BUCKET_NAME)}")

    if get_busy_timeout() < 0:
        issues.append("QA_BUSY_TIMEOUT_SEC must be >= 0")

    if not 0 < API_PORT < 65536:
        issues.append(f"Invalid QA_API_PORT: {API_PORT}")

    if not log_level_valid():
        issues.append(f"Invalid QA_LOG_LEVEL: {get_log_level()}")

    return issues
