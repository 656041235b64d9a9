from __future__ import annotations
import os
from dotenv import load_dotenv

load_dotenv()


def _input(name: str, default: str = "") -> str:
    """Read a GitHub Actions input (INPUT_<NAME>) and fall back to the plain env var."""
    value = os.getenv(f"INPUT_{name}")
    if value:
        return value
    return os.getenv(name, default)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() not in {"0", "false", "no"}


# Credentials
GITHUB_TOKEN = _input("GITHUB_TOKEN")
OPENAI_API_KEY = _input("OPENAI_API_KEY")

# Model config
OPENAI_API_MODEL = _input("OPENAI_API_MODEL", "gpt-4")
# Preconfigured assistant profile that holds the review instructions server-side
OPENAI_ASSISTANT_ID = _input("OPENAI_ASSISTANT_ID", "asst_9fxOXtnqzEBcYeiE6lparuFG")
USE_ASSISTANT_API = _flag("USE_ASSISTANT_API", "true")

# Comma-separated glob patterns for files that should never be reviewed
EXCLUDE_PATTERNS = _input("EXCLUDE")

# Event payload written by the Actions runner
GITHUB_EVENT_PATH = os.getenv("GITHUB_EVENT_PATH", "")
GITHUB_EVENT_NAME = os.getenv("GITHUB_EVENT_NAME", "")

# GitHub API root (override for GHES)
GITHUB_API_BASE = os.getenv("GITHUB_API", "https://api.github.com")

# Review behaviour
TRIGGER_PHRASE = os.getenv("TRIGGER_PHRASE", "/ai-review")
REVIEW_BATCH_SIZE = int(os.getenv("REVIEW_BATCH_SIZE", "10"))
REVIEW_INSTRUCTIONS_PATH = os.getenv("REVIEW_INSTRUCTIONS_PATH", "")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "")
LOG_CONSOLE = _flag("LOG_CONSOLE", "true")
LOG_FORCE = os.getenv("LOG_FORCE", "false").lower() in {"1", "true", "yes"}
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))
