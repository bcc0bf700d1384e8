"""
Process settings and play date configuration limits.

Settings come from the environment (a local .env file is honored).
"""
import os

from dotenv import load_dotenv

from pickleball.errors import ConfigurationError

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pickleball.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

# Roster limits
MIN_PLAYERS = 4
MAX_PLAYERS = 16

# Court limits (one match per court per round)
MIN_COURTS = 1
MAX_COURTS = 4

# Target score limits
MIN_TARGET_SCORE = 5
MAX_TARGET_SCORE = 21
DEFAULT_TARGET_SCORE = 11

# Headroom above the target before a score is rejected outright
MAX_SCORE_HEADROOM = 20


def validate_play_date_config(num_courts: int, target_score: int) -> None:
    """
    Reject an invalid play date configuration before any scheduling work.

    Raises:
        ConfigurationError: court count or target score outside the allowed range
    """
    if isinstance(num_courts, bool) or not isinstance(num_courts, int):
        raise ConfigurationError(f"num_courts must be an integer, got {num_courts!r}")
    if not MIN_COURTS <= num_courts <= MAX_COURTS:
        raise ConfigurationError(f"num_courts must be between {MIN_COURTS} and {MAX_COURTS}, got {num_courts}")
    if isinstance(target_score, bool) or not isinstance(target_score, int):
        raise ConfigurationError(f"target_score must be an integer, got {target_score!r}")
    if not MIN_TARGET_SCORE <= target_score <= MAX_TARGET_SCORE:
        raise ConfigurationError(
            f"target_score must be between {MIN_TARGET_SCORE} and {MAX_TARGET_SCORE}, got {target_score}"
        )
