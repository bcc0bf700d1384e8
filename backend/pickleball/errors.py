"""
Domain errors for scheduling and score recording.

Routes translate these into HTTP responses; services and the pure
scheduling/validation code raise them without touching any state first.
"""
from typing import List, Optional


class PickleballError(Exception):
    """Base exception for all play date scheduling and scoring errors"""

    pass


class CapacityError(PickleballError):
    """Roster too small or too large to schedule"""

    pass


class ConfigurationError(PickleballError):
    """Invalid court count, target score or other play date setting"""

    pass


class ScheduleExistsError(ConfigurationError):
    """A schedule was already generated (or locked) for the play date"""

    pass


class NotFoundError(PickleballError):
    """Referenced match, partnership, player or play date does not exist"""

    pass


class PermissionDenied(PickleballError):
    """Actor may not edit the match"""

    pass


class ScoreValidationError(PickleballError):
    """Score failed range, integer, tie or win-condition checks.

    Carries every violated rule so callers can show all problems at once.
    """

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__("Invalid score: " + ", ".join(self.errors))


class ConcurrencyConflict(PickleballError):
    """Match version changed since the caller last read it.

    Never retried internally: the caller re-reads and decides what to submit.
    """

    def __init__(self, match_id: int, expected_version: int, current_version: Optional[int] = None):
        self.match_id = match_id
        self.expected_version = expected_version
        self.current_version = current_version
        super().__init__(
            f"Match {match_id} was updated by another user "
            f"(expected version {expected_version}, current version {current_version}). "
            "Please refresh and try again."
        )
