"""
Win-condition rules for match scores.

Pure functions, no I/O. Errors block a score; warnings are informational
and travel alongside a successful result.
"""
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pickleball.config import DEFAULT_TARGET_SCORE, MAX_SCORE_HEADROOM
from pickleball.errors import ConfigurationError
from pickleball.models.play_date import WinCondition

# Warning thresholds
HIGH_SCORE_MARGIN_OVER_TARGET = 10
LARGE_SCORE_DIFFERENCE = 15


@dataclass(frozen=True)
class ScoreConfig:
    win_condition: WinCondition
    target_score: int = DEFAULT_TARGET_SCORE
    min_score: int = 0
    max_score: int = DEFAULT_TARGET_SCORE + MAX_SCORE_HEADROOM

    def __post_init__(self):
        try:
            condition = WinCondition.parse(self.win_condition)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        object.__setattr__(self, "win_condition", condition)

    @classmethod
    def for_play_date(cls, play_date) -> "ScoreConfig":
        return cls.for_target(play_date.win_condition, play_date.target_score)

    @classmethod
    def for_target(cls, win_condition, target_score: int) -> "ScoreConfig":
        return cls(
            win_condition=win_condition,
            target_score=target_score,
            min_score=0,
            max_score=target_score + MAX_SCORE_HEADROOM,
        )


@dataclass
class ScoreValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_score_config(config: ScoreConfig) -> None:
    """
    Raises:
        ConfigurationError: negative minimum or a target the maximum cannot reach
    """
    if config.min_score < 0:
        raise ConfigurationError(f"min_score cannot be negative, got {config.min_score}")
    if not config.min_score < config.target_score <= config.max_score:
        raise ConfigurationError(
            f"target_score must be within ({config.min_score}, {config.max_score}], got {config.target_score}"
        )


def _is_whole_number(score: Any) -> bool:
    if isinstance(score, bool):
        return False
    if isinstance(score, int):
        return True
    return isinstance(score, float) and score.is_integer()


def validate_score_value(score: Any, config: ScoreConfig) -> ScoreValidationResult:
    """Range and integer checks for a single team score."""
    errors: List[str] = []

    if not _is_whole_number(score):
        errors.append("Score must be a whole number")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return ScoreValidationResult(is_valid=False, errors=errors)

    if score < config.min_score:
        errors.append(f"Score cannot be less than {config.min_score}")
    if score > config.max_score:
        errors.append(f"Score cannot be greater than {config.max_score}")

    return ScoreValidationResult(is_valid=not errors, errors=errors)


def validate_win_condition(team1_score: int, team2_score: int, config: ScoreConfig) -> ScoreValidationResult:
    errors: List[str] = []
    warnings: List[str] = []

    high = max(team1_score, team2_score)
    low = min(team1_score, team2_score)
    margin = high - low
    target = config.target_score

    if team1_score == team2_score:
        return ScoreValidationResult(is_valid=False, errors=["Match cannot end in a tie"])

    if high < target:
        errors.append(f"Winning team must reach {target} points")
    elif config.win_condition == WinCondition.win_by_2 and margin < 2:
        errors.append("Winning team must win by at least 2 points")

    if high > target + HIGH_SCORE_MARGIN_OVER_TARGET:
        warnings.append(f"Score of {high} is unusually high for target of {target}")
    if margin > LARGE_SCORE_DIFFERENCE:
        warnings.append(f"Large score difference ({margin}) - please verify scores are correct")

    return ScoreValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_match_score(team1_score: Any, team2_score: Any, config: ScoreConfig) -> ScoreValidationResult:
    """
    Validate a complete match score.

    Per-score range/integer checks run first; win-condition checks only run
    when both scores are individually valid. All violated rules are reported.
    """
    errors: List[str] = []
    for score in (team1_score, team2_score):
        errors.extend(validate_score_value(score, config).errors)
    if errors:
        return ScoreValidationResult(is_valid=False, errors=errors)

    return validate_win_condition(int(team1_score), int(team2_score), config)


def determine_winner(team1_score: int, team2_score: int) -> Optional[int]:
    """1 or 2 for the higher score; None on a tie (validation rejects ties)."""
    if team1_score > team2_score:
        return 1
    if team2_score > team1_score:
        return 2
    return None


def is_match_complete(team1_score: Optional[int], team2_score: Optional[int]) -> bool:
    return team1_score is not None and team2_score is not None and team1_score >= 0 and team2_score >= 0


@dataclass(frozen=True)
class CommonScore:
    team1: int
    team2: int
    label: str


def common_scores(target_score: int) -> List[CommonScore]:
    """Quick-entry score suggestions for a target."""
    pairs = [
        (target_score, 0),
        (target_score, 1),
        (target_score, 2),
        (target_score, target_score - 1),
        (target_score, target_score - 2),
    ]
    if target_score >= 11:
        pairs.append((target_score + 1, target_score - 1))
        pairs.append((target_score + 2, target_score))
    return [CommonScore(team1=a, team2=b, label=f"{a}-{b}") for a, b in pairs]


def parse_score(text: str) -> Optional[int]:
    """Parse manual entry; None unless the text is a plain non-negative integer."""
    stripped = (text or "").strip()
    if not re.fullmatch(r"[0-9]+", stripped):
        return None
    return int(stripped)


def format_score(score: Optional[int]) -> str:
    return "-" if score is None else str(score)
