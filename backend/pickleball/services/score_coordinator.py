"""
Score Update Coordinator

The only path by which a match score changes. Each submission:
1. loads the match (NotFoundError)
2. asks the injected predicate whether the actor may edit it (PermissionDenied)
3. validates the score against the play date's win condition (ScoreValidationError)
4. compare-and-swaps the match row on the caller's believed version (ConcurrencyConflict)
5. appends exactly one audit record for the accepted write

Rejected submissions write nothing. Conflicts are never retried here; the
caller re-reads and decides. No state is kept between calls and no lock
spans matches, so different matches update fully in parallel.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlmodel import Session

from pickleball.errors import ConcurrencyConflict, NotFoundError, PermissionDenied, ScoreValidationError
from pickleball.models.match import MatchStatus
from pickleball.services.authorization import CanEditMatch, PlayerMatchAuthorizer
from pickleball.services.score_store import (
    AuditSink,
    MatchSnapshot,
    MatchStore,
    ScoreChangeRecord,
    ScoreWrite,
    SqlAuditSink,
    SqlMatchStore,
)
from pickleball.services.score_validation import determine_winner, validate_match_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreSubmission:
    match_id: int
    team1_score: int
    team2_score: int
    expected_version: int
    actor_id: int
    reason: Optional[str] = None


@dataclass
class ScoreUpdateResult:
    match: MatchSnapshot
    audit_record: ScoreChangeRecord
    warnings: List[str] = field(default_factory=list)
    # False when the score committed but the audit append failed; retry with audit_sink.append(audit_record)
    audit_recorded: bool = True


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScoreUpdateCoordinator:
    def __init__(
        self,
        store: MatchStore,
        audit_sink: AuditSink,
        can_edit_match: CanEditMatch,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.audit_sink = audit_sink
        self.can_edit_match = can_edit_match
        self.clock = clock

    def submit_score(self, submission: ScoreSubmission) -> ScoreUpdateResult:
        match_id = submission.match_id

        current = self.store.get_match(match_id)
        if current is None:
            raise NotFoundError(f"Match {match_id} not found")

        if not self.can_edit_match(submission.actor_id, match_id):
            logger.warning("Score update denied: actor %s on match %s", submission.actor_id, match_id)
            raise PermissionDenied(f"Player {submission.actor_id} may not edit match {match_id}")

        config = self.store.get_score_config(current.play_date_id)
        validation = validate_match_score(submission.team1_score, submission.team2_score, config)
        if not validation.is_valid:
            logger.warning(
                "Score validation failed for match %s (%s-%s): %s",
                match_id,
                submission.team1_score,
                submission.team2_score,
                validation.errors,
            )
            raise ScoreValidationError(validation.errors, validation.warnings)

        if current.version != submission.expected_version:
            logger.warning(
                "Stale score update for match %s: expected version %s, current %s",
                match_id,
                submission.expected_version,
                current.version,
            )
            raise ConcurrencyConflict(match_id, submission.expected_version, current.version)

        team1_score = int(submission.team1_score)
        team2_score = int(submission.team2_score)
        winner = determine_winner(team1_score, team2_score)
        now = self.clock()
        write = ScoreWrite(
            team1_score=team1_score,
            team2_score=team2_score,
            winning_partnership_id=current.partnership1_id if winner == 1 else current.partnership2_id,
            status=MatchStatus.completed,
            recorded_by=submission.actor_id,
            recorded_at=now,
        )

        if not self.store.compare_and_swap_score(match_id, submission.expected_version, write):
            latest = self.store.get_match(match_id)
            current_version = latest.version if latest else None
            logger.warning(
                "Lost score update race on match %s: expected version %s, current %s",
                match_id,
                submission.expected_version,
                current_version,
            )
            raise ConcurrencyConflict(match_id, submission.expected_version, current_version)

        # This write as committed; the stored row may already have moved past it
        updated = replace(
            current,
            team1_score=write.team1_score,
            team2_score=write.team2_score,
            winning_partnership_id=write.winning_partnership_id,
            status=write.status,
            recorded_by=write.recorded_by,
            recorded_at=write.recorded_at,
            version=submission.expected_version + 1,
        )
        record = ScoreChangeRecord(
            match_id=match_id,
            play_date_id=current.play_date_id,
            old_team1_score=current.team1_score,
            old_team2_score=current.team2_score,
            old_version=current.version,
            new_team1_score=team1_score,
            new_team2_score=team2_score,
            new_version=updated.version,
            changed_by=submission.actor_id,
            changed_at=now,
            reason=submission.reason,
        )

        audit_recorded = True
        try:
            record = self.audit_sink.append(record)
        except Exception:
            audit_recorded = False
            logger.exception("Failed to append score change for match %s version %s", match_id, updated.version)

        logger.info(
            "Recorded score %s-%s on match %s (version %s -> %s) by player %s",
            team1_score,
            team2_score,
            match_id,
            current.version,
            updated.version,
            submission.actor_id,
        )
        return ScoreUpdateResult(
            match=updated,
            audit_record=record,
            warnings=validation.warnings,
            audit_recorded=audit_recorded,
        )


def coordinator_for_session(session: Session) -> ScoreUpdateCoordinator:
    """Coordinator wired to SQL persistence and the default player/owner edit policy."""
    return ScoreUpdateCoordinator(
        store=SqlMatchStore(session),
        audit_sink=SqlAuditSink(session),
        can_edit_match=PlayerMatchAuthorizer(session),
    )
