"""
Decision recording with the positive-decision cascade.

A decision is an upsert keyed on (candidate, actor): repeating it overwrites
direction and timestamp, so retries after a timeout never duplicate rows or
double-count in statistics. A positive decision then upserts the pair into
the saved set. That second write is best-effort: the decision row is the
source of truth and is never rolled back because the cascade failed.
"""

from typing import Any

from supabase import Client

from binder.errors import CascadeFailed, DecisionWriteFailed
from binder.models import Decision, Direction, utcnow
from binder.store import DecisionStore, SavedSetStore
from core.logging import LoggerMixin


class DecisionService(LoggerMixin):
    """Persists decisions and cascades positive ones into the saved set."""

    def __init__(self, client: Client) -> None:
        self._decisions = DecisionStore(client)
        self._saved = SavedSetStore(client)

    def record_decision(self, candidate_id: str, actor_id: str, direction: Any) -> Decision:
        """
        Record one actor's decision on one candidate.

        Args:
            candidate_id: The candidate decided on
            actor_id: The deciding actor
            direction: Direction, or one of "positive", "negative", "right", "left"

        Returns:
            The persisted decision, including the server-assigned timestamp

        Raises:
            InvalidDirection: before any write, if direction is not accepted
            DecisionWriteFailed: if the decision upsert failed
        """
        resolved = Direction.parse(direction)
        timestamp = utcnow().isoformat()

        try:
            row = self._decisions.upsert(
                candidate_id=candidate_id,
                actor_id=actor_id,
                direction=resolved.wire,
                timestamp=timestamp,
            )
        except Exception as e:
            self.logger.error(
                "Decision write failed",
                candidate_id=candidate_id,
                actor_id=actor_id,
                direction=resolved.value,
                error=str(e),
            )
            raise DecisionWriteFailed("Could not record decision", cause=e) from e

        decision = Decision.from_row(row)

        if resolved is Direction.POSITIVE:
            self._cascade_to_saved(actor_id, candidate_id, timestamp)

        self.logger.info(
            "Decision recorded",
            candidate_id=candidate_id,
            actor_id=actor_id,
            direction=resolved.value,
        )
        return decision

    def _cascade_to_saved(self, actor_id: str, candidate_id: str, timestamp: str) -> bool:
        try:
            self._saved.upsert(actor_id=actor_id, candidate_id=candidate_id, timestamp=timestamp)
            return True
        except Exception as e:
            self.logger.warning(
                "Saved-set cascade failed; decision kept",
                candidate_id=candidate_id,
                actor_id=actor_id,
                error=str(e),
                error_type=CascadeFailed.__name__,
            )
            return False
