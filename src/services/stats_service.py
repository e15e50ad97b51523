"""
Per-candidate decision statistics.

Pull-based snapshots computed on demand from the decision relation; nothing
is cached server-side.
"""

from typing import Dict, Iterable

from supabase import Client

from binder.errors import InvalidDirection, StatsFetchFailed
from binder.models import CandidateStats, Direction, StatsSnapshot
from binder.store import DecisionStore
from core.logging import LoggerMixin


class StatsService(LoggerMixin):
    """Aggregates decision counts for a batch of candidates in one query."""

    def __init__(self, client: Client) -> None:
        self._decisions = DecisionStore(client)

    def aggregate_stats(self, candidate_ids: Iterable[str]) -> StatsSnapshot:
        """
        Count total and positive decisions per candidate.

        Every requested id is present in the result, at {0, 0} when nobody
        has decided on it yet. Intended for deck-sized batches; there is no
        pagination.

        Raises:
            StatsFetchFailed: if the decision rows could not be read, or one
                of them holds a direction other than left or right
        """
        ids = list(dict.fromkeys(str(c) for c in candidate_ids))
        stats: Dict[str, CandidateStats] = {cid: CandidateStats() for cid in ids}
        if not ids:
            return stats

        try:
            rows = self._decisions.directions_for(ids)
        except Exception as e:
            self.logger.error("Stats fetch failed", candidates=len(ids), error=str(e))
            raise StatsFetchFailed("Could not load decision statistics", cause=e) from e

        for row in rows:
            entry = stats.get(str(row["startup_id"]))
            if entry is None:
                continue
            try:
                direction = Direction.parse(row["direction"])
            except InvalidDirection as e:
                self.logger.error(
                    "Stored decision has an unknown direction",
                    candidate_id=row["startup_id"],
                    direction=row["direction"],
                )
                raise StatsFetchFailed("Could not load decision statistics", cause=e) from e
            entry.record(direction)

        self.logger.debug("Stats aggregated", candidates=len(ids), decisions=len(rows))
        return stats

    def candidate_stats(self, candidate_id: str) -> CandidateStats:
        """Statistics for a single candidate."""
        return self.aggregate_stats([candidate_id])[str(candidate_id)]
