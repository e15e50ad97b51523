"""
Saved-set (favorites) management.

The saved set is filled automatically by positive decisions and edited
directly from the favorites list. Entries are independent of decisions:
removing one never touches the decision that created it.
"""

from typing import List

from supabase import Client

from binder.errors import SavedSetFailed
from binder.models import SavedEntry, utcnow
from binder.store import SavedSetStore
from core.logging import LoggerMixin


class SavedSetService(LoggerMixin):
    """Read, add, remove and toggle an actor's saved candidates."""

    def __init__(self, client: Client) -> None:
        self._saved = SavedSetStore(client)

    def list_saved(self, actor_id: str) -> List[SavedEntry]:
        """The actor's saved entries, most recently saved first."""
        try:
            rows = self._saved.list_for(actor_id)
        except Exception as e:
            self.logger.error("Saved set fetch failed", actor_id=actor_id, error=str(e))
            raise SavedSetFailed("Could not load saved candidates", cause=e) from e
        return [SavedEntry.from_row(row) for row in rows]

    def save(self, actor_id: str, candidate_id: str) -> SavedEntry:
        try:
            row = self._saved.upsert(actor_id, candidate_id, utcnow().isoformat())
        except Exception as e:
            self.logger.error(
                "Save failed", actor_id=actor_id, candidate_id=candidate_id, error=str(e)
            )
            raise SavedSetFailed("Could not save candidate", cause=e) from e
        self.logger.info("Candidate saved", actor_id=actor_id, candidate_id=candidate_id)
        return SavedEntry.from_row(row)

    def unsave(self, actor_id: str, candidate_id: str) -> bool:
        """Remove an entry. Returns False when there was nothing to remove."""
        try:
            removed = self._saved.delete(actor_id, candidate_id)
        except Exception as e:
            self.logger.error(
                "Unsave failed", actor_id=actor_id, candidate_id=candidate_id, error=str(e)
            )
            raise SavedSetFailed("Could not remove saved candidate", cause=e) from e
        self.logger.info(
            "Candidate unsaved", actor_id=actor_id, candidate_id=candidate_id, removed=removed
        )
        return removed

    def toggle(self, actor_id: str, candidate_id: str) -> bool:
        """Flip the saved state of a candidate. Returns the new state."""
        try:
            currently_saved = self._saved.exists(actor_id, candidate_id)
        except Exception as e:
            raise SavedSetFailed("Could not read saved state", cause=e) from e

        if currently_saved:
            self.unsave(actor_id, candidate_id)
            return False
        self.save(actor_id, candidate_id)
        return True
