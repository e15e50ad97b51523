"""
Deck composition.

Builds the batch of candidates shown to one actor: newest first, optionally
restricted to one category, never including a candidate the actor has
already decided on.
"""

from typing import List, Optional

from supabase import Client

from binder.errors import DeckFetchFailed
from binder.models import Candidate, DeckRequest
from binder.store import CandidateStore, DecisionStore
from config.constants import DECK_PAGE_SIZE
from core.logging import LoggerMixin


class DeckService(LoggerMixin):
    """
    Composes exclusion-aware decks.

    The exclusion set is read in full before the candidate query; if either
    query fails the whole composition fails. A deck is never returned
    without every exclusion applied.
    """

    def __init__(self, client: Client, page_size: int = DECK_PAGE_SIZE) -> None:
        self._candidates = CandidateStore(client)
        self._decisions = DecisionStore(client)
        self._page_size = page_size

    def compose_deck(self, actor_id: str, category: Optional[str] = None) -> List[Candidate]:
        """
        Return up to ``page_size`` unseen candidates, newest first.

        Args:
            actor_id: The actor the deck is for
            category: Category tag to filter on; None or "All" means no filter

        Returns:
            Candidates ordered by creation time descending. An empty list
            means nothing is left to show.

        Raises:
            DeckFetchFailed: if the exclusion set or the candidates could not be read
        """
        request = DeckRequest(actor_id=actor_id, category=category, page_size=self._page_size)
        return self.compose(request)

    def compose(self, request: DeckRequest) -> List[Candidate]:
        try:
            excluded = self._decisions.decided_candidate_ids(request.actor_id)
        except Exception as e:
            self.logger.error(
                "Exclusion set fetch failed",
                actor_id=request.actor_id,
                error=str(e),
            )
            raise DeckFetchFailed("Could not load prior decisions", cause=e) from e

        try:
            rows = self._candidates.newest(
                limit=request.page_size,
                category=request.category_filter,
                exclude_ids=excluded,
            )
            deck = [Candidate.from_row(row) for row in rows]
        except Exception as e:
            self.logger.error(
                "Candidate fetch failed",
                actor_id=request.actor_id,
                category=request.category,
                error=str(e),
            )
            raise DeckFetchFailed("Could not load candidates", cause=e) from e

        deck = deck[:request.page_size]

        self.logger.info(
            "Deck composed",
            actor_id=request.actor_id,
            category=request.category,
            excluded=len(excluded),
            size=len(deck),
        )
        return deck
