"""
Binder domain: models, error taxonomy and storage access for the swipe deck.
"""

from binder.errors import (
    BinderError,
    CascadeFailed,
    DeckFetchFailed,
    DecisionWriteFailed,
    InvalidDirection,
    SavedSetFailed,
    StatsFetchFailed,
    TruncatedResult,
)
from binder.models import (
    Candidate,
    CandidateStats,
    Decision,
    DeckRequest,
    Direction,
    SavedEntry,
    StatsSnapshot,
)

__all__ = [
    "BinderError",
    "CascadeFailed",
    "DeckFetchFailed",
    "DecisionWriteFailed",
    "InvalidDirection",
    "SavedSetFailed",
    "StatsFetchFailed",
    "TruncatedResult",
    "Candidate",
    "CandidateStats",
    "Decision",
    "DeckRequest",
    "Direction",
    "SavedEntry",
    "StatsSnapshot",
]
