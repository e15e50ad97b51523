"""
Services module for business logic.

Provides the server side of the Binder engine: deck composition,
decision recording, statistics aggregation and saved-set management.
"""

from services.deck_service import DeckService
from services.decision_service import DecisionService
from services.stats_service import StatsService
from services.saved_service import SavedSetService

__all__ = [
    "DeckService",
    "DecisionService",
    "StatsService",
    "SavedSetService",
]
