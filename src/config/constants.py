"""
Application constants for the Binder engine.

These are values that don't change based on environment but are
referenced across the services, routes and the swipe client.
"""

from dataclasses import dataclass
from typing import List


# =============================================================================
# Relations
# =============================================================================

@dataclass(frozen=True)
class Tables:
    """Names and conflict keys of the Supabase relations the engine uses."""

    CANDIDATES: str = "startups"
    DECISIONS: str = "startup_swipes"
    SAVED: str = "saved_startups"

    # Upsert conflict targets; each must match a unique constraint.
    DECISION_CONFLICT: str = "startup_id,investor_id"
    SAVED_CONFLICT: str = "investor_id,startup_id"


TABLES = Tables()

CANDIDATE_COLUMNS = (
    "id, name, image_url, description, stage, size, industry, created_at, ace_score"
)


# =============================================================================
# Deck
# =============================================================================

DECK_PAGE_SIZE = 30

# Category value meaning "no filter"
ALL_CATEGORIES = "All"

CATEGORIES: List[str] = [
    ALL_CATEGORIES,
    "Advertising",
    "Agriculture",
    "Blockchain",
    "Consumer Goods",
    "Education",
    "Energy & Greentech",
    "Fashion & Living",
    "Fintech",
    "Food & Beverage",
    "Gaming",
    "Healthcare & Life Science",
]


# =============================================================================
# Gesture
# =============================================================================

@dataclass(frozen=True)
class StackStyle:
    """Visual parameters of the rendered card stack."""

    SCALE_STEP: float = 0.05
    OPACITY_STEP: float = 0.2
    OFFSET_STEP_PX: float = 12.0

    # Degrees of rotation per pixel of horizontal drag, and its clamp
    ROTATION_PER_PX: float = 0.08
    MAX_ROTATION_DEG: float = 30.0

    # How far past the viewport edge a dismissed card travels
    EXIT_DISTANCE_PX: float = 1000.0


STACK_STYLE = StackStyle()
