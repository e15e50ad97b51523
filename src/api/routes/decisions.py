"""
Binder Decision Routes.

Endpoints behind the swipe deck: compose a deck, record a swipe, and read
swipe statistics for the cards on screen.

All endpoints require JWT authentication. Directions travel as "left" /
"right" on the wire.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import Field

from api.dependencies import (
    get_deck_service,
    get_decision_service,
    get_stats_service,
    to_http_exception,
)
from binder.errors import BinderError
from binder.models import WireModel
from config.constants import CATEGORIES
from config.settings import get_settings
from core.auth import Actor, ensure_same_actor, require_auth
from services import DeckService, DecisionService, StatsService


router = APIRouter(prefix="/decisions", tags=["Binder"])


# =============================================================================
# Request Models
# =============================================================================

class DecisionRequest(WireModel):
    """A swipe on one candidate."""
    candidate_id: str = Field(..., min_length=1, description="ID of the swiped candidate")
    actor_id: Optional[str] = Field(
        default=None,
        description="Swiping actor; must match the token subject when given"
    )
    # Untyped and optional: missing or unknown values reach the service and get a 400
    direction: Any = Field(default=None, description="'left' or 'right'")


class StatsRequest(WireModel):
    """Candidates to aggregate swipe statistics for."""
    candidate_ids: List[str] = Field(default_factory=list)


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/deck", summary="Compose a swipe deck")
def compose_deck(
    actor_id: Optional[str] = Query(default=None, alias="actor"),
    category: Optional[str] = Query(default=None, description="Category filter; 'All' for none"),
    actor: Actor = Depends(require_auth),
    deck_service: DeckService = Depends(get_deck_service),
) -> Dict[str, Any]:
    """
    Up to 30 candidates the actor has not decided on yet, newest first.

    An empty list means the actor has seen everything in this category.
    """
    actor_id = ensure_same_actor(actor, actor_id)
    try:
        deck = deck_service.compose_deck(actor_id, category)
    except BinderError as e:
        raise to_http_exception(e)

    return {"candidates": [candidate.to_wire() for candidate in deck]}


@router.post("", summary="Record a swipe")
def record_decision(
    request: DecisionRequest,
    actor: Actor = Depends(require_auth),
    decision_service: DecisionService = Depends(get_decision_service),
) -> Dict[str, Any]:
    """
    Record or overwrite the actor's decision on a candidate.

    A right swipe also adds the candidate to the actor's saved set.
    """
    actor_id = ensure_same_actor(actor, request.actor_id)
    try:
        decision = decision_service.record_decision(
            request.candidate_id, actor_id, request.direction
        )
    except BinderError as e:
        raise to_http_exception(e)

    return decision.to_wire()


@router.post("/stats", summary="Bulk swipe statistics")
def aggregate_stats(
    request: StatsRequest,
    actor: Actor = Depends(require_auth),
    stats_service: StatsService = Depends(get_stats_service),
) -> Dict[str, Dict[str, int]]:
    """
    Total and right-swipe counts per requested candidate.

    Candidates nobody has swiped on are returned with zero counts.
    """
    limit = get_settings().stats_batch_limit
    if len(request.candidate_ids) > limit:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"At most {limit} candidate ids per request",
        )

    try:
        stats = stats_service.aggregate_stats(request.candidate_ids)
    except BinderError as e:
        raise to_http_exception(e)

    return {candidate_id: entry.to_wire() for candidate_id, entry in stats.items()}


@router.get("/stats/{candidate_id}", summary="Swipe statistics for one candidate")
def candidate_stats(
    candidate_id: str,
    actor: Actor = Depends(require_auth),
    stats_service: StatsService = Depends(get_stats_service),
) -> Dict[str, int]:
    try:
        return stats_service.candidate_stats(candidate_id).to_wire()
    except BinderError as e:
        raise to_http_exception(e)


@router.get("/categories", summary="Deck category filters")
def list_categories(actor: Actor = Depends(require_auth)) -> Dict[str, List[str]]:
    return {"categories": list(CATEGORIES)}
