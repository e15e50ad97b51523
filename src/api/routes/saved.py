"""
Saved Startups Routes.

The actor's favorites list. Right swipes add to it automatically; these
endpoints let the actor curate it directly.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_saved_service, to_http_exception
from binder.errors import BinderError
from core.auth import Actor, require_auth
from services import SavedSetService


router = APIRouter(prefix="/saved", tags=["Saved"])


@router.get("", summary="List saved candidates")
def list_saved(
    actor: Actor = Depends(require_auth),
    saved_service: SavedSetService = Depends(get_saved_service),
) -> Dict[str, Any]:
    try:
        entries = saved_service.list_saved(actor.id)
    except BinderError as e:
        raise to_http_exception(e)
    return {"saved": [entry.to_wire() for entry in entries]}


@router.put("/{candidate_id}", summary="Save a candidate")
def save_candidate(
    candidate_id: str,
    actor: Actor = Depends(require_auth),
    saved_service: SavedSetService = Depends(get_saved_service),
) -> Dict[str, Any]:
    try:
        return saved_service.save(actor.id, candidate_id).to_wire()
    except BinderError as e:
        raise to_http_exception(e)


@router.delete("/{candidate_id}", summary="Remove a saved candidate")
def unsave_candidate(
    candidate_id: str,
    actor: Actor = Depends(require_auth),
    saved_service: SavedSetService = Depends(get_saved_service),
) -> Dict[str, bool]:
    try:
        return {"removed": saved_service.unsave(actor.id, candidate_id)}
    except BinderError as e:
        raise to_http_exception(e)


@router.post("/{candidate_id}/toggle", summary="Toggle a saved candidate")
def toggle_saved(
    candidate_id: str,
    actor: Actor = Depends(require_auth),
    saved_service: SavedSetService = Depends(get_saved_service),
) -> Dict[str, bool]:
    try:
        return {"saved": saved_service.toggle(actor.id, candidate_id)}
    except BinderError as e:
        raise to_http_exception(e)
