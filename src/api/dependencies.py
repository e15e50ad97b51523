"""
FastAPI dependency providers and error translation shared by the routers.
"""

from fastapi import Depends, HTTPException, status
from supabase import Client

from binder.errors import BinderError, InvalidDirection
from config.database import SupabaseClientError, get_supabase_client
from config.settings import get_settings
from services import DeckService, DecisionService, SavedSetService, StatsService


def get_client() -> Client:
    try:
        return get_supabase_client()
    except SupabaseClientError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database not available: {str(e)}",
        )


def get_deck_service(client: Client = Depends(get_client)) -> DeckService:
    return DeckService(client, page_size=get_settings().deck_page_size)


def get_decision_service(client: Client = Depends(get_client)) -> DecisionService:
    return DecisionService(client)


def get_stats_service(client: Client = Depends(get_client)) -> StatsService:
    return StatsService(client)


def get_saved_service(client: Client = Depends(get_client)) -> SavedSetService:
    return SavedSetService(client)


def to_http_exception(error: BinderError) -> HTTPException:
    """Map a Binder error onto the status code the clients expect."""
    if isinstance(error, InvalidDirection):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)

    detail = {"error": type(error).__name__, "message": error.message, "retryable": error.retryable}
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
