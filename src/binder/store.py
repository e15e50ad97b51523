"""
Supabase-backed stores for the Binder relations.

Thin wrappers over PostgREST queries; they return raw rows and let storage
exceptions propagate. Services own error translation and logging.

Relations:
    startups        - candidates (read-only here)
    startup_swipes  - decisions, unique on (startup_id, investor_id)
    saved_startups  - saved set, unique on (investor_id, startup_id)
"""

from typing import Any, Dict, Iterable, List, Optional

from supabase import Client

from binder.errors import TruncatedResult
from config.constants import CANDIDATE_COLUMNS, TABLES


Row = Dict[str, Any]


def _complete(relation: str, response) -> List[Row]:
    """
    Return the rows of a ``count="exact"`` response, or raise when PostgREST
    capped the result below the true row count (db max-rows).
    """
    rows = response.data or []
    total = getattr(response, "count", None)
    if total is not None and total > len(rows):
        raise TruncatedResult(relation, len(rows), total)
    return rows


class CandidateStore:
    """Read access to the candidate relation."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def newest(
        self,
        limit: int,
        category: Optional[str] = None,
        exclude_ids: Iterable[str] = (),
    ) -> List[Row]:
        query = (
            self._client.table(TABLES.CANDIDATES)
            .select(CANDIDATE_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
        )
        if category:
            query = query.contains("industry", [category])

        excluded = list(exclude_ids)
        if excluded:
            query = query.not_.in_("id", excluded)

        return query.execute().data or []


class DecisionStore:
    """The decision relation. Uniqueness per (candidate, actor) is enforced by upsert."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def decided_candidate_ids(self, actor_id: str) -> List[str]:
        """Every candidate id the actor has decided on, in any direction."""
        response = (
            self._client.table(TABLES.DECISIONS)
            .select("startup_id", count="exact")
            .eq("investor_id", actor_id)
            .execute()
        )
        rows = _complete(TABLES.DECISIONS, response)
        return [str(row["startup_id"]) for row in rows]

    def upsert(
        self,
        candidate_id: str,
        actor_id: str,
        direction: str,
        timestamp: str,
    ) -> Row:
        payload = {
            "startup_id": candidate_id,
            "investor_id": actor_id,
            "direction": direction,
            "created_at": timestamp,
        }
        response = (
            self._client.table(TABLES.DECISIONS)
            .upsert(payload, on_conflict=TABLES.DECISION_CONFLICT)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else payload

    def directions_for(self, candidate_ids: List[str]) -> List[Row]:
        """(startup_id, direction) for every decision on the given candidates."""
        response = (
            self._client.table(TABLES.DECISIONS)
            .select("startup_id, direction", count="exact")
            .in_("startup_id", candidate_ids)
            .execute()
        )
        return _complete(TABLES.DECISIONS, response)


class SavedSetStore:
    """The saved-set relation. Uniqueness per (actor, candidate) is enforced by upsert."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def upsert(self, actor_id: str, candidate_id: str, timestamp: str) -> Row:
        payload = {
            "investor_id": actor_id,
            "startup_id": candidate_id,
            "created_at": timestamp,
        }
        response = (
            self._client.table(TABLES.SAVED)
            .upsert(payload, on_conflict=TABLES.SAVED_CONFLICT)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else payload

    def delete(self, actor_id: str, candidate_id: str) -> bool:
        response = (
            self._client.table(TABLES.SAVED)
            .delete()
            .eq("investor_id", actor_id)
            .eq("startup_id", candidate_id)
            .execute()
        )
        return bool(response.data)

    def exists(self, actor_id: str, candidate_id: str) -> bool:
        response = (
            self._client.table(TABLES.SAVED)
            .select("startup_id")
            .eq("investor_id", actor_id)
            .eq("startup_id", candidate_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def list_for(self, actor_id: str) -> List[Row]:
        response = (
            self._client.table(TABLES.SAVED)
            .select("investor_id, startup_id, created_at")
            .eq("investor_id", actor_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []
