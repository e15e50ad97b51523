"""HTTP client for the Binder API, used by the swipe engine."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import requests

from binder.models import Candidate, CandidateStats, Decision, Direction, StatsSnapshot
from config.settings import get_settings


class BinderApiError(RuntimeError):
    """Raised for Binder API failures."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code is None or self.status_code >= 500


class BinderApiClient:
    """
    Bearer-authenticated client for the three deck endpoints.

    The actor is whoever the access token belongs to; the client never sends
    an actor id of its own.
    """

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {access_token}"})

    # ---------------------------------------------------------------------
    # Endpoints
    # ---------------------------------------------------------------------

    def compose_deck(self, category: Optional[str] = None) -> List[Candidate]:
        params = {"category": category} if category else None
        payload = self._request("GET", "/decisions/deck", params=params)
        return [Candidate.model_validate(item) for item in payload.get("candidates", [])]

    def aggregate_stats(self, candidate_ids: Iterable[str]) -> StatsSnapshot:
        payload = self._request(
            "POST", "/decisions/stats", json={"candidateIds": list(candidate_ids)}
        )
        return {cid: CandidateStats.model_validate(entry) for cid, entry in payload.items()}

    def record_decision(self, candidate_id: str, direction: Direction) -> Decision:
        payload = self._request(
            "POST",
            "/decisions",
            json={"candidateId": candidate_id, "direction": Direction.parse(direction).wire},
        )
        return Decision.model_validate(payload)

    def close(self) -> None:
        self._session.close()

    # ---------------------------------------------------------------------
    # Transport
    # ---------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise BinderApiError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail")
            except ValueError:
                detail = resp.text
            raise BinderApiError(
                f"{method} {path} returned {resp.status_code}: {detail}",
                status_code=resp.status_code,
            )

        return resp.json()
