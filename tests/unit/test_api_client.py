"""
Tests for the HTTP client used by the swipe engine.
"""

from unittest.mock import MagicMock

import pytest
import requests

from binder.models import Direction
from engines.api_client import BinderApiClient, BinderApiError


def _response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload if payload is not None else {}
    resp.text = ""
    return resp


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def api(session):
    return BinderApiClient("token-123", base_url="http://binder.test/", timeout=5, session=session)


class TestBinderApiClient:

    def test_bearer_header(self, api, session):
        assert session.headers["Authorization"] == "Bearer token-123"

    def test_compose_deck(self, api, session, startup_row_factory):
        from binder.models import Candidate

        wire = Candidate.from_row(startup_row_factory(1)).to_wire()
        session.request.return_value = _response(payload={"candidates": [wire]})

        deck = api.compose_deck("Fintech")

        assert [c.id for c in deck] == ["startup-001"]
        session.request.assert_called_once_with(
            "GET", "http://binder.test/decisions/deck",
            timeout=5, params={"category": "Fintech"},
        )

    def test_all_category_sends_no_filter(self, api, session):
        session.request.return_value = _response(payload={"candidates": []})

        assert api.compose_deck() == []
        assert session.request.call_args.kwargs["params"] is None

    def test_aggregate_stats(self, api, session):
        session.request.return_value = _response(payload={"c1": {"total": 3, "positive": 2}})

        stats = api.aggregate_stats(["c1"])

        assert stats["c1"].positive == 2
        assert session.request.call_args.kwargs["json"] == {"candidateIds": ["c1"]}

    def test_record_decision_sends_wire_direction(self, api, session):
        session.request.return_value = _response(payload={
            "candidateId": "c1",
            "actorId": "investor-a",
            "direction": "left",
            "timestamp": "2025-01-01T00:00:00+00:00",
        })

        decision = api.record_decision("c1", Direction.NEGATIVE)

        assert decision.direction is Direction.NEGATIVE
        assert session.request.call_args.kwargs["json"] == {"candidateId": "c1", "direction": "left"}

    def test_http_error(self, api, session):
        session.request.return_value = _response(
            503, {"detail": {"error": "DeckFetchFailed", "retryable": True}}
        )

        with pytest.raises(BinderApiError) as exc_info:
            api.compose_deck()

        assert exc_info.value.status_code == 503
        assert exc_info.value.retryable is True

    def test_client_error_is_not_retryable(self, api, session):
        session.request.return_value = _response(400, {"detail": "Invalid direction"})

        with pytest.raises(BinderApiError) as exc_info:
            api.record_decision("c1", Direction.POSITIVE)

        assert exc_info.value.retryable is False

    def test_network_error(self, api, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(BinderApiError) as exc_info:
            api.aggregate_stats(["c1"])

        assert exc_info.value.status_code is None
        assert exc_info.value.retryable is True
