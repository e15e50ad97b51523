"""
Tests for saved-set management.
"""

import pytest

from binder.errors import SavedSetFailed
from services import DecisionService, SavedSetService


class TestSavedSet:

    def test_save_is_idempotent(self, fake_db):
        service = SavedSetService(fake_db)
        service.save("a1", "s1")
        service.save("a1", "s1")

        assert len(fake_db.rows("saved_startups")) == 1

    def test_list_newest_first(self, fake_db):
        fake_db.tables["saved_startups"] = [
            {"investor_id": "a1", "startup_id": "old", "created_at": "2025-01-01T00:00:00+00:00"},
            {"investor_id": "a1", "startup_id": "new", "created_at": "2025-02-01T00:00:00+00:00"},
            {"investor_id": "a2", "startup_id": "other", "created_at": "2025-03-01T00:00:00+00:00"},
        ]

        entries = SavedSetService(fake_db).list_saved("a1")
        assert [e.candidate_id for e in entries] == ["new", "old"]

    def test_unsave_reports_whether_anything_was_removed(self, fake_db):
        service = SavedSetService(fake_db)
        service.save("a1", "s1")

        assert service.unsave("a1", "s1") is True
        assert service.unsave("a1", "s1") is False

    def test_toggle_twice_restores_state(self, fake_db):
        service = SavedSetService(fake_db)

        assert service.toggle("a1", "s1") is True
        assert service.toggle("a1", "s1") is False
        assert fake_db.rows("saved_startups") == []

    def test_unsave_does_not_touch_decision(self, fake_db):
        DecisionService(fake_db).record_decision("s1", "a1", "right")

        SavedSetService(fake_db).unsave("a1", "s1")

        assert fake_db.rows("saved_startups") == []
        assert len(fake_db.rows("startup_swipes")) == 1

    @pytest.mark.parametrize("op,call", [
        ("select", lambda s: s.list_saved("a1")),
        ("upsert", lambda s: s.save("a1", "s1")),
        ("delete", lambda s: s.unsave("a1", "s1")),
        ("select", lambda s: s.toggle("a1", "s1")),
    ])
    def test_storage_failures_raise(self, fake_db, op, call):
        fake_db.fail("saved_startups", op)

        with pytest.raises(SavedSetFailed):
            call(SavedSetService(fake_db))
