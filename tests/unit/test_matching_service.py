"""Unit tests for the fire-and-forget auto-match task."""

from lostfound.models import ItemType, Match
from lostfound.matching.engine import MatchingStorageError
from lostfound.services import matching_service
from lostfound.services.matching_service import run_auto_match


class TestRunAutoMatch:

    def test_creates_matches_in_own_session(self, db, make_item):
        lost = make_item()
        make_item(type=ItemType.FOUND)

        result = run_auto_match(str(lost.id))

        assert result is not None
        assert len(result.matches_created) == 1
        assert db.query(Match).count() == 1

    def test_storage_failure_is_swallowed(self, db, make_item, monkeypatch):
        lost = make_item()

        def broken(*args, **kwargs):
            raise MatchingStorageError("items table unavailable")

        monkeypatch.setattr(matching_service, "create_auto_matches", broken)

        assert run_auto_match(str(lost.id)) is None

    def test_session_closed_after_failure(self, monkeypatch):
        closed = []

        class FakeSession:
            def close(self):
                closed.append(True)

        def broken(*args, **kwargs):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(matching_service, "create_auto_matches", broken)

        assert run_auto_match("any-id", session_factory=FakeSession) is None
        assert closed == [True]
