# tests/test_duplicate_guard.py
"""Same-officer duplicate ticket suppression, against a real session."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import timedelta
from parking_api.errors import ConflictError
from parking_api.repositories.enforcement import ViolationStore
from parking_api.services import duplicate_guard
from parking_api.services.duplicate_guard import duplicate_bucket, is_duplicate
from parking_api.services.enforcement_service import issue_ticket, void_ticket


def ticket(db, clock, officer_id, plate="XYZ789", **kwargs):
    return issue_ticket(
        db, clock, license_plate=plate, state_province="CA", officer_id=officer_id,
        violation_type="no_permit", violation_reason="No valid permit displayed", **kwargs,
    )


class TestDuplicateGuard:
    def test_same_officer_within_hour_is_refused(self, db, clock, officers):
        ticket(db, clock, "O1")
        clock.advance(minutes=30)
        with pytest.raises(ConflictError, match="Duplicate ticket"):
            ticket(db, clock, "O1")
        assert len(ViolationStore(db).search(plate="XYZ789")) == 1

    def test_other_officer_may_ticket_same_plate(self, db, clock, officers):
        ticket(db, clock, "O1")
        clock.advance(minutes=30)
        ticket(db, clock, "O2")
        assert len(ViolationStore(db).search(plate="XYZ789")) == 2

    def test_after_an_hour_a_new_ticket_is_allowed(self, db, clock, officers):
        ticket(db, clock, "O1")
        clock.advance(minutes=61)
        ticket(db, clock, "O1")
        assert len(ViolationStore(db).search(officer_id="O1")) == 2

    def test_other_plate_is_not_a_duplicate(self, db, clock, officers):
        ticket(db, clock, "O1")
        ticket(db, clock, "O1", plate="QRS456")

    def test_voided_ticket_does_not_block(self, db, clock, officers):
        first = ticket(db, clock, "O1")
        void_ticket(db, clock, first.id, "Wrong plate keyed")
        clock.advance(minutes=5)
        ticket(db, clock, "O1")
        assert not is_duplicate(ViolationStore(db), "XYZ789", "CA", "O2", clock.now())

    def test_window_is_relative_to_issuance_instant(self, db, clock, officers):
        ticket(db, clock, "O1")
        store = ViolationStore(db)
        assert is_duplicate(store, "XYZ789", "CA", "O1", clock.now() + timedelta(minutes=59))
        assert not is_duplicate(store, "XYZ789", "CA", "O1", clock.now() + timedelta(minutes=60))
        # A ticket issued later than `at` is outside the trailing window
        assert not is_duplicate(store, "XYZ789", "CA", "O1", clock.now() - timedelta(minutes=1))

    def test_bucket_is_the_issuance_hour(self, clock):
        assert duplicate_bucket(clock.now() + timedelta(minutes=42)) == "202603101400"

    def test_bucket_follows_a_shorter_window(self, clock):
        window = timedelta(minutes=15)
        assert duplicate_bucket(clock.now() + timedelta(minutes=14), window) == "202603101400"
        assert duplicate_bucket(clock.now() + timedelta(minutes=20), window) == "202603101415"

    def test_short_window_allows_ticket_in_same_hour(self, db, clock, officers, monkeypatch):
        window = timedelta(minutes=15)
        monkeypatch.setattr(duplicate_guard.is_duplicate, "__defaults__", (window,))
        monkeypatch.setattr(duplicate_guard.duplicate_bucket, "__defaults__", (window,))

        ticket(db, clock, "O1")
        clock.advance(minutes=20)
        second = ticket(db, clock, "O1")
        assert second.duplicate_bucket == "202603101415"
        assert len(ViolationStore(db).search(plate="XYZ789")) == 2
