# tests/test_enforcement_service.py
"""Plate lookup, ticket/warning issuance, voiding and the activity log."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import timedelta
from parking_api.errors import ConflictError, NotFoundError, ValidationError
from parking_api.models.enforcement_activity import EnforcementActivity
from parking_api.repositories.enforcement import ActivityStore
from parking_api.services import enforcement_service, permit_service, registry_service
from parking_api.services.action_policy import RecommendedAction
from parking_api.services.status_resolver import AuthorizationStatus
from parking_api.utils.time_window import TimeWindow


def ticket(db, clock, officer_id="O1", plate="XYZ789", **kwargs):
    return enforcement_service.issue_ticket(
        db, clock, license_plate=plate, state_province="CA", officer_id=officer_id,
        violation_type="no_permit", violation_reason="No valid permit displayed", **kwargs,
    )


def warning(db, clock, officer_id="O1", plate="XYZ789"):
    return enforcement_service.issue_warning(
        db, clock, license_plate=plate, state_province="CA", officer_id=officer_id,
        warning_type="courtesy", warning_reason="Permit not visible",
    )


class TestIssueTicket:
    def test_ticket_is_normalised_and_logged(self, db, clock, officers):
        violation = ticket(db, clock, plate="xyz789", fine_amount=75, evidence_photo_urls=["a.jpg", "b.jpg"],
                           gps_latitude=34.05, gps_longitude=-118.24)
        assert violation.license_plate == "XYZ789"
        assert violation.status == "issued"
        assert violation.ticket_number.startswith("TK-20260310-")
        assert violation.evidence_photo_urls == ["a.jpg", "b.jpg"]

        activity = db.query(EnforcementActivity).filter(EnforcementActivity.activity_type == "ticket").one()
        assert activity.result == "violation_issued"
        assert activity.license_plate == "XYZ789"

    def test_unknown_officer(self, db, clock, officers):
        with pytest.raises(NotFoundError):
            ticket(db, clock, officer_id="nobody")

    def test_bad_gps(self, db, clock, officers):
        with pytest.raises(ValidationError, match="GPS"):
            ticket(db, clock, gps_latitude=120.0)

    def test_missing_reason(self, db, clock, officers):
        with pytest.raises(ValidationError, match="violation_reason"):
            enforcement_service.issue_ticket(
                db, clock, license_plate="XYZ789", state_province="CA", officer_id="O1",
                violation_type="no_permit", violation_reason="",
            )

    def test_explicit_id_reuse_is_a_conflict(self, db, clock, officers):
        ticket(db, clock, ticket_id="t-1")
        with pytest.raises(ConflictError):
            ticket(db, clock, officer_id="O2", ticket_id="t-1")


class TestVoidTicket:
    def test_void_then_void_again_is_a_conflict(self, db, clock, officers):
        violation = ticket(db, clock)
        voided = enforcement_service.void_ticket(db, clock, violation.id, "Permit shown on appeal")
        assert voided.status == "voided"
        assert voided.voided_reason == "Permit shown on appeal"
        assert voided.duplicate_bucket is None
        with pytest.raises(ConflictError, match="already voided"):
            enforcement_service.void_ticket(db, clock, violation.id, "again")

    def test_void_unknown_ticket(self, db, clock, officers):
        with pytest.raises(NotFoundError):
            enforcement_service.void_ticket(db, clock, "missing", "reason")


class TestLookupPlate:
    def test_unregistered_plate_first_offence(self, db, clock, officers):
        lookup = enforcement_service.lookup_plate(db, clock, "nope12", "CA")
        assert not lookup.is_registered
        assert lookup.resolution.status == AuthorizationStatus.NO_PERMIT
        assert lookup.assessment.action == RecommendedAction.WARNING

    def test_registered_with_guest_permit_is_authorized(self, db, clock, officers, vehicle):
        start = clock.now() - timedelta(hours=1)
        submitted = permit_service.submit_request(
            db, clock, vehicle.id, "guest", TimeWindow(start=start, end=start + timedelta(hours=24)),
        )
        lookup = enforcement_service.lookup_plate(db, clock, "ABC123", "CA")

        assert lookup.is_registered
        assert lookup.resolution.status == AuthorizationStatus.AUTHORIZED
        assert lookup.assessment.action == RecommendedAction.NONE
        assert [p.id for p in lookup.active_permits] == [submitted.permit.id]
        assert lookup.tenant.email == "dana@example.com"
        assert [p.id for p in lookup.permit_history] == [submitted.permit.id]

    def test_grace_then_expired(self, db, clock, officers, vehicle):
        start = clock.now() - timedelta(hours=2)
        permit_service.submit_request(
            db, clock, vehicle.id, "guest", TimeWindow(start=start, end=start + timedelta(hours=2)),
        )
        clock.advance(minutes=4, seconds=59)
        lookup = enforcement_service.lookup_plate(db, clock, "ABC123", "CA")
        assert lookup.resolution.status == AuthorizationStatus.GRACE_PERIOD
        assert lookup.assessment.action == RecommendedAction.VERIFY_MANUALLY

        clock.advance(seconds=2)
        lookup = enforcement_service.lookup_plate(db, clock, "ABC123", "CA")
        assert lookup.resolution.status == AuthorizationStatus.EXPIRED

    def test_pending_request_is_listed(self, db, clock, officers, vehicle):
        start = clock.now()
        permit_service.submit_request(
            db, clock, vehicle.id, "resident", TimeWindow(start=start, end=start + timedelta(days=365)),
        )
        lookup = enforcement_service.lookup_plate(db, clock, "ABC123", "CA")
        assert lookup.resolution.status == AuthorizationStatus.NO_PERMIT
        assert len(lookup.pending_requests) == 1

    def test_repeat_offender(self, db, clock, officers):
        for _ in range(3):
            ticket(db, clock)
            clock.advance(hours=2)
        lookup = enforcement_service.lookup_plate(db, clock, "XYZ789", "CA")
        assert lookup.assessment.is_repeat_offender
        assert lookup.assessment.violation_count_30_days == 3
        assert lookup.assessment.action == RecommendedAction.TICKET

    def test_voided_and_old_tickets_do_not_count(self, db, clock, officers):
        old = ticket(db, clock)
        clock.advance(days=31)
        voided = ticket(db, clock)
        enforcement_service.void_ticket(db, clock, voided.id, "Keyed wrong")
        lookup = enforcement_service.lookup_plate(db, clock, "XYZ789", "CA")
        assert lookup.assessment.violation_count_30_days == 0
        assert old.id not in [v.id for v in lookup.recent_violations]

    def test_prior_warning_escalates_to_ticket(self, db, clock, officers):
        warning(db, clock)
        lookup = enforcement_service.lookup_plate(db, clock, "XYZ789", "CA")
        assert lookup.assessment.warning_count_30_days == 1
        assert lookup.assessment.action == RecommendedAction.TICKET

    def test_lookup_with_officer_logs_scan(self, db, clock, officers):
        enforcement_service.lookup_plate(db, clock, "XYZ789", "CA", officer_id="O1")
        scans = ActivityStore(db).search(officer_id="O1", activity_type="scan")
        assert len(scans) == 1
        assert scans[0].result == "no_permit"

    def test_default_jurisdiction(self, db, clock, officers):
        assert enforcement_service.lookup_plate(db, clock, "XYZ789").state_province == "CA"


class TestActivityLog:
    def test_unknown_activity_type(self, db, clock, officers):
        with pytest.raises(ValidationError):
            enforcement_service.log_activity(db, clock, "O1", "lunch")

    def test_summary_periods(self, db, clock, officers):
        enforcement_service.log_activity(db, clock, "O1", "patrol", location="Lot B")
        ticket(db, clock)
        enforcement_service.log_activity(db, clock, "O1", "scan", performed_at=clock.now() - timedelta(days=3))

        today = enforcement_service.activity_summary(db, clock, "O1", "today")["summary"]
        assert today == {"total_activities": 2, "total_scans": 0, "total_tickets": 1,
                         "total_warnings": 0, "total_patrols": 1}
        week = enforcement_service.activity_summary(db, clock, "O1", "week")["summary"]
        assert week["total_scans"] == 1
        assert week["total_activities"] == 3


class TestRegistrationLookup:
    def test_registered_vehicle_without_permit(self, db, clock, vehicle):
        registration = registry_service.lookup_registration(db, clock, "abc123")
        assert registration.is_registered
        assert registration.state_province == "CA"
        assert registration.tenant.email == "dana@example.com"
        assert registration.active_permits == []
        assert db.query(EnforcementActivity).count() == 0

    def test_unregistered_plate(self, db, clock):
        registration = registry_service.lookup_registration(db, clock, "XYZ789", "nv")
        assert not registration.is_registered
        assert registration.state_province == "NV"
        assert registration.tenant is None

    def test_bad_plate(self, db, clock):
        with pytest.raises(ValidationError):
            registry_service.lookup_registration(db, clock, "NOT-A-PLATE")
