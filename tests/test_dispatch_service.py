# tests/test_dispatch_service.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.exceptions import DispatchStateError, NotFoundError
from app.models.chauffeur import Chauffeur
from app.models.enums import NotificationType, TripDispatchStatus, TripPurpose, TripStatus
from app.models.notification import SystemNotification
from app.models.trip import Trip
from app.models.vehicle import Vehicle
from app.schemas.trip import TripCreate
from app.services.chauffeur_service import delete_chauffeur
from app.services.dispatch_service import (
    DEFAULT_REJECTION_REASON, accept_dispatch, cancel_trip, create_trip,
    dispatch_trip_to_chauffeur, reject_dispatch, update_trip_status,
)
from tests.factories import add_chauffeur, add_vehicle, assert_dual_links_consistent


@pytest.fixture
def fleet(db):
    add_vehicle(db, "v1", plate="KA05MN7788")
    add_chauffeur(db, "c1", name="Ravi")
    add_chauffeur(db, "c2", name="Suresh")
    trip = create_trip(db, TripCreate(trip_name="Airport Drop", origin="HQ", destination="BLR Airport",
                                      trip_purpose=TripPurpose.POOL))
    return trip


def offer(db, trip, chauffeur_id="c1", vehicle_id="v1"):
    return dispatch_trip_to_chauffeur(db, trip.id, chauffeur_id, vehicle_id, TripPurpose.GUEST)


def notifications(db, notification_type):
    return db.query(SystemNotification).filter(SystemNotification.type == notification_type).all()


class TestDispatchService:
    def test_pool_trip_starts_pending(self, fleet):
        assert fleet.status == TripStatus.PLANNED
        assert fleet.dispatch_status == TripDispatchStatus.PENDING

    def test_non_pool_trip_has_no_dispatch_status(self, db):
        trip = create_trip(db, TripCreate(trip_name="Client visit", trip_purpose=TripPurpose.EMPLOYEE))
        assert trip.dispatch_status is None

    def test_dispatch_scenario(self, db, fleet):
        trip = offer(db, fleet)

        assert trip.dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE
        assert trip.offered_to_chauffeur_id == "c1"
        assert trip.offered_vehicle_id == "v1"
        assert trip.trip_purpose == TripPurpose.GUEST

        sent = notifications(db, NotificationType.TRIP_DISPATCH)
        assert len(sent) == 1
        assert sent[0].related_trip_id == trip.id
        assert sent[0].related_chauffeur_id == "c1"
        assert sent[0].related_vehicle_id == "v1"
        assert "Ravi" in sent[0].subject

    def test_dispatch_unknown_records_raise(self, db, fleet):
        with pytest.raises(NotFoundError):
            dispatch_trip_to_chauffeur(db, "missing", "c1", "v1", TripPurpose.GUEST)
        with pytest.raises(NotFoundError):
            offer(db, fleet, chauffeur_id="ghost")
        with pytest.raises(NotFoundError):
            offer(db, fleet, vehicle_id="ghost")
        assert db.get(Trip, fleet.id).dispatch_status == TripDispatchStatus.PENDING

    def test_accept_binds_trip_chauffeur_and_vehicle(self, db, fleet):
        offer(db, fleet)
        trip = accept_dispatch(db, fleet.id, chauffeur_id="c1")

        assert trip.dispatch_status == TripDispatchStatus.ACCEPTED
        assert trip.status == TripStatus.PLANNED
        assert trip.chauffeur_id == "c1"
        assert trip.vehicle_id == "v1"
        assert trip.offered_to_chauffeur_id is None
        db.expire_all()
        assert db.get(Chauffeur, "c1").assigned_vehicle_id == "v1"
        assert db.get(Vehicle, "v1").assigned_chauffeur_id == "c1"
        assert_dual_links_consistent(db)
        assert len(notifications(db, NotificationType.TRIP_ACCEPTED)) == 1

    def test_accept_moves_chauffeur_off_previous_vehicle(self, db, fleet):
        add_vehicle(db, "v2")
        offer(db, fleet, vehicle_id="v2")
        accept_dispatch(db, fleet.id)

        second = create_trip(db, TripCreate(trip_name="Return", trip_purpose=TripPurpose.POOL))
        offer(db, second, vehicle_id="v1")
        accept_dispatch(db, second.id)

        db.expire_all()
        assert db.get(Vehicle, "v2").assigned_chauffeur_id is None
        assert db.get(Chauffeur, "c1").assigned_vehicle_id == "v1"
        assert_dual_links_consistent(db)

    def test_reject_records_reason_and_allows_redispatch(self, db, fleet):
        offer(db, fleet)
        trip = reject_dispatch(db, fleet.id)

        assert trip.dispatch_status == TripDispatchStatus.REJECTED
        assert trip.rejection_reason == DEFAULT_REJECTION_REASON
        assert trip.offered_to_chauffeur_id is None
        rejected = notifications(db, NotificationType.TRIP_REJECTED)
        assert len(rejected) == 1
        assert DEFAULT_REJECTION_REASON in rejected[0].details

        trip = offer(db, fleet, chauffeur_id="c2")
        assert trip.dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE
        assert trip.offered_to_chauffeur_id == "c2"
        assert trip.rejection_reason is None

    def test_custom_rejection_reason(self, db, fleet):
        offer(db, fleet)
        trip = reject_dispatch(db, fleet.id, reason="Vehicle in service")
        assert trip.rejection_reason == "Vehicle in service"

    def test_second_answer_is_refused(self, db, fleet):
        offer(db, fleet)
        accept_dispatch(db, fleet.id)

        with pytest.raises(DispatchStateError):
            reject_dispatch(db, fleet.id)
        with pytest.raises(DispatchStateError):
            accept_dispatch(db, fleet.id)
        assert db.get(Trip, fleet.id).dispatch_status == TripDispatchStatus.ACCEPTED

    def test_answer_from_wrong_chauffeur_is_refused(self, db, fleet):
        offer(db, fleet)
        with pytest.raises(DispatchStateError):
            accept_dispatch(db, fleet.id, chauffeur_id="c2")
        assert db.get(Trip, fleet.id).dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE

    def test_answer_without_offer_is_refused(self, db, fleet):
        with pytest.raises(DispatchStateError):
            accept_dispatch(db, fleet.id)

    def test_accepted_trip_cannot_be_redispatched(self, db, fleet):
        offer(db, fleet)
        accept_dispatch(db, fleet.id)
        with pytest.raises(DispatchStateError):
            offer(db, fleet, chauffeur_id="c2")

    def test_open_offer_can_be_redispatched(self, db, fleet):
        offer(db, fleet)
        trip = offer(db, fleet, chauffeur_id="c2")

        assert trip.dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE
        assert trip.offered_to_chauffeur_id == "c2"
        assert len(notifications(db, NotificationType.TRIP_DISPATCH)) == 2
        with pytest.raises(DispatchStateError):
            accept_dispatch(db, fleet.id, chauffeur_id="c1")
        assert accept_dispatch(db, fleet.id, chauffeur_id="c2").chauffeur_id == "c2"

    def test_offer_to_removed_chauffeur_can_be_handed_on(self, db, fleet):
        offer(db, fleet)
        delete_chauffeur(db, "c1")

        trip = offer(db, fleet, chauffeur_id="c2")
        assert trip.dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE
        assert trip.offered_to_chauffeur_id == "c2"

    def test_cancelled_trip_voids_open_offer(self, db, fleet):
        offer(db, fleet)
        cancel_trip(db, fleet.id)

        with pytest.raises(DispatchStateError):
            accept_dispatch(db, fleet.id)
        with pytest.raises(DispatchStateError):
            offer(db, fleet)
        assert db.get(Trip, fleet.id).status == TripStatus.CANCELLED

    def test_terminal_status_sticks(self, db, fleet):
        update_trip_status(db, fleet.id, TripStatus.ONGOING)
        update_trip_status(db, fleet.id, TripStatus.COMPLETED)
        with pytest.raises(DispatchStateError):
            update_trip_status(db, fleet.id, TripStatus.ONGOING)
        assert update_trip_status(db, fleet.id, TripStatus.COMPLETED).status == TripStatus.COMPLETED
