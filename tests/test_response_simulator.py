# tests/test_response_simulator.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from app.models.chauffeur import Chauffeur
from app.models.enums import ChauffeurOnboardingStatus, TripDispatchStatus, TripPurpose
from app.models.trip import Trip
from app.schemas.trip import TripCreate
from app.services import response_simulator
from app.services.dispatch_service import accept_dispatch, cancel_trip, create_trip, dispatch_trip_to_chauffeur
from app.services.response_simulator import simulate_chauffeur_response, simulate_chauffeur_signup
from tests.factories import add_chauffeur, add_vehicle


def make_rng(roll, delay=12.5):
    rng = MagicMock()
    rng.uniform.return_value = delay
    rng.random.return_value = roll
    return rng


@pytest.fixture
def offered_trip(db):
    add_vehicle(db, "v1")
    add_chauffeur(db, "c1")
    trip = create_trip(db, TripCreate(trip_name="Pool run", trip_purpose=TripPurpose.POOL))
    dispatch_trip_to_chauffeur(db, trip.id, "c1", "v1", TripPurpose.POOL)
    return trip.id


def fresh_trip(session_factory, trip_id):
    session = session_factory()
    try:
        return session.get(Trip, trip_id)
    finally:
        session.close()


class TestSimulatedResponses:
    @pytest.mark.asyncio
    async def test_waits_within_response_window_then_accepts(self, session_factory, offered_trip):
        rng = make_rng(roll=0.1)
        sleep = AsyncMock()

        result = await simulate_chauffeur_response(offered_trip, "c1", session_factory, rng=rng, sleep=sleep)

        rng.uniform.assert_called_once_with(10, 15)
        sleep.assert_awaited_once_with(12.5)
        assert result == TripDispatchStatus.ACCEPTED
        trip = fresh_trip(session_factory, offered_trip)
        assert trip.dispatch_status == TripDispatchStatus.ACCEPTED
        assert trip.chauffeur_id == "c1"

    @pytest.mark.asyncio
    async def test_roll_above_probability_rejects(self, session_factory, offered_trip):
        result = await simulate_chauffeur_response(offered_trip, "c1", session_factory,
                                                   rng=make_rng(roll=0.8), sleep=AsyncMock())

        assert result == TripDispatchStatus.REJECTED
        trip = fresh_trip(session_factory, offered_trip)
        assert trip.dispatch_status == TripDispatchStatus.REJECTED
        assert trip.rejection_reason

    @pytest.mark.asyncio
    @pytest.mark.parametrize("roll", [0.0, 0.3, 0.79, 0.8, 0.99])
    async def test_exactly_one_outcome(self, session_factory, offered_trip, roll):
        await simulate_chauffeur_response(offered_trip, "c1", session_factory,
                                          rng=make_rng(roll=roll), sleep=AsyncMock())
        status = fresh_trip(session_factory, offered_trip).dispatch_status
        assert status in (TripDispatchStatus.ACCEPTED, TripDispatchStatus.REJECTED)

    @pytest.mark.asyncio
    async def test_response_after_manual_answer_is_dropped(self, db, session_factory, offered_trip):
        accept_dispatch(db, offered_trip)

        result = await simulate_chauffeur_response(offered_trip, "c1", session_factory,
                                                   rng=make_rng(roll=0.95), sleep=AsyncMock())

        assert result is None
        assert fresh_trip(session_factory, offered_trip).dispatch_status == TripDispatchStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_response_for_cancelled_trip_is_dropped(self, db, session_factory, offered_trip):
        cancel_trip(db, offered_trip)
        result = await simulate_chauffeur_response(offered_trip, "c1", session_factory,
                                                   rng=make_rng(roll=0.1), sleep=AsyncMock())
        assert result is None
        assert fresh_trip(session_factory, offered_trip).dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE

    @pytest.mark.asyncio
    async def test_response_from_withdrawn_offer_is_dropped(self, db, session_factory, offered_trip):
        add_chauffeur(db, "c2")
        dispatch_trip_to_chauffeur(db, offered_trip, "c2", "v1", TripPurpose.POOL)

        result = await simulate_chauffeur_response(offered_trip, "c1", session_factory,
                                                   rng=make_rng(roll=0.1), sleep=AsyncMock())
        assert result is None
        trip = fresh_trip(session_factory, offered_trip)
        assert trip.dispatch_status == TripDispatchStatus.AWAITING_ACCEPTANCE
        assert trip.offered_to_chauffeur_id == "c2"

    @pytest.mark.asyncio
    async def test_response_for_deleted_trip_is_dropped(self, session_factory):
        result = await simulate_chauffeur_response("gone", "c1", session_factory,
                                                   rng=make_rng(roll=0.1), sleep=AsyncMock())
        assert result is None

    @pytest.mark.asyncio
    async def test_signup_moves_invited_chauffeur_to_awaiting(self, db, session_factory):
        add_chauffeur(db, "c9", status=ChauffeurOnboardingStatus.INVITED)
        sleep = AsyncMock()

        assert await simulate_chauffeur_signup("c9", session_factory, rng=make_rng(0, delay=20), sleep=sleep)

        sleep.assert_awaited_once_with(20)
        session = session_factory()
        try:
            assert session.get(Chauffeur, "c9").onboarding_status == ChauffeurOnboardingStatus.AWAITING_APPROVAL
        finally:
            session.close()

    @pytest.mark.asyncio
    async def test_signup_for_removed_chauffeur_is_dropped(self, session_factory):
        assert not await simulate_chauffeur_signup("ghost", session_factory, rng=make_rng(0), sleep=AsyncMock())


class TestTaskBookkeeping:
    @pytest.mark.asyncio
    async def test_schedule_disabled_returns_none(self):
        with patch.object(response_simulator.settings, "DISPATCH_SIMULATION_ENABLED", False):
            assert response_simulator.schedule_dispatch_response("t1", "c1") is None
        assert response_simulator.pending_count() == 0

    @pytest.mark.asyncio
    async def test_redispatch_replaces_and_cancel_stops_pending_task(self):
        started = asyncio.Event()

        async def never_answers(trip_id, chauffeur_id):
            started.set()
            await asyncio.sleep(3600)

        with patch.object(response_simulator.settings, "DISPATCH_SIMULATION_ENABLED", True), \
             patch.object(response_simulator, "simulate_chauffeur_response", never_answers):
            first = response_simulator.schedule_dispatch_response("t1", "c1")
            second = response_simulator.schedule_dispatch_response("t1", "c2")
            await started.wait()

            assert response_simulator.pending_count() == 1
            assert response_simulator.cancel_trip_response("t1")
            await asyncio.gather(first, second, return_exceptions=True)

        assert first.cancelled()
        assert second.cancelled()
        assert response_simulator.pending_count() == 0
        assert not response_simulator.cancel_trip_response("t1")
