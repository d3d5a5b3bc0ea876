# app/services/response_simulator.py
"""
Demo stand-ins for the chauffeur mobile app.

In production the app calls POST /trips/{id}/accept|reject and completes its
own signup; in demo mode these fire-once tasks answer on its behalf:

  - Dispatch response: after a uniform 10–15 s delay, accept with p=0.8,
    otherwise reject with the default reason.
  - Onboarding signup: after 15–25 s an invited chauffeur moves to
    Awaiting Approval.

Pending tasks are tracked by key and can be cancelled (re-dispatch or trip
cancellation). Each task opens its own DB session. A task that finds its
trip or chauffeur gone or already resolved logs and exits.
"""

import asyncio
import random
from typing import Optional
from app.config import settings
from app.database import SessionLocal
from app.exceptions import FleetError
from app.services.chauffeur_service import mark_awaiting_approval
from app.services.dispatch_service import accept_dispatch, reject_dispatch
from app.utils.logger import get_logger

logger = get_logger(__name__)

_pending: dict[str, asyncio.Task] = {}


async def simulate_chauffeur_response(trip_id: str, chauffeur_id: str, session_factory=SessionLocal,
                                      rng: Optional[random.Random] = None, sleep=asyncio.sleep) -> Optional[str]:
    """
    Wait, then accept or reject the offer on the chauffeur's behalf.
    Returns the resulting dispatch status, or None when the offer was no longer open.
    """
    rng = rng or random
    delay = rng.uniform(settings.DISPATCH_RESPONSE_MIN_SECONDS, settings.DISPATCH_RESPONSE_MAX_SECONDS)
    await sleep(delay)

    accepts = rng.random() < settings.DISPATCH_ACCEPT_PROBABILITY
    db = session_factory()
    try:
        if accepts:
            trip = accept_dispatch(db, trip_id, chauffeur_id=chauffeur_id)
        else:
            trip = reject_dispatch(db, trip_id, chauffeur_id=chauffeur_id)
        return trip.dispatch_status
    except FleetError as e:
        db.rollback()
        logger.warning(f"[DISPATCH] Simulated response for trip {trip_id} dropped: {e}")
        return None
    finally:
        db.close()


async def simulate_chauffeur_signup(chauffeur_id: str, session_factory=SessionLocal,
                                    rng: Optional[random.Random] = None, sleep=asyncio.sleep) -> bool:
    rng = rng or random
    await sleep(rng.uniform(settings.ONBOARDING_DELAY_MIN_SECONDS, settings.ONBOARDING_DELAY_MAX_SECONDS))
    db = session_factory()
    try:
        mark_awaiting_approval(db, chauffeur_id)
        return True
    except FleetError as e:
        db.rollback()
        logger.warning(f"[ONBOARDING] Simulated signup for {chauffeur_id} dropped: {e}")
        return False
    finally:
        db.close()


def _track(key: str, coro) -> asyncio.Task:
    cancel_pending(key)
    task = asyncio.create_task(coro, name=f"simulator-{key}")
    _pending[key] = task
    task.add_done_callback(lambda t: _pending.pop(key, None) if _pending.get(key) is t else None)
    return task


def schedule_dispatch_response(trip_id: str, chauffeur_id: str) -> Optional[asyncio.Task]:
    """Queue a simulated answer for a freshly dispatched trip. Replaces any earlier one."""
    if not settings.DISPATCH_SIMULATION_ENABLED:
        return None
    logger.info(f"[DISPATCH] Simulating chauffeur {chauffeur_id} response for trip {trip_id}")
    return _track(f"trip:{trip_id}", simulate_chauffeur_response(trip_id, chauffeur_id))


def schedule_chauffeur_signup(chauffeur_id: str) -> Optional[asyncio.Task]:
    if not settings.ONBOARDING_SIMULATION_ENABLED:
        return None
    return _track(f"chauffeur:{chauffeur_id}", simulate_chauffeur_signup(chauffeur_id))


def cancel_pending(key: str) -> bool:
    task = _pending.pop(key, None)
    if task is None or task.done():
        return False
    task.cancel()
    logger.info(f"Cancelled pending simulator task {key}")
    return True


def cancel_trip_response(trip_id: str) -> bool:
    return cancel_pending(f"trip:{trip_id}")


def cancel_all():
    """Stop every pending simulator task. Called on shutdown."""
    for key in list(_pending):
        cancel_pending(key)


def pending_count() -> int:
    return sum(1 for t in _pending.values() if not t.done())
