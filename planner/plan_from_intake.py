# planner/plan_from_intake.py
import logging
from typing import List, Optional

import config
from TripModels import Candidate, HotelOption, PlanIntakeRequest, PlanResponse, TripDates, TripRequest
from cache import TtlCache
from candidates.build_candidates import build_candidates_for_city
from places.google_places import get_hotels_for_city
from planner.allowed_lists import project_allowed_lists
from planner.flows.PlanLoopFlow import run_plan_loop
from planner.timeline import to_ui_itinerary
from run_artifacts import RunArtifacts

logger = logging.getLogger(__name__)

candidate_cache = TtlCache(config.CANDIDATE_CACHE_TTL_S)


def trip_from_intake(intake: PlanIntakeRequest) -> TripRequest:
    return TripRequest(
        destination=intake.destination,
        tripLengthDays=intake.trip_length_days(),
        dates=TripDates(start=intake.startDate, end=intake.endDate),
        travelers=intake.travelers,
        budgetLevel=intake.budgetLevel,
        pace=intake.pace,
        interests=intake.interests,
        constraints=intake.constraints,
        missingInfoQuestions=[],
    )


async def get_candidates(destination: str) -> List[Candidate]:
    """Candidate pool per destination, cached for a day; empty pools are not cached."""
    cache_key = f"candidates:{destination.strip().lower()}"
    candidates = candidate_cache.get(cache_key)
    if candidates is not None:
        logger.info("[plan] candidate cache hit: %s (%d)", cache_key, len(candidates))
        return candidates

    candidates = await build_candidates_for_city(destination)
    if candidates:
        candidate_cache.set(cache_key, candidates)
    return candidates


async def _hotels_or_empty(destination: str, max_hotels: Optional[int]) -> List[HotelOption]:
    try:
        return await get_hotels_for_city(destination, max_hotels=max_hotels or 10)
    except Exception as e:
        logger.warning("[plan] hotel lookup failed for %s: %s", destination, e)
        return []


async def plan_from_intake(intake: PlanIntakeRequest, artifacts: Optional[RunArtifacts] = None) -> PlanResponse:
    artifacts = artifacts or RunArtifacts()
    trip = trip_from_intake(intake)
    artifacts.write_json("trip.json", trip)
    logger.info(
        "[plan] request=%s destination=%s days=%d pace=%s",
        artifacts.request_id, trip.destination, trip.tripLengthDays, trip.pace,
    )

    # 1) candidates + allowed lists
    candidates = await get_candidates(trip.destination)
    if not candidates:
        raise RuntimeError(f"No venue candidates found for {trip.destination!r}; cannot build an itinerary")
    artifacts.write_json("candidates.json", [c.model_dump() for c in candidates])
    allowed = project_allowed_lists(candidates)
    artifacts.write_json("allowedLists.json", allowed)

    # 2) generate / validate / repair
    itinerary, validation = await run_plan_loop(trip, allowed, artifacts)

    # 3) optional hotels module
    hotels = None
    if intake.hotels and intake.hotels.enabled:
        hotels = await _hotels_or_empty(trip.destination, intake.hotels.maxHotels)

    return PlanResponse(
        itinerary=to_ui_itinerary(itinerary),
        allowedLists=allowed,
        validation=validation,
        hotels=hotels,
    )
