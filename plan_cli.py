# plan_cli.py
"""
Batch path: free-text trip intent -> itinerary, with run artifacts on disk.

    python plan_cli.py "Plan a 3-day trip to Chicago for a couple, vegetarian, mid budget."
"""
import argparse
import asyncio
import json
import logging
import sys

import config
from TripModels import TripRequest
from llm import extract_trip_request, parse_json_object_safe
from planner.allowed_lists import project_allowed_lists
from planner.flows.PlanLoopFlow import run_plan_loop
from planner.plan_from_intake import get_candidates
from run_artifacts import RunArtifacts

logger = logging.getLogger("plan_cli")

DEFAULT_PROMPT = "Plan a 3-day trip to Chicago for a couple, vegetarian, mid budget."


async def run(user_prompt: str, artifacts: RunArtifacts) -> dict:
    # 1) TripRequest from free text
    raw_trip = await extract_trip_request(user_prompt)
    artifacts.write_text("rawTripRequest.txt", raw_trip)
    trip = TripRequest(**(await parse_json_object_safe(raw_trip)))

    # 2) candidates (cached by destination) + allowed lists
    candidates = await get_candidates(trip.destination)
    if not candidates:
        raise RuntimeError(f"No venue candidates found for {trip.destination!r}")
    artifacts.write_json("candidates.json", [c.model_dump() for c in candidates])
    allowed = project_allowed_lists(candidates)
    artifacts.write_json("allowedLists.json", allowed)

    # 3) generate / validate / repair / quality pass
    itinerary, validation = await run_plan_loop(trip, allowed, artifacts)

    return {
        "requestId": artifacts.request_id,
        "trip": trip.model_dump(),
        "itinerary": itinerary.model_dump(),
        "validation": validation.model_dump(),
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Plan a trip itinerary from a free-text request.")
    parser.add_argument("prompt", nargs="*", help="trip request in plain words")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s %(message)s")
    user_prompt = " ".join(args.prompt).strip() or DEFAULT_PROMPT
    artifacts = RunArtifacts()

    try:
        result = asyncio.run(run(user_prompt, artifacts))
    except Exception as e:
        logger.exception("Fatal Error: %s", e)
        return 1

    print("\nREQUEST ID:", result["requestId"])
    print("\nTRIP REQUEST:\n", json.dumps(result["trip"], ensure_ascii=False, indent=2))
    print("\nFINAL ITINERARY:\n", json.dumps(result["itinerary"], ensure_ascii=False, indent=2))
    print("\nVALIDATION:\n", json.dumps(result["validation"], ensure_ascii=False, indent=2))
    if artifacts.enabled:
        print(f"\nSaved run artifacts in: {artifacts.dir}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
