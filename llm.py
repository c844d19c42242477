# llm.py
import logging
from typing import List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

import config
import prompts
from TripModels import AllowedLists, Itinerary, SearchResult, TripRequest
from utils import (
    JsonExtractionError,
    _truncate,
    extract_first_json_array,
    extract_first_json_object,
    message_text,
)

logger = logging.getLogger(__name__)


def make_llm(max_tokens: int, temperature: float) -> ChatGoogleGenerativeAI:
    if not config.GOOGLE_API_KEY:
        raise RuntimeError("Missing GOOGLE_API_KEY (add it to .env)")
    return ChatGoogleGenerativeAI(
        model=config.LLM_MODEL,
        api_key=config.GOOGLE_API_KEY,
        temperature=temperature,
        max_output_tokens=max_tokens,
    )


async def complete(
    system_instruction: str,
    user_content: str,
    max_tokens: int = 1200,
    temperature: float = 0.0,
) -> str:
    """One system + user turn against the chat model; returns raw text (never trusted)."""
    llm = make_llm(max_tokens=max_tokens, temperature=temperature)
    msg = await llm.ainvoke([
        SystemMessage(content=system_instruction),
        HumanMessage(content=user_content),
    ])
    return message_text(msg)


# ====== JSON repair ======
async def fix_json_only(raw: str, kind: str = "object") -> str:
    return await complete(prompts.build_fix_json_system(kind), raw or "", max_tokens=1200, temperature=0)


async def parse_json_object_safe(raw: str) -> dict:
    try:
        return extract_first_json_object(raw)
    except JsonExtractionError as e:
        logger.info("[llm] direct JSON object parse failed (%s); asking for repair", e)
    fixed = await fix_json_only(raw, "object")
    try:
        return extract_first_json_object(fixed)
    except JsonExtractionError:
        logger.warning("[llm] JSON repair did not help. RAW PREVIEW:\n%s", _truncate(fixed, 1200))
        raise


async def parse_json_array_safe(raw: str) -> list:
    try:
        return extract_first_json_array(raw)
    except JsonExtractionError as e:
        logger.info("[llm] direct JSON array parse failed (%s); asking for repair", e)
    fixed = await fix_json_only(raw, "array")
    return extract_first_json_array(fixed)


# ====== TripRequest extraction ======
async def extract_trip_request(user_prompt: str) -> str:
    return await complete(prompts.SYSTEM_EXTRACT_TRIP, user_prompt, max_tokens=450, temperature=0)


# ====== candidate extraction ======
async def extract_candidates_from_search_results(
    category: str,
    results: List[SearchResult],
    city: str,
) -> str:
    return await complete(
        prompts.build_extract_candidates_system(category, city),
        prompts.build_extract_candidates_user_msg(category, city, [r.model_dump() for r in results]),
        max_tokens=900,
        temperature=0.2,
    )


# ====== itinerary generation / evaluation / revision ======
async def generate_itinerary(trip: TripRequest, allowed: AllowedLists) -> str:
    return await complete(
        prompts.build_generate_system(trip.pace, trip.constraints),
        prompts.build_generate_user_msg(trip.model_dump(), allowed.model_dump()),
        max_tokens=1900,
        temperature=0.2,
    )


async def evaluate_itinerary(trip: TripRequest, itinerary: Itinerary, allowed: AllowedLists) -> str:
    return await complete(
        prompts.SYSTEM_EVALUATE,
        prompts.build_evaluate_user_msg(trip.model_dump(), itinerary.model_dump(), allowed.model_dump()),
        max_tokens=700,
        temperature=0,
    )


async def revise_itinerary(
    trip: TripRequest,
    itinerary,
    fixes: List[str],
    allowed: AllowedLists,
    violations: Optional[List[str]] = None,
) -> str:
    if hasattr(itinerary, "model_dump"):
        itinerary = itinerary.model_dump()
    return await complete(
        prompts.SYSTEM_REVISE,
        prompts.build_revise_user_msg(trip.model_dump(), itinerary, fixes, allowed.model_dump(), violations),
        max_tokens=1900,
        temperature=0.2,
    )
