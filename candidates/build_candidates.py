# candidates/build_candidates.py
import asyncio
import logging
from typing import Dict, List, Tuple

from pydantic import ValidationError

import config
from TripModels import Candidate, SearchResult
from candidates.tavily_search import tavily_search
from llm import extract_candidates_from_search_results, parse_json_array_safe

logger = logging.getLogger(__name__)

_JUNK_TERMS = (
    "best",
    "top",
    "guide",
    "updated",
    "things to do",
    "restaurants in",
    "what's the best",
    "tripadvisor",
    "yelp",
    "opentable",
    "viator",
    "getyourguide",
)

# (category, query template); several angles per category so canonical places are not missed
SEARCH_PLAN: Tuple[Tuple[str, str], ...] = (
    ("restaurant", "best vegetarian restaurants in {city}"),
    ("attraction", "must see attractions in {city}"),
    ("attraction", "most famous landmarks in {city}"),
    ("attraction", "best museums in {city}"),
    ("attraction", "best family friendly attractions in {city}"),
    ("indoor_backup", "best indoor things to do in {city} rainy day"),
    ("indoor_backup", "best indoor attractions in {city}"),
)

CATEGORY_CAPS: Dict[str, int] = {
    "restaurant": config.CANDIDATE_CAP_RESTAURANTS,
    "attraction": config.CANDIDATE_CAP_ATTRACTIONS,
    "indoor_backup": config.CANDIDATE_CAP_INDOOR,
}


def is_junk_name(name: str) -> bool:
    if len(name) > config.JUNK_NAME_MAX_LEN:
        return True
    n = name.lower()
    return any(w in n for w in _JUNK_TERMS)


def dedupe(cands: List[Candidate]) -> List[Candidate]:
    """First occurrence wins; identity is the lowercase-trimmed name."""
    seen = set()
    out: List[Candidate] = []
    for c in cands:
        key = c.name.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(c)
    return out


async def extract_and_validate(category: str, results: List[SearchResult], city: str) -> List[Candidate]:
    if not results:
        return []
    raw = await extract_candidates_from_search_results(category, results, city)
    arr = await parse_json_array_safe(raw)

    out: List[Candidate] = []
    for item in arr:
        if not isinstance(item, dict):
            continue
        try:
            c = Candidate(**item)
        except ValidationError:
            continue
        # the model occasionally relabels; the batch decides the category
        if c.category != category:
            continue
        if not is_junk_name(c.name):
            out.append(c)
    return out


async def _search_or_empty(query: str) -> List[SearchResult]:
    try:
        return await tavily_search(query, config.SEARCH_MAX_RESULTS)
    except Exception as e:
        logger.warning("[candidates] search failed for %r: %s", query, e)
        return []


async def _extract_or_empty(category: str, results: List[SearchResult], city: str) -> List[Candidate]:
    try:
        return await extract_and_validate(category, results, city)
    except Exception as e:
        logger.warning("[candidates] extraction failed for category=%s: %s", category, e)
        return []


async def build_candidates_for_city(city: str) -> List[Candidate]:
    # 1) all searches in parallel
    queries = [(category, template.format(city=city)) for category, template in SEARCH_PLAN]
    batches = await asyncio.gather(*[_search_or_empty(q) for _, q in queries])

    # 2) one extraction per batch, also in parallel
    extracted = await asyncio.gather(*[
        _extract_or_empty(category, batch, city)
        for (category, _), batch in zip(queries, batches)
    ])

    # 3) merge in query order, dedupe, cap per category
    merged: List[Candidate] = [c for batch in extracted for c in batch]
    merged = dedupe(merged)

    out: List[Candidate] = []
    for category in ("restaurant", "attraction", "indoor_backup"):
        out.extend([c for c in merged if c.category == category][:CATEGORY_CAPS[category]])

    logger.info(
        "[candidates] city=%s searches_ok=%d/%d candidates=%d",
        city, sum(1 for b in batches if b), len(batches), len(out),
    )
    return out
