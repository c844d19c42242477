# candidates/tavily_search.py
import logging
from typing import List

from tavily import AsyncTavilyClient

import config
from TripModels import SearchResult

logger = logging.getLogger(__name__)


async def tavily_search(query: str, max_results: int = 6) -> List[SearchResult]:
    """
    Tavily web search -> normalized [{title, url, content}].
    Raises on missing credentials or transport errors; callers decide what to skip.
    """
    api_key = config.TAVILY_API_KEY
    if not api_key:
        raise RuntimeError("Missing TAVILY_API_KEY in .env")

    client = AsyncTavilyClient(api_key=api_key)
    res = await client.search(query, max_results=max_results, search_depth="basic")

    out: List[SearchResult] = []
    for r in (res or {}).get("results", []) or []:
        url = r.get("url")
        if not url:
            continue
        out.append(SearchResult(title=r.get("title") or "", url=url, content=r.get("content") or ""))
    logger.debug("[search] %r -> %d results", query, len(out))
    return out
