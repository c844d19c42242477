# places/google_places.py
"""
Google Places media resolver: address, rating, maps URL and photo CDN URLs.

    textsearch("<name> <city>") -> place_id
    details(place_id)           -> photos, rating, address
    photo(photo_reference)      -> final CDN url (redirect Location, not the bytes)

Each step is cached separately so the API key never reaches the frontend and
repeat lookups do not bill again.
"""
import asyncio
import logging
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

import config
from TripModels import HotelOption, PlaceMedia
from cache import TtlCache

logger = logging.getLogger(__name__)

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"

# keep fields tight; every extra field is billed
DETAILS_FIELDS = ",".join([
    "place_id",
    "name",
    "formatted_address",
    "rating",
    "user_ratings_total",
    "url",
    "photos",
])

_REDIRECT_STATUSES = {301, 302, 303, 307, 308}

text_search_cache = TtlCache(config.PLACES_CACHE_TTL_S)
details_cache = TtlCache(config.PLACES_CACHE_TTL_S)
photo_redirect_cache = TtlCache(config.PLACES_CACHE_TTL_S)


class PlacesApiError(RuntimeError):
    pass


def require_google_key() -> str:
    key = config.GOOGLE_MAPS_API_KEY
    if not key:
        raise RuntimeError(
            "Missing GOOGLE_MAPS_API_KEY. Add it to your backend .env (billing must be enabled for Places APIs)."
        )
    return key


def maps_place_id_url(place_id: str) -> str:
    return f"https://www.google.com/maps/place/?q=place_id:{quote(place_id, safe='')}"


def uniq_strings(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for s in items:
        key = (s or "").strip()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(key)
    return out


async def _get_json(params: dict, url: str) -> dict:
    async with httpx.AsyncClient(timeout=config.PLACES_HTTP_TIMEOUT_S) as client:
        resp = await client.get(url, params=params, headers={"accept": "application/json"})
        if resp.status_code >= 400:
            raise PlacesApiError(f"Google API HTTP {resp.status_code}: {resp.text[:500]}")
        return resp.json()


async def google_text_search(query: str) -> List[dict]:
    cache_key = f"textsearch::{query.lower().strip()}"
    cached = text_search_cache.get(cache_key)
    if cached is not None:
        return cached

    key = require_google_key()
    data = await _get_json({"query": query, "key": key}, TEXT_SEARCH_URL)

    status = data.get("status")
    if status not in ("OK", "ZERO_RESULTS"):
        detail = f" ({data['error_message']})" if data.get("error_message") else ""
        raise PlacesApiError(f"Google Places textsearch failed: {status}{detail}")

    results = [r for r in data.get("results") or [] if r.get("place_id") and r.get("name")]
    text_search_cache.set(cache_key, results)
    return results


async def google_place_details(place_id: str) -> Optional[dict]:
    cache_key = f"details::{place_id}"
    cached = details_cache.get(cache_key)
    if cached is not None:
        return cached

    key = require_google_key()
    data = await _get_json({"place_id": place_id, "fields": DETAILS_FIELDS, "key": key}, DETAILS_URL)

    status = data.get("status")
    if status != "OK":
        if status in ("ZERO_RESULTS", "NOT_FOUND"):
            return None
        detail = f" ({data['error_message']})" if data.get("error_message") else ""
        raise PlacesApiError(f"Google Place details failed: {status}{detail}")

    result = data.get("result")
    if not result or not result.get("place_id"):
        return None
    details_cache.set(cache_key, result)
    return result


async def resolve_photo_redirect(photo_ref: str, max_width: int = 1600) -> Optional[str]:
    cache_key = f"photo::{photo_ref}::{max_width}"
    cached = photo_redirect_cache.get(cache_key)
    if cached is not None:
        return cached

    key = require_google_key()
    params = {"maxwidth": str(max_width), "photoreference": photo_ref, "key": key}
    async with httpx.AsyncClient(timeout=config.PLACES_HTTP_TIMEOUT_S, follow_redirects=False) as client:
        resp = await client.get(PHOTO_URL, params=params)

    location = resp.headers.get("location")
    if resp.status_code in _REDIRECT_STATUSES and location:
        photo_redirect_cache.set(cache_key, location)
        return location
    return None


async def _image_urls(photos: List[dict], max_images: int) -> List[str]:
    refs = uniq_strings([p.get("photo_reference") for p in photos or []])[:max_images]
    urls = []
    for ref in refs:
        final_url = await resolve_photo_redirect(ref)
        if final_url:
            urls.append(final_url)
    return urls


async def resolve_place_media(name: str, city: str, max_images: int = 5) -> Optional[PlaceMedia]:
    name = (name or "").strip()
    city = (city or "").strip()
    if not name or not city:
        return None
    max_images = max(1, min(max_images, 10))

    results = await google_text_search(f"{name} {city}")
    if not results:
        return None
    best = results[0]

    details = await google_place_details(best["place_id"]) or {}
    photos = details.get("photos") or best.get("photos") or []

    return PlaceMedia(
        placeId=best["place_id"],
        name=details.get("name") or best.get("name"),
        address=details.get("formatted_address") or best.get("formatted_address"),
        rating=details.get("rating", best.get("rating")),
        userRatingsTotal=details.get("user_ratings_total", best.get("user_ratings_total")),
        mapsUrl=details.get("url") or maps_place_id_url(best["place_id"]),
        imageUrls=await _image_urls(photos, max_images),
    )


async def resolve_places_media(
    city: str,
    places: List[str],
    max_images_per_place: int = 5,
    concurrency: int = config.PLACES_DEFAULT_CONCURRENCY,
) -> Dict[str, PlaceMedia]:
    """Fixed pool of workers pulling names off a shared cursor; per-place failures are dropped."""
    city = (city or "").strip()
    names = uniq_strings(places)[:config.PLACES_MAX_PER_REQUEST]
    concurrency = max(1, min(concurrency, 10))

    out: Dict[str, PlaceMedia] = {}
    cursor = 0

    async def worker():
        nonlocal cursor
        while cursor < len(names):
            name = names[cursor]
            cursor += 1
            try:
                media = await resolve_place_media(name, city, max_images_per_place)
            except Exception as e:
                logger.warning("[places] media lookup failed for %r: %s", name, e)
                continue
            if media:
                out[name] = media

    await asyncio.gather(*[worker() for _ in range(concurrency)])
    logger.info("[places] resolved %d/%d places for city=%s", len(out), len(names), city)
    return out


async def get_hotels_for_city(city: str, max_hotels: int = 10, max_images_per_hotel: int = 6) -> List[HotelOption]:
    city = (city or "").strip()
    if not city:
        return []
    max_hotels = max(1, min(max_hotels, 20))
    max_images_per_hotel = max(1, min(max_images_per_hotel, 10))

    results = await google_text_search(f"best hotels in {city}")
    out: List[HotelOption] = []
    for h in results[:max_hotels]:
        details = await google_place_details(h["place_id"]) or {}
        photos = details.get("photos") or h.get("photos") or []
        out.append(HotelOption(
            name=details.get("name") or h["name"],
            address=details.get("formatted_address") or h.get("formatted_address"),
            rating=details.get("rating", h.get("rating")),
            userRatingsTotal=details.get("user_ratings_total", h.get("user_ratings_total")),
            mapsUrl=details.get("url") or maps_place_id_url(h["place_id"]),
            imageUrls=await _image_urls(photos, max_images_per_hotel),
        ))
    return out
