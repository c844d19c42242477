# routers/places_media.py
import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from TripModels import PlacesMediaRequest, PlacesMediaResponse
from places.google_places import require_google_key, resolve_places_media

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/places/media", response_model=PlacesMediaResponse, response_model_exclude_none=True)
async def places_media(req: PlacesMediaRequest):
    try:
        require_google_key()
    except RuntimeError as e:
        logger.error("[places-media] %s", e)
        return PlainTextResponse(str(e), status_code=500)

    media = await resolve_places_media(
        req.city,
        req.places,
        max_images_per_place=req.maxImagesPerPlace,
        concurrency=req.concurrency,
    )
    return PlacesMediaResponse(media=media)
