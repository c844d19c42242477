# routers/plan.py
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from TripModels import PlanIntakeRequest
from planner.plan_from_intake import plan_from_intake
from utils import _json

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/plan")
async def plan(request: Request):
    """
    intake -> candidates -> allowed lists -> generate/validate/repair -> UI timeline.
    Degraded (still invalid after repairs) results are returned with validation.ok=false.
    """
    # 1) intake validation (400, plain text)
    try:
        body = await request.json()
    except ValueError as e:
        logger.info("[plan] rejected non-JSON body: %s", e)
        return PlainTextResponse(f"Request body must be a JSON object: {e}", status_code=400)

    try:
        intake = PlanIntakeRequest.model_validate(body)
    except ValidationError as e:
        logger.info("[plan] rejected intake: %s", e)
        return PlainTextResponse(str(e), status_code=400)

    logger.debug("[plan] incoming request:\n%s", _json(intake))

    # 2) pipeline (500, plain text)
    try:
        result = await plan_from_intake(intake)
    except Exception as e:
        logger.exception("[plan] planning failed")
        return PlainTextResponse(str(e) or "Server error", status_code=500)

    return JSONResponse(content=result.model_dump(exclude_none=True))
