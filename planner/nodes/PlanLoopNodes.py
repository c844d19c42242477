# planner/nodes/PlanLoopNodes.py
import logging
from typing import List, Optional, Tuple

from pydantic import ValidationError

import config
from TripModels import Itinerary, QualityReport, ValidationResult
from llm import evaluate_itinerary, generate_itinerary, parse_json_object_safe, revise_itinerary
from planner.PlanLoopState import PlanLoopState
from planner.validate import validate_itinerary
from prompts import FIX_VIOLATIONS, SCHEMA_FIX_FIXES
from run_artifacts import RunArtifacts
from utils import JsonExtractionError, _truncate

logger = logging.getLogger(__name__)

SHAPE_VIOLATION = "Itinerary JSON must include summary (string) and days (array)"


class PlanGenerationError(RuntimeError):
    """No itinerary could be produced at all (fatal for the request)."""


def _artifacts(state: PlanLoopState) -> RunArtifacts:
    return state.get("artifacts") or RunArtifacts(enabled=False)


def looks_like_itinerary(obj) -> bool:
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("summary"), str)
        and isinstance(obj.get("days"), list)
    )


def coerce_itinerary(obj) -> Tuple[Optional[Itinerary], List[str]]:
    """Shape gate between untrusted model JSON and the typed Itinerary."""
    if not looks_like_itinerary(obj):
        return None, [SHAPE_VIOLATION]
    try:
        return Itinerary(**obj), []
    except ValidationError as e:
        errors = []
        for err in e.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            errors.append(f"Itinerary schema error at {loc}: {err.get('msg')}")
        return None, errors


async def _parse_candidate(raw: str) -> Tuple[Optional[dict], Optional[Itinerary], List[str]]:
    try:
        obj = await parse_json_object_safe(raw)
    except JsonExtractionError as e:
        return None, None, [f"Revision output is not parseable JSON: {e}"]
    itinerary, errors = coerce_itinerary(obj)
    return obj, itinerary, errors


# 1) generate
async def generate_node(state: PlanLoopState) -> dict:
    trip, allowed = state["trip"], state["allowed"]
    artifacts = _artifacts(state)

    raw = await generate_itinerary(trip, allowed)
    artifacts.write_text("rawItinerary.txt", raw)
    logger.debug("[plan-loop] RAW_MODEL_OUTPUT:\n%s", _truncate(raw))

    try:
        obj = await parse_json_object_safe(raw)
    except JsonExtractionError as e:
        logger.exception("[plan-loop] generation output is not parseable JSON")
        raise PlanGenerationError(
            f"Model did not return parseable JSON ({e}). Check {artifacts.path('rawItinerary.txt')}"
        ) from e

    itinerary, errors = coerce_itinerary(obj)
    if itinerary is None:
        logger.warning("[plan-loop] generation output is not itinerary-shaped: %s", errors)

    return {
        "itinerary": itinerary,
        "raw_object": obj,
        "shape_errors": errors,
        "repair_round": 0,
        "validation_count": 0,
    }


# 2) validate
async def validate_node(state: PlanLoopState) -> dict:
    itinerary = state.get("itinerary")
    if itinerary is None:
        validation = ValidationResult(ok=False, violations=list(state.get("shape_errors") or [SHAPE_VIOLATION]))
    else:
        validation = validate_itinerary(state["trip"], itinerary, state["allowed"])

    count = state.get("validation_count", 0) + 1
    _artifacts(state).write_json(f"validation{count}.json", validation)
    logger.info(
        "[plan-loop] validation #%d ok=%s violations=%d (repair_round=%d)",
        count, validation.ok, len(validation.violations), state.get("repair_round", 0),
    )
    return {"validation": validation, "validation_count": count}


def route_after_validate(state: PlanLoopState) -> str:
    if state["validation"].ok:
        return "evaluate" if config.ENABLE_QUALITY_PASS else "done"
    if state.get("repair_round", 0) < config.MAX_REPAIR_ROUNDS:
        return "repair"
    logger.warning("[plan-loop] repair budget exhausted; returning best-effort itinerary")
    return "done"


# 3) repair
async def repair_node(state: PlanLoopState) -> dict:
    trip, allowed = state["trip"], state["allowed"]
    artifacts = _artifacts(state)
    round_no = state.get("repair_round", 0) + 1
    violations = state["validation"].violations

    current = state.get("itinerary")
    payload = current.model_dump() if current is not None else (state.get("raw_object") or {})

    raw = await revise_itinerary(trip, payload, [FIX_VIOLATIONS], allowed, violations)
    artifacts.write_text(f"rawRevise{round_no}.txt", raw)
    obj, revised, errors = await _parse_candidate(raw)

    # partial/invalid revise output -> one schema-fix revise
    if revised is None:
        logger.warning("[plan-loop] repair #%d not itinerary-shaped (%s); asking for a full object", round_no, errors)
        raw_fix = await revise_itinerary(trip, payload, SCHEMA_FIX_FIXES + [FIX_VIOLATIONS], allowed, violations)
        artifacts.write_text(f"rawRevise{round_no}_schemaFix.txt", raw_fix)
        obj, revised, errors = await _parse_candidate(raw_fix)

    if revised is None:
        logger.warning("[plan-loop] repair #%d produced no usable itinerary; keeping previous", round_no)
        return {"repair_round": round_no}

    return {"itinerary": revised, "raw_object": obj, "shape_errors": [], "repair_round": round_no}


# 4) quality evaluation (advisory)
async def evaluate_node(state: PlanLoopState) -> dict:
    artifacts = _artifacts(state)
    try:
        raw = await evaluate_itinerary(state["trip"], state["itinerary"], state["allowed"])
        artifacts.write_text("rawEval.txt", raw)
        obj = await parse_json_object_safe(raw)
    except Exception as e:
        logger.warning("[plan-loop] evaluator failed, skipping quality pass: %s", e)
        return {"quality": None}

    score = obj.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        score = 0
    fixes = obj.get("fixes") if isinstance(obj.get("fixes"), list) else []
    issues = obj.get("issues") if isinstance(obj.get("issues"), list) else []
    quality = QualityReport(
        score=score,
        issues=[str(i) for i in issues],
        fixes=[str(f) for f in fixes if str(f).strip()],
    )
    artifacts.write_json("eval.json", quality)
    logger.info("[plan-loop] quality score=%s fixes=%d", quality.score, len(quality.fixes))
    return {"quality": quality}


def route_after_evaluate(state: PlanLoopState) -> str:
    quality = state.get("quality")
    if quality and quality.score < config.QUALITY_SCORE_THRESHOLD and quality.fixes:
        return "improve"
    return "done"


# 5) one best-effort improvement pass
async def improve_node(state: PlanLoopState) -> dict:
    trip, allowed = state["trip"], state["allowed"]
    artifacts = _artifacts(state)
    current = state["itinerary"]
    fixes = state["quality"].fixes

    try:
        raw = await revise_itinerary(trip, current, fixes, allowed)
        artifacts.write_text("rawImprove.txt", raw)
        _, improved, errors = await _parse_candidate(raw)
        if improved is None:
            logger.warning("[plan-loop] improve pass not itinerary-shaped (%s); asking for a full object", errors)
            raw_fix = await revise_itinerary(
                trip, current,
                SCHEMA_FIX_FIXES + ["Apply the evaluator fixes strictly using allowed lists only."] + fixes,
                allowed,
            )
            artifacts.write_text("rawImprove_schemaFix.txt", raw_fix)
            _, improved, _ = await _parse_candidate(raw_fix)
    except Exception as e:
        logger.warning("[plan-loop] improve pass failed, keeping valid itinerary: %s", e)
        return {}

    if improved is None:
        return {}

    validation = validate_itinerary(trip, improved, allowed)
    artifacts.write_json("validationQuality.json", validation)
    if not validation.ok:
        logger.info(
            "[plan-loop] improved itinerary has %d violations; keeping previous valid itinerary",
            len(validation.violations),
        )
        return {}
    return {"itinerary": improved, "validation": validation}
