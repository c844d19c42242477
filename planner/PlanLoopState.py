# planner/PlanLoopState.py
from typing import Any, List, Optional

from typing_extensions import TypedDict

from TripModels import AllowedLists, Itinerary, QualityReport, TripRequest, ValidationResult


class PlanLoopState(TypedDict, total=False):
    trip: TripRequest
    allowed: AllowedLists
    artifacts: Any                   # RunArtifacts
    itinerary: Optional[Itinerary]   # None until an itinerary-shaped object was produced
    raw_object: Optional[dict]       # last parsed model object, possibly partial
    shape_errors: List[str]
    validation: ValidationResult
    validation_count: int
    repair_round: int
    quality: Optional[QualityReport]
