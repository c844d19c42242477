# planner/flows/PlanLoopFlow.py
import logging
from typing import Optional, Tuple

from langgraph.graph import END, StateGraph

from TripModels import AllowedLists, Itinerary, TripRequest, ValidationResult
from planner.PlanLoopState import PlanLoopState
from planner.nodes.PlanLoopNodes import (
    PlanGenerationError,
    evaluate_node,
    generate_node,
    improve_node,
    repair_node,
    route_after_evaluate,
    route_after_validate,
    validate_node,
)
from run_artifacts import RunArtifacts

logger = logging.getLogger(__name__)

# generate -> validate -> (repair -> validate)* -> evaluate -> improve
builder = StateGraph(PlanLoopState)

builder.add_node("generate", generate_node)
builder.add_node("validate", validate_node)
builder.add_node("repair", repair_node)
builder.add_node("evaluate", evaluate_node)
builder.add_node("improve", improve_node)

builder.set_entry_point("generate")
builder.add_edge("generate", "validate")
builder.add_conditional_edges(
    "validate",
    route_after_validate,
    {
        "repair": "repair",
        "evaluate": "evaluate",
        "done": END,
    },
)
builder.add_edge("repair", "validate")
builder.add_conditional_edges(
    "evaluate",
    route_after_evaluate,
    {
        "improve": "improve",
        "done": END,
    },
)
builder.add_edge("improve", END)

flow = builder.compile()


async def run_plan_loop(
    trip: TripRequest,
    allowed: AllowedLists,
    artifacts: Optional[RunArtifacts] = None,
) -> Tuple[Itinerary, ValidationResult]:
    """
    Bounded generate/validate/repair. Returns the current itinerary plus its last
    validation even when the repair budget runs out; callers check validation.ok.
    """
    artifacts = artifacts or RunArtifacts(enabled=False)
    state = {
        "trip": trip,
        "allowed": allowed,
        "artifacts": artifacts,
    }
    final_state = await flow.ainvoke(state, config={"recursion_limit": 40})

    itinerary = final_state.get("itinerary")
    if itinerary is None:
        raise PlanGenerationError(
            "Model did not return an itinerary-shaped JSON after repairs. "
            f"Check {artifacts.path('rawItinerary.txt')}"
        )

    artifacts.write_json("itinerary.json", itinerary)
    return itinerary, final_state["validation"]
