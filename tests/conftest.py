import json

import pytest

import config
import llm
from TripModels import AllowedLists, Block, DayPlan, Itinerary, TripRequest

ATTRACTIONS = ["Art Institute", "Millennium Park", "Field Museum", "Navy Pier", "Shedd Aquarium"]
RESTAURANTS = ["Green Table", "Lotus House"]
INDOOR = ["Museum of Science", "Field Museum"]

LUNCH = "Lunch: Green Table - Tofu Banh Mi (Vegetarian)"
DINNER = "Dinner: Lotus House - Lentil Curry (Vegan)"


class FakeComplete:
    """Scripted stand-in for llm.complete: returns queued outputs in call order."""

    def __init__(self, *outputs):
        self.outputs = list(outputs)
        self.calls = []

    async def __call__(self, system_instruction, user_content, max_tokens=1200, temperature=0.0):
        self.calls.append((system_instruction, user_content))
        if not self.outputs:
            raise AssertionError("unexpected extra model call:\n" + system_instruction[:200])
        out = self.outputs.pop(0)
        if isinstance(out, Exception):
            raise out
        return out


def make_trip(days=3, pace="balanced", constraints=("vegetarian",)) -> TripRequest:
    return TripRequest(
        destination="Chicago",
        tripLengthDays=days,
        travelers=2,
        budgetLevel="mid",
        pace=pace,
        constraints=list(constraints),
    )


def make_day(day, titles=None, meals=None, notes=None) -> DayPlan:
    titles = titles if titles is not None else ATTRACTIONS[:3]
    return DayPlan(
        day=day,
        theme=f"Day {day}",
        blocks=[Block(time="09:00 AM - 11:00 AM", title=t, details="walk") for t in titles],
        meals=meals if meals is not None else [LUNCH, DINNER],
        notes=notes if notes is not None else ["Buy a transit pass", "Wear comfy shoes"],
    )


def make_itinerary(days=3, **day_kwargs) -> Itinerary:
    return Itinerary(
        summary="Three days in Chicago",
        days=[make_day(i, **day_kwargs) for i in range(1, days + 1)],
        mustBook=["Art Institute"],
        rainBackups=["Museum of Science"],
    )


def as_json(itinerary: Itinerary) -> str:
    return "Here you go:\n```json\n" + json.dumps(itinerary.model_dump()) + "\n```"


@pytest.fixture
def allowed() -> AllowedLists:
    return AllowedLists(
        allowedAttractions=list(ATTRACTIONS),
        allowedRestaurants=list(RESTAURANTS),
        allowedIndoorBackups=list(INDOOR),
    )


@pytest.fixture
def trip() -> TripRequest:
    return make_trip()


@pytest.fixture(autouse=True)
def _quiet_side_channels(monkeypatch):
    monkeypatch.setattr(config, "SAVE_RUN_ARTIFACTS", False)
    monkeypatch.setattr(config, "ENABLE_QUALITY_PASS", False)


@pytest.fixture
def fake_llm(monkeypatch):
    def install(*outputs) -> FakeComplete:
        fake = FakeComplete(*outputs)
        monkeypatch.setattr(llm, "complete", fake)
        return fake
    return install
