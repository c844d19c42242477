# planner/timeline.py
from typing import List, Optional

from TripModels import DayPlan, Itinerary, TimelineDay, TimelineItem, UiItinerary
from planner.validate import RANGE_DELIMITER

LUNCH_TIME = "12:15 PM - 01:15 PM"
DINNER_TIME = "06:30 PM - 08:00 PM"


def _find_meal(meals: List[str], meal_type: str) -> Optional[str]:
    prefix = meal_type.lower() + ":"
    return next((m for m in meals if m.lower().startswith(prefix)), None)


def _meal_item(meal: str, meal_type: str, time: str) -> TimelineItem:
    rest = meal.split(":", 1)[1].strip()
    place, _, dish = rest.partition(RANGE_DELIMITER)
    return TimelineItem(
        kind="meal",
        time=time,
        mealType=meal_type,
        place=place.strip(),
        dishIdea=dish.strip() or None,
    )


def to_timeline_day(day: DayPlan) -> TimelineDay:
    """Activities in block order; lunch after the first activity, dinner last."""
    timeline = [
        TimelineItem(kind="activity", time=b.time, title=b.title, details=b.details)
        for b in day.blocks
    ]

    lunch = _find_meal(day.meals, "Lunch")
    if lunch:
        insert_at = 1 if len(timeline) >= 2 else len(timeline)
        timeline.insert(insert_at, _meal_item(lunch, "Lunch", LUNCH_TIME))

    dinner = _find_meal(day.meals, "Dinner")
    if dinner:
        timeline.append(_meal_item(dinner, "Dinner", DINNER_TIME))

    return TimelineDay(day=day.day, theme=day.theme, timeline=timeline, notes=list(day.notes))


def to_ui_itinerary(itinerary: Itinerary) -> UiItinerary:
    return UiItinerary(
        summary=itinerary.summary,
        days=[to_timeline_day(d) for d in itinerary.days],
        mustBook=list(itinerary.mustBook),
        rainBackups=list(itinerary.rainBackups),
    )
