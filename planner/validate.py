# planner/validate.py
"""
Business-rule checks for a generated itinerary.

`validate_itinerary` is pure: it never mutates its inputs and the same
(trip, itinerary, allowed) always yields the same ordered violation list.
Every rule is checked independently so one call reports all violations.
"""
from typing import List, Optional

from TripModels import AllowedLists, Itinerary, TripRequest, ValidationResult
from prompts import PACE_BLOCK_RANGE, is_vegetarian_constraint

RANGE_DELIMITER = " - "
DINING_KEYWORDS = ("lunch", "dinner")
VEG_HINTS = ("veg", "vegetarian", "vegan", "plant", "tofu", "paneer", "lentil", "chickpea", "vegetable")


def is_time_range(s: str) -> bool:
    # deliberately loose: separator present, no clock parsing
    return RANGE_DELIMITER in (s or "")


def split_meal(meal: str):
    """
    "Lunch: Green Table - Tofu Banh Mi (Vegetarian)" -> ("Lunch", "Green Table", "Tofu Banh Mi (Vegetarian)")
    Returns None when there is no type label.
    """
    if ":" not in meal:
        return None
    label, after = meal.split(":", 1)
    after = after.strip()
    restaurant, _, dish = after.partition(RANGE_DELIMITER)
    return label.strip(), restaurant.strip(), dish.strip()


def restaurant_from_meal(meal: str) -> Optional[str]:
    parts = split_meal(meal)
    if parts is None:
        return None
    return parts[1] or None


def requires_vegetarian(trip: TripRequest) -> bool:
    return is_vegetarian_constraint(trip.constraints)


def validate_itinerary(trip: TripRequest, itinerary: Itinerary, allowed: AllowedLists) -> ValidationResult:
    violations: List[str] = []
    n_days = trip.tripLengthDays

    # 1) day count and numbering
    if len(itinerary.days) != n_days:
        violations.append(f"days.length={len(itinerary.days)} must equal tripLengthDays={n_days}")
    day_nums = sorted(d.day for d in itinerary.days)
    for i in range(1, n_days + 1):
        if i > len(day_nums) or day_nums[i - 1] != i:
            violations.append(f"Missing or wrong day number: expected day {i}")

    # 2) pace: blocks per day
    lo, hi = PACE_BLOCK_RANGE[trip.pace]
    for day in itinerary.days:
        blocks = len(day.blocks)
        if not lo <= blocks <= hi:
            violations.append(f"Day {day.day} blocks={blocks} violates pace={trip.pace}")

    # 3) notes
    for day in itinerary.days:
        if len(day.notes) < 2:
            violations.append(f"Day {day.day} notes must have at least 2 items")

    # 4) blocks: time range, allowed attraction, no dining
    allowed_attractions = set(allowed.allowedAttractions)
    for day in itinerary.days:
        for b in day.blocks:
            if not is_time_range(b.time):
                violations.append(f'Day {day.day} block time not a range: "{b.time}"')
            if b.title not in allowed_attractions:
                violations.append(f'Invalid attraction in blocks: "{b.title}"')
            title = b.title.lower()
            if any(k in title for k in DINING_KEYWORDS):
                violations.append(f'Block title includes dining text (meals belong in meals): "{b.title}"')

    # 5) meals: Lunch/Dinner present, allowed restaurant, dietary signal
    allowed_restaurants = set(allowed.allowedRestaurants)
    vegetarian = requires_vegetarian(trip)
    for day in itinerary.days:
        if not any(m.startswith("Lunch:") for m in day.meals):
            violations.append(f"Day {day.day} missing Lunch: in meals")
        if not any(m.startswith("Dinner:") for m in day.meals):
            violations.append(f"Day {day.day} missing Dinner: in meals")

        for meal in day.meals:
            rest = restaurant_from_meal(meal)
            if not rest:
                violations.append(f'Meal format invalid: "{meal}"')
            elif rest not in allowed_restaurants:
                violations.append(f'Invalid restaurant in meals: "{rest}"')
            if vegetarian:
                lower = meal.lower()
                if not any(h in lower for h in VEG_HINTS):
                    violations.append(f'Meal may not clearly indicate vegetarian dish: "{meal}"')

    # 6) rain backups
    allowed_indoor = set(allowed.allowedIndoorBackups)
    for rb in itinerary.rainBackups:
        if rb not in allowed_indoor:
            violations.append(f'Invalid rain backup (not in allowedIndoorBackups): "{rb}"')

    return ValidationResult(ok=not violations, violations=violations)
