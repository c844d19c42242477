# prompts.py
import json
from typing import Any, Iterable, List, Optional

# ====== pace rules (blocks per day) ======
PACE_BLOCK_RANGE = {
    "relaxed": (2, 3),
    "balanced": (3, 4),
    "packed": (4, 6),
}

# ====== JSON repair ======
SYSTEM_FIX_JSON = (
    "You are a JSON repair assistant.\n"
    "Return ONLY a valid JSON {kind}.\n"
    "No markdown, no commentary.\n"
)

# ====== TripRequest extraction ======
SYSTEM_EXTRACT_TRIP = (
    "Extract TripRequest from the user prompt.\n"
    "\n"
    "Return ONLY valid JSON. No markdown. No commentary.\n"
    "\n"
    "Keys EXACTLY:\n"
    "destination,\n"
    "tripLengthDays,\n"
    "dates { start, end },\n"
    "travelers,\n"
    "budgetLevel,\n"
    "pace,\n"
    "interests,\n"
    "constraints,\n"
    "missingInfoQuestions\n"
    "\n"
    "Rules:\n"
    "- If user says \"X-day trip\" or \"X days\" => tripLengthDays = X.\n"
    "- If user says \"weekend\" => tripLengthDays = 2.\n"
    "- If trip length missing => tripLengthDays = 3 and add ONE question asking how many days.\n"
    "- If dates missing => start/end = null and add ONE question asking dates.\n"
    "- If travelers missing => 1.\n"
    "- If budgetLevel missing => \"mid\" (one of low, mid, high).\n"
    "- If pace missing => \"balanced\" (one of relaxed, balanced, packed).\n"
    "- interests and constraints can be empty arrays.\n"
)

# ====== candidate extraction ======
SYSTEM_EXTRACT_CANDIDATES = (
    "You extract real venue/place names from web search results.\n"
    "\n"
    "Return ONLY valid JSON ARRAY. No text.\n"
    "\n"
    "Each item:\n"
    "{{ \"name\": string, \"category\": \"{category}\", \"url\": string, \"notes\": string }}\n"
    "\n"
    "Hard rules:\n"
    "- name MUST be an actual venue/activity name (not article title, not guide, not question).\n"
    "- Exclude names containing: best, top, guide, updated, things to do, restaurants in, what's the best.\n"
    "- Prefer venues that plausibly exist in city: \"{city}\".\n"
    "- If a snippet lists multiple places, extract multiple candidates from one result.\n"
    "- url must be the source result url.\n"
    "- notes: short (e.g., \"vegan sushi\", \"museum\", \"indoor activity\").\n"
)

# ====== itinerary generation ======
SYSTEM_GENERATE = (
    "You are a travel itinerary generator.\n"
    "\n"
    "Return ONLY a valid JSON object with:\n"
    "summary, days, mustBook, rainBackups\n"
    "\n"
    "STRICT RULES (NON-NEGOTIABLE):\n"
    "- blocks[] are ATTRACTIONS ONLY. NEVER put restaurants or meals in blocks.\n"
    "- blocks[].title MUST be exactly one of allowedAttractions (string match).\n"
    "- meals are MEALS ONLY. Meals MUST use only allowedRestaurants (string match).\n"
    "{diet_rule}"
    "- Format each meal exactly:\n"
    "    \"Lunch: <Restaurant> - <Dish>\"\n"
    "    \"Dinner: <Restaurant> - <Dish>\"\n"
    "- rainBackups MUST use only allowedIndoorBackups (string match).\n"
    "- If you use anything else, the output is INVALID.\n"
    "\n"
    "Structure per day:\n"
    "{{\n"
    "  day,\n"
    "  theme,\n"
    "  blocks: [{{ time, title, details }}],\n"
    "  meals: [\"Lunch: ...\", \"Dinner: ...\"],\n"
    "  notes: [at least 2]\n"
    "}}\n"
    "\n"
    "days.length MUST equal trip.tripLengthDays, numbered 1..tripLengthDays.\n"
    "Time format: \"09:00 AM - 11:30 AM\"\n"
    "Blocks/day: {min_blocks} to {max_blocks}\n"
)

DIET_RULE_VEGETARIAN = (
    "- Each meal dish MUST clearly indicate vegetarian/vegan by including \"(Vegetarian)\" or \"(Vegan)\" "
    "in the dish text.\n"
)

# ====== evaluation ======
SYSTEM_EVALUATE = (
    "Evaluate itinerary quality for the given trip.\n"
    "Consider pacing, variety, geography, fit with interests and constraints.\n"
    "Only suggest fixes that use places from the allowed lists.\n"
    "\n"
    "Return ONLY valid JSON:\n"
    "{ \"score\": number (0-100), \"issues\": string[], \"fixes\": string[] }\n"
)

# ====== revision (repair) ======
SYSTEM_REVISE = (
    "You are an itinerary reviser.\n"
    "\n"
    "Return ONLY a valid JSON Itinerary object.\n"
    "\n"
    "NON-NEGOTIABLE RULES:\n"
    "- blocks[] are ATTRACTIONS ONLY. NEVER put restaurants or meals in blocks.\n"
    "- blocks[].title MUST be exactly one of allowedAttractions (string match).\n"
    "- meals are MEALS ONLY. Meals MUST use only allowedRestaurants (string match).\n"
    "- Format each meal exactly: \"Lunch: <Restaurant> - <Dish>\" / \"Dinner: <Restaurant> - <Dish>\".\n"
    "- If trip.constraints includes vegetarian, each dish MUST include \"(Vegetarian)\" or \"(Vegan)\".\n"
    "- rainBackups MUST use only allowedIndoorBackups (string match).\n"
    "- DO NOT invent new places.\n"
    "\n"
    "REPAIR RULES:\n"
    "- If a block title is a restaurant or not in allowedAttractions, replace it with an item FROM allowedAttractions.\n"
    "- If a meal restaurant is invalid, replace it with an item FROM allowedRestaurants.\n"
    "- Keep every entry that is not mentioned in violations or fixes unchanged.\n"
    "\n"
    "FIX STRATEGY:\n"
    "If a place is invalid:\n"
    "1) Replace it with something FROM the allowed list\n"
    "2) If no good replacement exists, REUSE an allowed item already used\n"
    "3) Reuse is allowed; invention is NOT\n"
    "\n"
    "SCHEMA REQUIREMENTS:\n"
    "- MUST include: summary (string), days (array), mustBook (array), rainBackups (array)\n"
    "- days.length MUST equal trip.tripLengthDays\n"
    "- DO NOT return partial JSON or {}\n"
)

FIX_VIOLATIONS = "Fix all violations strictly using allowed lists and the attractions-only block rule."

SCHEMA_FIX_FIXES = [
    "Return a FULL Itinerary JSON object (not partial).",
    "Must include: summary (string) and days (array). Never omit them.",
]


def is_vegetarian_constraint(constraints: Iterable[str]) -> bool:
    return any((c or "").strip().lower() == "vegetarian" for c in constraints)


def build_fix_json_system(kind: str) -> str:
    return SYSTEM_FIX_JSON.format(kind="array" if kind == "array" else "object")


def build_extract_candidates_system(category: str, city: str) -> str:
    return SYSTEM_EXTRACT_CANDIDATES.format(category=category, city=city)


def build_extract_candidates_user_msg(category: str, city: str, results: List[dict]) -> str:
    return (
        f"City={city}\n"
        f"Category={category}\n"
        f"Results={json.dumps(results, ensure_ascii=False)}"
    )


def build_generate_system(pace: str, constraints: Iterable[str]) -> str:
    min_blocks, max_blocks = PACE_BLOCK_RANGE[pace]
    return SYSTEM_GENERATE.format(
        diet_rule=DIET_RULE_VEGETARIAN if is_vegetarian_constraint(constraints) else "",
        min_blocks=min_blocks,
        max_blocks=max_blocks,
    )


def build_generate_user_msg(trip: dict, allowed: dict) -> str:
    return (
        f"trip={json.dumps(trip, ensure_ascii=False)}\n"
        f"allowedAttractions={json.dumps(allowed['allowedAttractions'], ensure_ascii=False)}\n"
        f"allowedRestaurants={json.dumps(allowed['allowedRestaurants'], ensure_ascii=False)}\n"
        f"allowedIndoorBackups={json.dumps(allowed['allowedIndoorBackups'], ensure_ascii=False)}"
    )


def build_revise_user_msg(
    trip: dict,
    itinerary: Any,
    fixes: List[str],
    allowed: dict,
    violations: Optional[List[str]] = None,
) -> str:
    payload = {
        "trip": trip,
        "itinerary": itinerary,
        "fixes": fixes,
        **allowed,
    }
    if violations:
        payload["violations"] = violations
    return json.dumps(payload, ensure_ascii=False)


def build_evaluate_user_msg(trip: dict, itinerary: dict, allowed: dict) -> str:
    return json.dumps({"trip": trip, "itinerary": itinerary, **allowed}, ensure_ascii=False)
