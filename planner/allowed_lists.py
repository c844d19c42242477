# planner/allowed_lists.py
from typing import Iterable, List, Optional

import config
from TripModels import AllowedLists, Candidate


def unique_names(names: Iterable[str]) -> List[str]:
    """Trim, drop empties, dedupe case-insensitively; first-seen spelling wins."""
    seen = set()
    out: List[str] = []
    for name in names:
        n = (name or "").strip()
        key = n.lower()
        if not n or key in seen:
            continue
        seen.add(key)
        out.append(n)
    return out


def project_allowed_lists(
    candidates: Iterable[Candidate],
    max_attractions: Optional[int] = None,
    max_restaurants: Optional[int] = None,
    max_indoor: Optional[int] = None,
) -> AllowedLists:
    candidates = list(candidates)

    def names(category: str, cap: int) -> List[str]:
        return unique_names(c.name for c in candidates if c.category == category)[:cap]

    return AllowedLists(
        allowedAttractions=names(
            "attraction", config.ALLOWED_CAP_ATTRACTIONS if max_attractions is None else max_attractions),
        allowedRestaurants=names(
            "restaurant", config.ALLOWED_CAP_RESTAURANTS if max_restaurants is None else max_restaurants),
        allowedIndoorBackups=names(
            "indoor_backup", config.ALLOWED_CAP_INDOOR if max_indoor is None else max_indoor),
    )
