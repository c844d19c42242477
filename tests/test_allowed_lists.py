from TripModels import Candidate
from planner.allowed_lists import project_allowed_lists, unique_names


def _cand(name, category="restaurant"):
    return Candidate(name=name, category=category, url="https://example.com/a")


def test_dedupe_is_case_and_whitespace_insensitive():
    cands = [_cand("Cafe A"), _cand("cafe a "), _cand("Cafe B")]
    allowed = project_allowed_lists(cands)
    assert allowed.allowedRestaurants == ["Cafe A", "Cafe B"]


def test_first_seen_spelling_wins():
    assert unique_names(["  Navy Pier ", "NAVY PIER", "", "   ", "Field Museum"]) == ["Navy Pier", "Field Museum"]


def test_projects_by_category_in_order():
    cands = [
        _cand("Navy Pier", "attraction"),
        _cand("Green Table", "restaurant"),
        _cand("Museum of Science", "indoor_backup"),
        _cand("Field Museum", "attraction"),
        _cand("Field Museum", "indoor_backup"),
    ]
    allowed = project_allowed_lists(cands)
    assert allowed.allowedAttractions == ["Navy Pier", "Field Museum"]
    assert allowed.allowedRestaurants == ["Green Table"]
    assert allowed.allowedIndoorBackups == ["Museum of Science", "Field Museum"]


def test_caps_each_list_independently():
    cands = [_cand(f"Spot {i}", "attraction") for i in range(10)]
    cands += [_cand(f"Cafe {i}") for i in range(10)]
    allowed = project_allowed_lists(cands, max_attractions=3, max_restaurants=5, max_indoor=1)
    assert allowed.allowedAttractions == ["Spot 0", "Spot 1", "Spot 2"]
    assert len(allowed.allowedRestaurants) == 5
    assert allowed.allowedIndoorBackups == []


def test_empty_input_gives_three_empty_lists():
    allowed = project_allowed_lists([])
    assert allowed.model_dump() == {
        "allowedAttractions": [],
        "allowedRestaurants": [],
        "allowedIndoorBackups": [],
    }
