from planner.timeline import DINNER_TIME, LUNCH_TIME, to_timeline_day, to_ui_itinerary

from conftest import make_day, make_itinerary


def test_lunch_goes_after_first_activity_and_dinner_last():
    day = to_timeline_day(make_day(1))
    kinds = [(i.kind, i.title or i.place) for i in day.timeline]
    assert kinds == [
        ("activity", "Art Institute"),
        ("meal", "Green Table"),
        ("activity", "Millennium Park"),
        ("activity", "Field Museum"),
        ("meal", "Lotus House"),
    ]
    lunch, dinner = day.timeline[1], day.timeline[-1]
    assert (lunch.mealType, lunch.time, lunch.dishIdea) == ("Lunch", LUNCH_TIME, "Tofu Banh Mi (Vegetarian)")
    assert (dinner.mealType, dinner.time) == ("Dinner", DINNER_TIME)


def test_single_activity_puts_lunch_at_end():
    day = to_timeline_day(make_day(1, titles=["Navy Pier"], meals=["lunch: Green Table - Falafel"]))
    assert [i.kind for i in day.timeline] == ["activity", "meal"]
    assert day.timeline[1].place == "Green Table"


def test_ui_itinerary_keeps_top_level_lists():
    ui = to_ui_itinerary(make_itinerary(2))
    assert ui.summary == "Three days in Chicago"
    assert [d.day for d in ui.days] == [1, 2]
    assert ui.rainBackups == ["Museum of Science"]
    assert ui.days[0].notes == ["Buy a transit pass", "Wear comfy shoes"]
