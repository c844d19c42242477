import asyncio
import json

import pytest

import config
import prompts
from planner.flows.PlanLoopFlow import run_plan_loop
from planner.nodes.PlanLoopNodes import PlanGenerationError, SHAPE_VIOLATION, coerce_itinerary

from conftest import as_json, make_itinerary


def _run(trip, allowed):
    return asyncio.run(run_plan_loop(trip, allowed))


def _broken():
    itinerary = make_itinerary(3)
    itinerary.days[0].blocks[0].title = "Fake Tower"
    return itinerary


def _revise_calls(fake):
    return [c for c in fake.calls if c[0] == prompts.SYSTEM_REVISE]


def test_valid_generation_needs_no_repair(fake_llm, trip, allowed):
    fake = fake_llm(as_json(make_itinerary(3)))
    itinerary, validation = _run(trip, allowed)
    assert validation.ok and validation.violations == []
    assert len(itinerary.days) == 3
    assert len(fake.calls) == 1
    assert "Blocks/day: 3 to 4" in fake.calls[0][0]
    assert '"Navy Pier"' in fake.calls[0][1]


def test_single_repair_converges(fake_llm, trip, allowed):
    fake = fake_llm(as_json(_broken()), as_json(make_itinerary(3)))
    itinerary, validation = _run(trip, allowed)

    assert validation.ok
    assert itinerary.days[0].blocks[0].title == "Art Institute"
    revise = _revise_calls(fake)
    assert len(revise) == 1
    payload = json.loads(revise[0][1])
    assert payload["violations"] == ['Invalid attraction in blocks: "Fake Tower"']
    assert payload["itinerary"]["days"][0]["blocks"][0]["title"] == "Fake Tower"
    assert payload["allowedAttractions"] == allowed.allowedAttractions


def test_budget_exhaustion_returns_best_effort(fake_llm, trip, allowed):
    fake = fake_llm(as_json(_broken()), as_json(_broken()), as_json(_broken()))
    itinerary, validation = _run(trip, allowed)

    assert not validation.ok
    assert validation.violations == ['Invalid attraction in blocks: "Fake Tower"']
    assert itinerary.days[0].blocks[0].title == "Fake Tower"
    assert len(_revise_calls(fake)) == config.MAX_REPAIR_ROUNDS
    assert fake.outputs == []


def test_unparseable_generation_is_fatal(fake_llm, trip, allowed):
    fake_llm("I'm sorry, I can't help with that.", "still no json")
    with pytest.raises(PlanGenerationError, match="rawItinerary.txt"):
        _run(trip, allowed)


def test_generation_fixed_by_json_repair(fake_llm, trip, allowed):
    fake = fake_llm("{summary: broken", as_json(make_itinerary(3)))
    _, validation = _run(trip, allowed)
    assert validation.ok
    assert fake.calls[1][0] == prompts.build_fix_json_system("object")


def test_bad_shape_from_generation_drives_repair(fake_llm, trip, allowed):
    fake = fake_llm('{"title": "not an itinerary"}', as_json(make_itinerary(3)))
    _, validation = _run(trip, allowed)
    assert validation.ok
    payload = json.loads(_revise_calls(fake)[0][1])
    assert payload["violations"] == [SHAPE_VIOLATION]
    assert payload["itinerary"] == {"title": "not an itinerary"}


def test_partial_repair_gets_schema_fix_call(fake_llm, trip, allowed):
    fake = fake_llm(as_json(_broken()), '{"days": []}', as_json(make_itinerary(3)))
    _, validation = _run(trip, allowed)

    assert validation.ok
    revise = _revise_calls(fake)
    assert len(revise) == 2
    assert "Return a FULL Itinerary JSON object (not partial)." in json.loads(revise[1][1])["fixes"]


def test_failed_schema_fix_keeps_previous_itinerary(fake_llm, trip, allowed):
    fake = fake_llm(as_json(_broken()), "{}", "{}", "{}", "{}")
    itinerary, validation = _run(trip, allowed)

    assert itinerary.days[0].blocks[0].title == "Fake Tower"
    assert validation.violations == ['Invalid attraction in blocks: "Fake Tower"']
    assert len(_revise_calls(fake)) == 2 * config.MAX_REPAIR_ROUNDS


def test_never_itinerary_shaped_is_fatal(fake_llm, trip, allowed):
    fake_llm('{"x": 1}', "{}", "{}", "{}", "{}")
    with pytest.raises(PlanGenerationError, match="itinerary-shaped"):
        _run(trip, allowed)


def test_quality_pass_applies_improvement(monkeypatch, fake_llm, trip, allowed):
    monkeypatch.setattr(config, "ENABLE_QUALITY_PASS", True)
    improved = make_itinerary(3, titles=["Navy Pier", "Shedd Aquarium", "Field Museum"])
    fake = fake_llm(
        as_json(make_itinerary(3)),
        '{"score": 72, "issues": ["repetitive"], "fixes": ["Vary the attractions between days"]}',
        as_json(improved),
    )
    itinerary, validation = _run(trip, allowed)

    assert validation.ok
    assert itinerary.days[0].blocks[0].title == "Navy Pier"
    payload = json.loads(fake.calls[2][1])
    assert payload["fixes"] == ["Vary the attractions between days"]
    assert "violations" not in payload


def test_quality_pass_skipped_for_high_score(monkeypatch, fake_llm, trip, allowed):
    monkeypatch.setattr(config, "ENABLE_QUALITY_PASS", True)
    fake = fake_llm(as_json(make_itinerary(3)), '{"score": 95, "issues": [], "fixes": ["minor"]}')
    _, validation = _run(trip, allowed)
    assert validation.ok
    assert len(fake.calls) == 2


def test_quality_pass_never_breaks_a_valid_itinerary(monkeypatch, fake_llm, trip, allowed):
    monkeypatch.setattr(config, "ENABLE_QUALITY_PASS", True)
    fake_llm(
        as_json(make_itinerary(3)),
        '{"score": 40, "fixes": ["add more"]}',
        as_json(_broken()),
    )
    itinerary, validation = _run(trip, allowed)
    assert validation.ok
    assert itinerary.days[0].blocks[0].title == "Art Institute"


def test_evaluator_garbage_is_advisory(monkeypatch, fake_llm, trip, allowed):
    monkeypatch.setattr(config, "ENABLE_QUALITY_PASS", True)
    fake = fake_llm(as_json(make_itinerary(3)), "looks great!", "no really")
    _, validation = _run(trip, allowed)
    assert validation.ok
    assert len(fake.calls) == 3


def test_quality_pass_not_run_on_invalid_itinerary(monkeypatch, fake_llm, trip, allowed):
    monkeypatch.setattr(config, "ENABLE_QUALITY_PASS", True)
    fake = fake_llm(as_json(_broken()), as_json(_broken()), as_json(_broken()))
    _, validation = _run(trip, allowed)
    assert not validation.ok
    assert all(c[0] != prompts.SYSTEM_EVALUATE for c in fake.calls)


def test_coerce_reports_schema_errors():
    itinerary, errors = coerce_itinerary({"summary": "s", "days": [{"theme": "no day number"}]})
    assert itinerary is None
    assert errors and errors[0].startswith("Itinerary schema error at days.0.day")
    assert coerce_itinerary([]) == (None, [SHAPE_VIOLATION])
