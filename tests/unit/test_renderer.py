"""
Unit tests for step rendering
"""

from costctl.replay.models import Step
from costctl.replay.renderer import DisplayFlags, RenderMode, format_ms, render_step

ALL_FLAGS = DisplayFlags(include_cache=True, include_feedback=True, include_policy_intervention=True)

def _step(**fields):
    data = {"index": 1, "role": "assistant", "timestamp": "10:00:01", "content": "hello"}
    data.update(fields)
    return Step.model_validate(data)

def _names(sections):
    return [s.name for s in sections]

def test_minimal_step_sections():
    sections = render_step(_step(), total=3, flags=ALL_FLAGS)
    assert _names(sections) == ["header", "content"]
    assert sections[0].plain == "[2/3] assistant (10:00:01)"

def test_full_step_section_order():
    step = _step(
        agent="planner",
        model="gpt-4o",
        cacheInfo={"hit": True, "key": "k-42"},
        policyIntervention={"type": "reroute", "reason": "budget"},
        feedback="positive",
        metrics={"latency": 320, "tokens": 1500, "cost": 0.01234},
    )
    sections = render_step(step, total=3, flags=ALL_FLAGS)
    assert _names(sections) == [
        "header", "agent", "model", "cache", "policy_intervention", "content", "feedback", "metrics",
    ]
    by_name = {s.name: s.plain for s in sections}
    assert "HIT" in by_name["cache"] and "k-42" in by_name["cache"]
    assert "reroute" in by_name["policy_intervention"] and "budget" in by_name["policy_intervention"]
    assert "positive" in by_name["feedback"]
    assert "320ms" in by_name["metrics"]
    assert "1,500" in by_name["metrics"]
    assert "$0.0123" in by_name["metrics"]

def test_cache_miss_has_no_key():
    sections = render_step(_step(cacheInfo={"hit": False, "key": "k"}), total=3, flags=ALL_FLAGS)
    cache = [s.plain for s in sections if s.name == "cache"][0]
    assert "MISS" in cache
    assert "key" not in cache

def test_no_cache_line_without_cache_info():
    sections = render_step(_step(), total=3, flags=DisplayFlags(include_cache=True))
    assert "cache" not in _names(sections)

def test_flags_hide_annotations():
    step = _step(
        cacheInfo={"hit": True, "key": "k"},
        policyIntervention={"type": "block", "reason": "pii"},
        feedback="neutral",
    )
    assert _names(render_step(step, total=3)) == ["header", "content"]

def test_auto_play_truncates_long_content():
    content = "x" * 250
    sections = render_step(_step(content=content), total=3, mode=RenderMode.AUTO_PLAY)
    body = sections[-1].plain.split("\n", 1)[1]
    assert body == "x" * 200 + "..."

def test_interactive_shows_full_content():
    content = "x" * 250
    sections = render_step(_step(content=content), total=3, mode=RenderMode.INTERACTIVE)
    body = sections[-1].plain.split("\n", 1)[1]
    assert body == content

def test_short_content_not_truncated_in_auto_play():
    sections = render_step(_step(content="y" * 200), total=3, mode=RenderMode.AUTO_PLAY)
    assert sections[-1].plain.endswith("y" * 200)

def test_large_latency_not_in_exponent_form():
    sections = render_step(_step(metrics={"latency": 1234567, "tokens": 1, "cost": 0}), total=3)
    metrics = [s.plain for s in sections if s.name == "metrics"][0]
    assert "1,234,567ms" in metrics
    assert "e+" not in metrics

def test_format_ms():
    assert format_ms(320) == "320ms"
    assert format_ms(1000000.0) == "1,000,000ms"
    assert format_ms(12.5) == "12.5ms"
    assert format_ms(0.125) == "0.125ms"
