"""
Unit tests for replay playback
"""

import io

import pytest

from costctl.replay.controller import (
    LineSource,
    PlaybackController,
    PlaybackMode,
    PlaybackSpeed,
    PlaybackState,
    ReplayOptions,
    delay_ms,
)

class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

def _controller(record, console, inputs=None, **options):
    stream = io.StringIO("".join(f"{line}\n" for line in inputs or []))
    sleep = RecordingSleep()
    controller = PlaybackController(
        record,
        ReplayOptions(**options),
        console=console,
        line_source=LineSource(console, stream),
        sleep=sleep,
    )
    return controller, sleep

def test_speed_delays():
    assert delay_ms("slow") == 2000
    assert delay_ms(PlaybackSpeed.NORMAL) == 1000
    assert delay_ms("fast") == 500
    assert delay_ms("slow") > delay_ms("normal") > delay_ms("fast")

def test_auto_play_visits_every_step_in_order(session_factory, console, output):
    controller, sleep = _controller(session_factory(4), console, speed=PlaybackSpeed.FAST)
    controller.run()

    assert controller.rendered == [0, 1, 2, 3]
    assert sleep.calls == [0.5, 0.5, 0.5]
    assert controller.state is PlaybackState.TERMINATED
    text = output()
    assert "Session Summary" in text
    assert text.index("[4/4]") < text.index("Session Summary")

def test_auto_play_flag_skips_delay(session_factory, console):
    controller, sleep = _controller(session_factory(3), console, auto_play=True)
    controller.run()
    assert controller.rendered == [0, 1, 2]
    assert sleep.calls == []

def test_auto_play_truncates_content(session_factory, console, output):
    record = session_factory(1, messages=[{"role": "user", "content": "a" * 250}])
    controller, _ = _controller(record, console)
    controller.run()
    assert "a" * 200 + "..." in output()
    assert "a" * 201 not in output()

def test_step_mode_scenario(session_factory, console):
    controller, sleep = _controller(
        session_factory(3), console, inputs=["n", "n", "p", "j 1", "q"], mode=PlaybackMode.STEP,
    )
    controller.run()

    assert controller.rendered == [0, 1, 2, 1, 0]
    assert controller.navigator.cursor == 0
    assert controller.state is PlaybackState.TERMINATED
    assert sleep.calls == []

def test_step_mode_shows_full_content(session_factory, console, output):
    record = session_factory(1, messages=[{"role": "user", "content": "b" * 250}])
    controller, _ = _controller(record, console, inputs=["q"], mode="step")
    controller.run()
    assert "b" * 250 in output()

def test_next_at_last_step_rerenders(session_factory, console):
    controller, _ = _controller(session_factory(2), console, inputs=["n", "n", "n", "q"], mode="step")
    controller.run()
    assert controller.rendered == [0, 1, 1, 1]

def test_summary_keeps_position(session_factory, console, output):
    controller, _ = _controller(session_factory(3), console, inputs=["n", "s", "q"], mode="step")
    controller.run()
    assert controller.rendered == [0, 1, 1]
    assert "Session Summary" in output()

def test_help_and_errors_do_not_rerender(session_factory, console, output):
    controller, _ = _controller(
        session_factory(3), console, inputs=["h", "bogus", "j 9", "j", "q"], mode="step",
    )
    controller.run()

    assert controller.rendered == [0]
    text = output()
    assert "Commands:" in text
    assert 'Invalid command. Type "h" for help.' in text
    assert text.count("Invalid message number") == 2

def test_end_of_input_ends_replay(session_factory, console):
    controller, _ = _controller(session_factory(3), console, inputs=["n"], mode="step")
    controller.run()
    assert controller.rendered == [0, 1]
    assert controller.state is PlaybackState.TERMINATED
    assert controller.line_source.closed

@pytest.mark.parametrize("mode", ["cli", "step", "webview"])
def test_empty_session(session_factory, console, output, mode):
    controller, _ = _controller(session_factory(0), console, inputs=["n"], mode=mode)
    controller.run()

    text = output()
    assert text.count("No messages found") == 1
    assert "Command (n/p/j/s/q/h)" not in text
    assert controller.rendered == []
    assert controller.navigator is None
    assert controller.state is PlaybackState.TERMINATED

def test_webview_warns_then_plays_cli(session_factory, console, output):
    controller, sleep = _controller(session_factory(2), console, mode=PlaybackMode.WEBVIEW)
    controller.run()

    text = output()
    assert "Webview mode is not yet implemented" in text
    assert "Falling back to CLI mode" in text
    assert controller.rendered == [0, 1]
    assert sleep.calls == [1.0]
    assert "Session Summary" in text

def test_terminated_controller_cannot_rerun(session_factory, console):
    controller, _ = _controller(session_factory(1), console)
    controller.run()
    with pytest.raises(RuntimeError):
        controller.run()

def test_input_closed_on_quit(session_factory, console):
    controller, _ = _controller(session_factory(2), console, inputs=["q"], mode="step")
    controller.run()
    assert controller.line_source.closed
    assert controller.line_source.stream.closed

def test_annotations_follow_flags(session_factory, console, output):
    record = session_factory(1, messages=[{
        "role": "assistant",
        "content": "cached answer",
        "cacheInfo": {"hit": True, "key": "prompt-hash"},
        "feedback": "positive",
    }], cacheStats={"hitRate": 0.5, "savings": 0.02})
    controller, _ = _controller(record, console, include_cache=True)
    controller.run()

    text = output()
    assert "HIT" in text and "prompt-hash" in text
    assert "positive" not in text
    assert "Cache Hit Rate" in text

def test_project_shown_in_banner(session_factory, console, output):
    controller, _ = _controller(session_factory(1), console, project="checkout-bot")
    controller.run()
    assert "Project: checkout-bot" in output()

def test_ctrl_c_during_auto_play_stops_cleanly(session_factory, console, output):
    def interrupt(seconds):
        raise KeyboardInterrupt

    controller = PlaybackController(
        session_factory(3), ReplayOptions(), console=console,
        line_source=LineSource(console, io.StringIO()), sleep=interrupt,
    )
    controller.run()

    text = output()
    assert controller.rendered == [0]
    assert "Playback interrupted by user" in text
    assert "Session Summary" not in text
    assert controller.state is PlaybackState.TERMINATED
    assert controller.line_source.closed

def test_webview_prints_one_banner(session_factory, console, output):
    controller, _ = _controller(session_factory(1), console, mode="webview")
    controller.run()

    text = output()
    assert text.count("Session Replay: session-1234") == 1
    assert "Webview Session Replay: session-1234" in text
    assert text.index("Webview Session Replay") < text.index("Falling back to CLI mode")
