"""Tests for the session wiring: lifecycle, chart loading and canvas checks."""

import pytest

import chart_loader
import config as app_config_module
import gameplay_models
from conftest import make_chart
from draw_surface import RecordingSurface
from gameplay_session import GameplaySession, SurfaceError
from judge import EngineState, NotReady


class SizeOnlyCanvas:
    def width(self):
        return 300

    def height(self):
        return 400


CHART_TEXT = '{"ArrowLeft": [{"press": 1.0}, {"press": 2.0, "release": 2.5}], "ArrowRight": [{"press": 1.5}]}'


def test_missing_canvas_fails_at_construction():
    with pytest.raises(SurfaceError):
        GameplaySession(None)


def test_zero_sized_canvas_fails_at_construction():
    with pytest.raises(SurfaceError):
        GameplaySession(RecordingSurface(0.0, 480.0))


def test_surface_must_implement_the_drawing_contract():
    with pytest.raises(SurfaceError):
        GameplaySession(SizeOnlyCanvas(), surface=object())


def test_start_before_load_raises_not_ready(clock):
    session = GameplaySession(RecordingSurface(), clock=clock)
    with pytest.raises(NotReady):
        session.start()


def test_failed_load_keeps_previous_chart(surface, clock):
    session = GameplaySession(surface, clock=clock)
    chart = session.load_chart(CHART_TEXT)
    session.start(now=0.0)

    with pytest.raises(chart_loader.ParseError):
        session.load_chart('{"ArrowLeft": "not a list"}')

    assert session.engine.chart() == chart
    assert session.is_playing()


def test_failed_file_load_keeps_previous_chart(surface, clock, tmp_path):
    session = GameplaySession(surface, clock=clock)
    chart = session.load_chart(CHART_TEXT)
    with pytest.raises(chart_loader.ParseError):
        session.load_chart_file(tmp_path / "missing.json")
    assert session.engine.chart() == chart


def test_stop_then_start_resets_session_state(surface, clock):
    session = GameplaySession(surface, clock=clock)
    session.load_chart(CHART_TEXT)
    session.start(now=0.0)
    session.on_key_down("ArrowLeft", 1.0)
    session.on_key_down("ArrowRight", 1.5)
    session.on_key_down("KeyZ", 2.0)
    session.render_tick(now=2.1)
    session.stop()
    assert session.state() == EngineState.IDLE
    assert session.combo() == 3

    session.start(now=10.0)
    engine = session.engine
    assert session.score() == 0.0
    assert session.combo() == 0
    assert engine.held_keys() == frozenset()
    assert not engine.note_scheduler().has_active_holds()
    assert engine.feedback_tracker().events() == []
    assert not any(note.is_judged for note in engine.note_scheduler().all_notes())


def test_render_tick_is_a_no_op_when_idle(surface, clock):
    session = GameplaySession(surface, clock=clock)
    session.load_chart(CHART_TEXT)
    assert session.render_tick(now=1.0) is None
    assert surface.calls == []


def test_render_tick_uses_the_session_clock(surface, clock):
    session = GameplaySession(surface, clock=clock)
    session.load_chart(CHART_TEXT)
    clock.now = 5.0
    session.start()
    clock.now = 6.0
    frame = session.render_tick()
    assert frame.song_time_seconds == pytest.approx(1.0)
    assert surface.calls


def test_size_only_canvas_computes_frames_without_drawing(clock):
    session = GameplaySession(SizeOnlyCanvas(), clock=clock)
    session.load_chart(CHART_TEXT)
    session.start(now=0.0)
    frame = session.render_tick(now=0.9)
    assert frame is not None
    assert [note.lane for note in frame.notes] == ["left", "left", "right"]

    surface = RecordingSurface(300.0, 400.0)
    session.render_tick(now=0.95, surface=surface)
    assert surface.calls


def test_key_input_events_are_routed(surface, clock):
    session = GameplaySession(surface, clock=clock)
    session.load_chart(CHART_TEXT)
    session.start(now=0.0)
    hit = session.on_key_input(gameplay_models.KeyInput(key="ArrowLeft", pressed=True, time_seconds=1.0))
    assert hit.judgement == "perfect"
    assert session.on_key_input(gameplay_models.KeyInput(key="ArrowLeft", pressed=False, time_seconds=1.1)) is None
    assert session.engine.held_keys() == frozenset()


def test_from_config_applies_gameplay_settings(surface, clock):
    app_config = app_config_module.AppConfig.model_validate(
        {"gameplay": {"playback_rate": 2.0, "perfect_seconds": 0.02, "great_seconds": 0.04, "good_seconds": 0.06}}
    )
    session = GameplaySession.from_config(surface, app_config, clock=clock)
    assert session.timing.playback_rate() == 2.0
    session.load_chart(chart_loader.dump_chart(make_chart({"ArrowLeft": [1.0]})))
    session.start(now=0.0)
    hit = session.on_key_down("ArrowLeft", 0.508)
    assert hit.judgement == "great"


def test_from_config_enables_the_judgement_log(surface, clock):
    app_config = app_config_module.AppConfig.model_validate({"logging": {"judgement_log": True}})
    session = GameplaySession.from_config(surface, app_config, clock=clock)
    session.load_chart(CHART_TEXT)
    session.start(now=0.0)
    session.on_key_down("ArrowLeft", 1.0)
    assert len(session.engine.judgement_log().events()) == 1


def test_per_frame_calls_before_start_time_never_raise(surface, clock):
    session = GameplaySession(surface, clock=clock)
    session.load_chart('{"ArrowLeft": [{"press": 1.0}], "K": []}')
    session.start(now=10.0)
    assert session.on_key_down("ArrowLeft", 9.0) is None
    session.on_key_up("ArrowLeft")
    frame = session.render_tick(now=9.5)
    assert frame.song_time_seconds == pytest.approx(-0.5)
    assert session.render_tick(now=10.0) is not None


def test_playback_rate_change_while_playing_keeps_ticking(surface, clock):
    session = GameplaySession(surface, clock=clock)
    session.load_chart(CHART_TEXT)
    session.start(now=0.0)
    session.render_tick(now=0.5)
    session.set_playback_rate(2.0)
    frame = session.render_tick(now=0.75)
    assert frame.playback_rate == 2.0
    assert frame.song_time_seconds == pytest.approx(1.5)
    assert session.is_playing()
