"""Shared fixtures for the headless gameplay tests."""

import pytest

import draw_surface
import gameplay_models
import judge
import lane_registry
import timing_model


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = float(now)

    def __call__(self) -> float:
        return self.now


def make_chart(notes_by_key):
    """Build a Chart from {key: [press or (press, release)]}."""
    converted = {}
    for chart_key, entries in notes_by_key.items():
        notes = []
        for entry in entries:
            if isinstance(entry, tuple):
                notes.append(gameplay_models.NoteEvent(press_time_seconds=entry[0], release_time_seconds=entry[1]))
            else:
                notes.append(gameplay_models.NoteEvent(press_time_seconds=entry))
        converted[chart_key] = notes
    return gameplay_models.Chart.from_lists(converted)


def make_engine(chart=None, *, playback_rate=1.0, log=None):
    playfield = lane_registry.Playfield(lanes=lane_registry.build_lane_configs(400.0))
    engine = judge.JudgeEngine(playfield, log=log, timing=timing_model.TimingModel(clock=FakeClock()))
    engine.set_playback_rate(playback_rate)
    if chart is not None:
        engine.load_chart(chart)
        engine.start(now=0.0)
    return engine


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def surface():
    return draw_surface.RecordingSurface(480.0, 480.0)
