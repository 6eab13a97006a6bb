# -*- coding: utf-8 -*-
########################
# timing_model.py
########################
# Purpose:
# - Single source of truth for song timing in gameplay.
# - Converts wall clock time into song time: (now - elapsed_base) * playback_rate.
#
# Design notes:
# - Gameplay code must use TimingModel.song_time_seconds.
# - No Qt usage. Keep this module pure and deterministic.
# - The clock is injected so tests can drive time by hand.
# - Song time may be negative if a caller passes a timestamp earlier than start.
#
########################
# Interfaces:
# Public dataclasses:
# - TimingSnapshot(wall_time_seconds: float, elapsed_base_seconds: float, playback_rate: float, song_time_seconds: float)
#
# Public classes:
# - class TimingModel
#   - __init__(clock: Callable[[], float] = time.monotonic)
#   - now() -> float
#   - playback_rate() -> float
#   - set_playback_rate(playback_rate: float) -> None
#   - start(now: Optional[float] = None) -> float
#   - elapsed_base_seconds() -> float
#   - song_time_seconds(now: Optional[float] = None) -> float
#   - snapshot(now: Optional[float] = None) -> TimingSnapshot
#
# Inputs:
# - Wall clock seconds from the injected clock or from the input event timestamp.
#
# Outputs:
# - Derived song_time_seconds used by JudgeEngine and overlay rendering.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import math
import time
from typing import Callable, Optional


@dataclass(frozen=True)
class TimingSnapshot:
    wall_time_seconds: float
    elapsed_base_seconds: float
    playback_rate: float
    song_time_seconds: float


def validate_playback_rate(playback_rate: float) -> float:
    value = float(playback_rate)
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError(f"playback rate must be a positive finite number, got {playback_rate!r}")
    return value


class TimingModel:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._elapsed_base_seconds = 0.0
        self._playback_rate = 1.0

    def now(self) -> float:
        return float(self._clock())

    def playback_rate(self) -> float:
        return float(self._playback_rate)

    def set_playback_rate(self, playback_rate: float) -> None:
        self._playback_rate = validate_playback_rate(playback_rate)

    def start(self, now: Optional[float] = None) -> float:
        self._elapsed_base_seconds = self.now() if now is None else float(now)
        return self._elapsed_base_seconds

    def elapsed_base_seconds(self) -> float:
        return float(self._elapsed_base_seconds)

    def song_time_seconds(self, now: Optional[float] = None) -> float:
        wall_time = self.now() if now is None else float(now)
        return (wall_time - float(self._elapsed_base_seconds)) * float(self._playback_rate)

    def snapshot(self, now: Optional[float] = None) -> TimingSnapshot:
        wall_time = self.now() if now is None else float(now)
        return TimingSnapshot(
            wall_time_seconds=wall_time,
            elapsed_base_seconds=self.elapsed_base_seconds(),
            playback_rate=self.playback_rate(),
            song_time_seconds=self.song_time_seconds(wall_time),
        )


def _run_unit_tests() -> None:
    fake_now = [100.0]
    model = TimingModel(clock=lambda: fake_now[0])
    model.start()
    assert model.song_time_seconds() == 0.0

    fake_now[0] = 101.5
    assert abs(model.song_time_seconds() - 1.5) < 1e-9

    model.set_playback_rate(0.5)
    assert abs(model.song_time_seconds() - 0.75) < 1e-9
    assert model.song_time_seconds(99.0) < 0.0

    for bad_rate in (0.0, -1.0, float("nan")):
        try:
            model.set_playback_rate(bad_rate)
        except ValueError:
            continue
        raise AssertionError(f"expected ValueError for {bad_rate!r}")

    snap = model.snapshot()
    assert abs(snap.song_time_seconds - model.song_time_seconds()) < 1e-9


if __name__ == "__main__":
    _run_unit_tests()
    print("timing_model.py: ok")
