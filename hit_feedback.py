# -*- coding: utf-8 -*-
########################
# hit_feedback.py
########################
# Purpose:
# - Short lived visual acknowledgements spawned by judgements.
# - Purely cosmetic: never read by scoring.
#
# Design notes:
# - No Qt usage.
# - Positions are frozen at spawn time. Only alpha, scale and a vertical drift change with age.
# - Ages are measured in song time, the same clock the judge uses.
#
########################
# Interfaces:
# Public dataclasses:
# - FeedbackEvent(chart_key: str, note_index: int, judge_time_seconds: float, judgement: str, x_pixels: float, y_pixels: float)
# - FeedbackVisual(event: FeedbackEvent, progress: float, alpha: float, scale: float, y_offset_pixels: float, color: str)
#
# Public classes:
# - class FeedbackTracker
#   - __init__(lifetime_seconds: float = 0.5)
#   - spawn(...) -> FeedbackEvent
#   - prune(song_time_seconds: float) -> None
#   - clear() -> None
#   - events() -> list[FeedbackEvent]
#   - visuals(song_time_seconds: float) -> list[FeedbackVisual]
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import gameplay_models

FEEDBACK_COLORS: Dict[str, str] = {
    gameplay_models.PERFECT: "#FFD700",
    gameplay_models.GREAT: "#FFA500",
    gameplay_models.GOOD: "#90EE90",
    gameplay_models.BAD: "#FF6B6B",
}

DRIFT_PIXELS = 30.0
GROWTH = 0.5


@dataclass(frozen=True)
class FeedbackEvent:
    chart_key: str
    note_index: int
    judge_time_seconds: float
    judgement: str
    x_pixels: float
    y_pixels: float


@dataclass(frozen=True)
class FeedbackVisual:
    event: FeedbackEvent
    progress: float
    alpha: float
    scale: float
    y_offset_pixels: float
    color: str


class FeedbackTracker:
    def __init__(self, lifetime_seconds: float = 0.5) -> None:
        if float(lifetime_seconds) <= 0.0:
            raise ValueError("feedback lifetime must be positive")
        self._lifetime_seconds = float(lifetime_seconds)
        self._events: List[FeedbackEvent] = []

    @property
    def lifetime_seconds(self) -> float:
        return self._lifetime_seconds

    def spawn(
        self,
        *,
        chart_key: str,
        note_index: int,
        judge_time_seconds: float,
        judgement: str,
        x_pixels: float,
        y_pixels: float,
    ) -> FeedbackEvent:
        event = FeedbackEvent(
            chart_key=str(chart_key),
            note_index=int(note_index),
            judge_time_seconds=float(judge_time_seconds),
            judgement=str(judgement),
            x_pixels=float(x_pixels),
            y_pixels=float(y_pixels),
        )
        self._events.append(event)
        return event

    def prune(self, song_time_seconds: float) -> None:
        self._events = [
            event
            for event in self._events
            if float(song_time_seconds) - event.judge_time_seconds < self._lifetime_seconds
        ]

    def clear(self) -> None:
        self._events.clear()

    def events(self) -> List[FeedbackEvent]:
        return list(self._events)

    def visuals(self, song_time_seconds: float) -> List[FeedbackVisual]:
        visuals: List[FeedbackVisual] = []
        for event in self._events:
            age = float(song_time_seconds) - event.judge_time_seconds
            progress = age / self._lifetime_seconds
            if progress < 0.0 or progress >= 1.0:
                continue
            visuals.append(
                FeedbackVisual(
                    event=event,
                    progress=progress,
                    alpha=1.0 - progress,
                    scale=1.0 + progress * GROWTH,
                    y_offset_pixels=-progress * DRIFT_PIXELS,
                    color=FEEDBACK_COLORS.get(event.judgement, "#FFFFFF"),
                )
            )
        return visuals
