# -*- coding: utf-8 -*-
########################
# gameplay_models.py
########################
# Purpose:
# - Core gameplay data models for the two lane judgement pipeline.
# - Defines the internal Chart representation and gameplay events.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain dataclasses.
# - Chart notes are immutable. Judged state lives in NoteScheduler, never on the NoteEvent.
#
########################
# Interfaces:
# Public constants:
# - LONG_NOTE_THRESHOLD_SECONDS
# - PERFECT, GREAT, GOOD, BAD, JUDGEMENT_ORDER, POINTS_BY_JUDGEMENT
#
# Public dataclasses:
# - NoteEvent(press_time_seconds: float, release_time_seconds: Optional[float])
# - Chart(notes_by_key: dict[str, tuple[NoteEvent, ...]])
# - KeyInput(key: str, pressed: bool, time_seconds: float)
# - JudgementEvent(time_seconds: float, chart_key: str, lane: str, note_time_seconds: float,
#                  delta_seconds: float, judgement: str, points: float)
#
# Inputs/Outputs:
# - These types are exchanged between chart_loader, NoteScheduler, JudgeEngine, OverlayRenderer,
#   and the harness coordinators.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

LONG_NOTE_THRESHOLD_SECONDS = 0.2

PERFECT = "perfect"
GREAT = "great"
GOOD = "good"
BAD = "bad"

# Tightest first.
JUDGEMENT_ORDER: Tuple[str, ...] = (PERFECT, GREAT, GOOD, BAD)

POINTS_BY_JUDGEMENT: Dict[str, int] = {
    PERFECT: 100,
    GREAT: 75,
    GOOD: 50,
    BAD: 25,
}


@dataclass(frozen=True)
class NoteEvent:
    press_time_seconds: float
    release_time_seconds: Optional[float] = None

    def duration_seconds(self) -> float:
        if self.release_time_seconds is None:
            return 0.0
        return float(self.release_time_seconds) - float(self.press_time_seconds)

    def is_long_note(self, threshold_seconds: float = LONG_NOTE_THRESHOLD_SECONDS) -> bool:
        return self.release_time_seconds is not None and self.duration_seconds() > float(threshold_seconds)


@dataclass(frozen=True)
class Chart:
    notes_by_key: Mapping[str, Tuple[NoteEvent, ...]] = field(default_factory=dict)

    @classmethod
    def from_lists(cls, notes_by_key: Mapping[str, Sequence[NoteEvent]]) -> "Chart":
        return cls(notes_by_key={str(key): tuple(notes) for key, notes in notes_by_key.items()})

    def chart_keys(self) -> List[str]:
        return list(self.notes_by_key.keys())

    def notes_for(self, chart_key: str) -> Tuple[NoteEvent, ...]:
        return tuple(self.notes_by_key.get(str(chart_key), ()))

    def total_notes(self) -> int:
        return sum(len(notes) for notes in self.notes_by_key.values())

    def duration_seconds(self) -> float:
        latest = 0.0
        for notes in self.notes_by_key.values():
            for note in notes:
                latest = max(latest, float(note.press_time_seconds))
                if note.release_time_seconds is not None:
                    latest = max(latest, float(note.release_time_seconds))
        return latest


@dataclass(frozen=True)
class KeyInput:
    key: str
    pressed: bool
    time_seconds: float


@dataclass(frozen=True)
class JudgementEvent:
    time_seconds: float
    chart_key: str
    lane: str
    note_time_seconds: float
    delta_seconds: float
    judgement: str
    points: float
