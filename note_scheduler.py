# -*- coding: utf-8 -*-
########################
# note_scheduler.py
########################
# Purpose:
# - Organize chart notes into a flat per chart key arena for judgement and rendering.
# - Tracks judgement state and active long note holds by (chart_key, index), never by object identity.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Notes keep chart payload order. Nearest note search scans the whole key list,
#   so unsorted charts judge correctly.
# - This module owns the judged flags and the active hold lists; other modules query it.
#
########################
# Interfaces:
# Public dataclasses:
# - ScheduledNote(
#     chart_key: str,
#     index: int,
#     note_event: NoteEvent,
#     is_judged: bool = False,
#     judgement: Optional[str] = None,
#     judgement_delta_seconds: Optional[float] = None,
#     is_holding: bool = False,
#     hold_broken: bool = False,
#   )
#
# Public classes:
# - class NoteScheduler
#   - __init__(chart: gameplay_models.Chart)
#   - chart() -> gameplay_models.Chart
#   - reset() -> None
#   - notes_for(chart_key: str) -> list[ScheduledNote]
#   - all_notes() -> list[ScheduledNote]
#   - mark_judged(scheduled_note, *, judgement: str, delta_seconds: float) -> None
#   - find_nearest_unjudged_note(*, chart_key: str, target_time_seconds: float, max_window_seconds: float) -> Optional[ScheduledNote]
#   - visible_notes(*, song_time_seconds: float, lookback_seconds: float, lookahead_seconds: float) -> list[ScheduledNote]
#   - begin_hold(scheduled_note) -> None
#   - finish_hold(scheduled_note) -> None
#   - active_holds() -> dict[str, list[ScheduledNote]]
#   - has_active_holds() -> bool
#   - clear_holds() -> None
#
# Inputs:
# - Chart and time parameters.
#
# Outputs:
# - ScheduledNote views for rendering and candidate selection for JudgeEngine.
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import gameplay_models


@dataclass
class ScheduledNote:
    chart_key: str
    index: int
    note_event: gameplay_models.NoteEvent
    is_judged: bool = False
    judgement: Optional[str] = None
    judgement_delta_seconds: Optional[float] = None
    is_holding: bool = False
    hold_broken: bool = False


class NoteScheduler:
    def __init__(self, chart: gameplay_models.Chart) -> None:
        self._chart = chart
        self._notes_by_key: Dict[str, List[ScheduledNote]] = {}
        for chart_key in chart.chart_keys():
            self._notes_by_key[chart_key] = [
                ScheduledNote(chart_key=chart_key, index=index, note_event=note)
                for index, note in enumerate(chart.notes_for(chart_key))
            ]
        # chart_key -> note indexes in hold start order
        self._holds: Dict[str, List[int]] = {}

    def chart(self) -> gameplay_models.Chart:
        return self._chart

    def reset(self) -> None:
        for scheduled_note in self.all_notes():
            scheduled_note.is_judged = False
            scheduled_note.judgement = None
            scheduled_note.judgement_delta_seconds = None
            scheduled_note.is_holding = False
            scheduled_note.hold_broken = False
        self._holds.clear()

    def notes_for(self, chart_key: str) -> List[ScheduledNote]:
        return self._notes_by_key.get(str(chart_key), [])

    def all_notes(self) -> List[ScheduledNote]:
        notes: List[ScheduledNote] = []
        for key_notes in self._notes_by_key.values():
            notes.extend(key_notes)
        return notes

    def mark_judged(self, scheduled_note: ScheduledNote, *, judgement: str, delta_seconds: float) -> None:
        scheduled_note.is_judged = True
        scheduled_note.judgement = str(judgement)
        scheduled_note.judgement_delta_seconds = float(delta_seconds)

    def find_nearest_unjudged_note(
        self,
        *,
        chart_key: str,
        target_time_seconds: float,
        max_window_seconds: float,
    ) -> Optional[ScheduledNote]:
        target = float(target_time_seconds)
        window = float(max_window_seconds)

        best_note: Optional[ScheduledNote] = None
        best_abs_delta = float("inf")

        for candidate in self.notes_for(chart_key):
            if candidate.is_judged:
                continue
            note_time = float(candidate.note_event.press_time_seconds)
            abs_delta = abs(note_time - target)
            if abs_delta >= window:
                continue

            if abs_delta < best_abs_delta:
                best_note = candidate
                best_abs_delta = abs_delta
            elif abs_delta == best_abs_delta and best_note is not None:
                # Tie break default:
                # - choose the earlier note time when equidistant, then payload order.
                if note_time < float(best_note.note_event.press_time_seconds):
                    best_note = candidate

        return best_note

    def visible_notes(
        self,
        *,
        song_time_seconds: float,
        lookback_seconds: float,
        lookahead_seconds: float,
    ) -> List[ScheduledNote]:
        visible: List[ScheduledNote] = []
        for scheduled_note in self.all_notes():
            time_offset = float(scheduled_note.note_event.press_time_seconds) - float(song_time_seconds)
            if -float(lookback_seconds) < time_offset < float(lookahead_seconds):
                visible.append(scheduled_note)
        return visible

    def begin_hold(self, scheduled_note: ScheduledNote) -> None:
        if scheduled_note.is_holding:
            return
        scheduled_note.is_holding = True
        scheduled_note.hold_broken = False
        self._holds.setdefault(scheduled_note.chart_key, []).append(scheduled_note.index)

    def finish_hold(self, scheduled_note: ScheduledNote) -> None:
        scheduled_note.is_holding = False
        indexes = self._holds.get(scheduled_note.chart_key)
        if indexes is None:
            return
        if scheduled_note.index in indexes:
            indexes.remove(scheduled_note.index)
        if not indexes:
            del self._holds[scheduled_note.chart_key]

    def active_holds(self) -> Dict[str, List[ScheduledNote]]:
        holds: Dict[str, List[ScheduledNote]] = {}
        for chart_key, indexes in self._holds.items():
            key_notes = self.notes_for(chart_key)
            holds[chart_key] = [key_notes[index] for index in indexes]
        return holds

    def has_active_holds(self) -> bool:
        return bool(self._holds)

    def clear_holds(self) -> None:
        for chart_key, indexes in self._holds.items():
            key_notes = self.notes_for(chart_key)
            for index in indexes:
                key_notes[index].is_holding = False
        self._holds.clear()


def _run_unit_tests() -> None:
    chart = gameplay_models.Chart.from_lists(
        {
            "ArrowLeft": [
                gameplay_models.NoteEvent(press_time_seconds=2.0),
                gameplay_models.NoteEvent(press_time_seconds=1.0, release_time_seconds=1.5),
            ],
            "ArrowRight": [gameplay_models.NoteEvent(press_time_seconds=0.5)],
        }
    )
    scheduler = NoteScheduler(chart)

    nearest = scheduler.find_nearest_unjudged_note(chart_key="ArrowLeft", target_time_seconds=1.1, max_window_seconds=0.2)
    assert nearest is not None
    assert nearest.index == 1

    assert scheduler.find_nearest_unjudged_note(chart_key="ArrowLeft", target_time_seconds=1.2, max_window_seconds=0.2) is None
    assert scheduler.find_nearest_unjudged_note(chart_key="Missing", target_time_seconds=1.0, max_window_seconds=0.2) is None

    scheduler.mark_judged(nearest, judgement="perfect", delta_seconds=0.1)
    scheduler.begin_hold(nearest)
    assert list(scheduler.active_holds().keys()) == ["ArrowLeft"]
    assert scheduler.find_nearest_unjudged_note(chart_key="ArrowLeft", target_time_seconds=1.0, max_window_seconds=0.2) is None

    scheduler.finish_hold(nearest)
    assert not scheduler.has_active_holds()
    assert nearest.is_judged

    visible = scheduler.visible_notes(song_time_seconds=1.0, lookback_seconds=0.3, lookahead_seconds=2.0)
    assert [(n.chart_key, n.index) for n in visible] == [("ArrowLeft", 0), ("ArrowLeft", 1)]

    scheduler.reset()
    assert not any(n.is_judged for n in scheduler.all_notes())


if __name__ == "__main__":
    _run_unit_tests()
    print("note_scheduler.py: ok")
