# demo_chart.py
from __future__ import annotations

from typing import Dict, List

import gameplay_models


def build_demo_chart(*, difficulty: str) -> gameplay_models.Chart:
    normalized_difficulty = (difficulty or "easy").strip().lower() or "easy"

    if normalized_difficulty == "hard":
        step_interval_seconds = 0.40
        total_notes = 32
    elif normalized_difficulty == "medium":
        step_interval_seconds = 0.55
        total_notes = 24
    else:
        step_interval_seconds = 0.75
        total_notes = 16

    lead_in_seconds = 2.5

    # Deterministic pattern over both lanes. "L" and "R" are taps, "LH" and "RH" are holds.
    pattern = [
        "L", "R", "L", "R",
        "LH", "R", "L", "RH",
        "L", "L", "R", "R",
        "LH", "RH", "L", "R",
    ]
    chart_keys = {"L": "ArrowLeft", "R": "ArrowRight"}

    notes_by_key: Dict[str, List[gameplay_models.NoteEvent]] = {"ArrowLeft": [], "ArrowRight": []}
    current_time_seconds = lead_in_seconds

    for note_index in range(total_notes):
        step = pattern[note_index % len(pattern)]
        chart_key = chart_keys[step[0]]
        if step.endswith("H"):
            release_time_seconds = current_time_seconds + step_interval_seconds * 1.5
            notes_by_key[chart_key].append(
                gameplay_models.NoteEvent(press_time_seconds=current_time_seconds, release_time_seconds=release_time_seconds)
            )
            current_time_seconds = release_time_seconds + step_interval_seconds
            continue

        notes_by_key[chart_key].append(gameplay_models.NoteEvent(press_time_seconds=current_time_seconds))
        current_time_seconds += step_interval_seconds

    return gameplay_models.Chart.from_lists(notes_by_key)
