# -*- coding: utf-8 -*-
########################
# chart_loader.py
########################
# Purpose:
# - Parse key timing payloads into gameplay_models.Chart.
# - Payload shape: {"<chart key>": [{"press": 1.0, "release": 1.5}, {"press": 2.0}], ...}
#
########################
# Key Logic:
# - Strict contract:
#   - The root must be a mapping of chart key to a list of note entries.
#   - Every entry needs a numeric "press". "release" is optional (null equals absent).
#   - Booleans and non-finite numbers are not accepted as times.
#   - Unknown entry fields (for example the recorder's "held" flag) are ignored.
# - No ordering or overlap validation. Notes keep payload order.
# - A failed parse raises ParseError and never returns a partial chart.
#
########################
# Interfaces:
# Public exceptions:
# - class ParseError(ValueError)
#
# Public functions:
# - load_chart(raw: str | bytes | Mapping) -> gameplay_models.Chart
# - load_chart_file(chart_path: pathlib.Path) -> gameplay_models.Chart
# - dump_chart(chart: gameplay_models.Chart) -> str
#
########################
# Smoke Tests:
#   - python chart_loader.py
########################

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, TypeAdapter, ValidationError, field_validator

import gameplay_models

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when a chart payload is not a well formed mapping of chart key to note list."""


class _NoteEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    press: Union[StrictInt, StrictFloat]
    release: Optional[Union[StrictInt, StrictFloat]] = None

    @field_validator("press", "release")
    @classmethod
    def validate_finite(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        try:
            number = float(value)
        except OverflowError as exception:
            raise ValueError("note times must fit in a float") from exception
        if not math.isfinite(number):
            raise ValueError("note times must be finite numbers")
        return number


_PAYLOAD_ADAPTER = TypeAdapter(Dict[StrictStr, List[_NoteEntry]])


def _decode_raw(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exception:
            raise ParseError(f"Chart payload is not valid UTF-8: {exception}") from exception

    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except ValueError as exception:
            # JSONDecodeError, and oversized integer literals.
            raise ParseError(f"Chart payload is not valid JSON: {exception}") from exception

    return raw


def load_chart(raw: Any) -> gameplay_models.Chart:
    decoded = _decode_raw(raw)
    if not isinstance(decoded, Mapping):
        raise ParseError("Chart payload root must be a mapping of chart key to note list")

    try:
        parsed = _PAYLOAD_ADAPTER.validate_python(dict(decoded))
    except ValidationError as exception:
        raise ParseError(f"Chart payload validation failed:\n{exception}") from exception

    notes_by_key = {
        chart_key: tuple(
            gameplay_models.NoteEvent(
                press_time_seconds=float(entry.press),
                release_time_seconds=None if entry.release is None else float(entry.release),
            )
            for entry in entries
        )
        for chart_key, entries in parsed.items()
    }
    chart = gameplay_models.Chart(notes_by_key=notes_by_key)
    logger.info("Loaded chart with %d keys and %d notes", len(notes_by_key), chart.total_notes())
    return chart


def load_chart_file(chart_path: Path) -> gameplay_models.Chart:
    resolved_path = Path(chart_path)
    try:
        raw_text = resolved_path.read_text(encoding="utf-8")
    except OSError as exception:
        raise ParseError(f"Failed to read chart file: {resolved_path}. Error: {exception}") from exception
    return load_chart(raw_text)


def dump_chart(chart: gameplay_models.Chart) -> str:
    payload: Dict[str, List[Dict[str, float]]] = {}
    for chart_key in chart.chart_keys():
        entries: List[Dict[str, float]] = []
        for note in chart.notes_for(chart_key):
            entry = {"press": float(note.press_time_seconds)}
            if note.release_time_seconds is not None:
                entry["release"] = float(note.release_time_seconds)
            entries.append(entry)
        payload[chart_key] = entries
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _run_unit_tests() -> None:
    chart = load_chart('{"ArrowLeft": [{"press": 1.0}, {"press": 2, "release": 2.5, "held": true}]}')
    notes = chart.notes_for("ArrowLeft")
    assert len(notes) == 2
    assert notes[0].release_time_seconds is None
    assert notes[1].is_long_note()

    for bad_payload in ("[]", '{"ArrowLeft": [{"release": 1.0}]}', '{"ArrowLeft": [{"press": "1.0"}]}', "{", '{"A": [{"press": true}]}'):
        try:
            load_chart(bad_payload)
        except ParseError:
            continue
        raise AssertionError(f"expected ParseError for {bad_payload!r}")

    again = load_chart(dump_chart(chart))
    assert again == chart


if __name__ == "__main__":
    _run_unit_tests()
    print("chart_loader.py: ok")
