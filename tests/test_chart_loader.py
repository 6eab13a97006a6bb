"""Tests for chart payload parsing."""

import json

import pytest

from chart_loader import ParseError, dump_chart, load_chart, load_chart_file


def test_loads_taps_and_long_notes():
    chart = load_chart('{"ArrowLeft": [{"press": 1.0}, {"press": 2, "release": 2.5, "held": true}], "ArrowRight": []}')
    left = chart.notes_for("ArrowLeft")
    assert len(left) == 2
    assert left[0].release_time_seconds is None
    assert left[1].press_time_seconds == 2.0
    assert left[1].is_long_note()
    assert chart.notes_for("ArrowRight") == ()
    assert chart.total_notes() == 2


def test_accepts_bytes_and_mappings():
    payload = {"KeyZ": [{"press": 0.5}]}
    from_bytes = load_chart(json.dumps(payload).encode("utf-8"))
    from_mapping = load_chart(payload)
    assert from_bytes == from_mapping


def test_short_release_is_not_a_long_note():
    chart = load_chart({"ArrowLeft": [{"press": 1.0, "release": 1.1}]})
    assert not chart.notes_for("ArrowLeft")[0].is_long_note()


@pytest.mark.parametrize(
    "payload",
    [
        "{",
        "[]",
        '"ArrowLeft"',
        '{"ArrowLeft": {"press": 1.0}}',
        '{"ArrowLeft": [{"release": 1.0}]}',
        '{"ArrowLeft": [{"press": "1.0"}]}',
        '{"ArrowLeft": [{"press": true}]}',
        '{"ArrowLeft": [{"press": NaN}]}',
        '{"ArrowLeft": [{"press": 1' + "0" * 400 + "}]}",
        '{"ArrowLeft": [{"press": ' + "9" * 5000 + "}]}",
        {"ArrowLeft": [{"press": 10**400}]},
        {"ArrowLeft": [{"press": 1.0, "release": -(10**400)}]},
    ],
)
def test_malformed_payload_raises_parse_error(payload):
    with pytest.raises(ParseError):
        load_chart(payload)


def test_parse_error_is_a_value_error():
    assert issubclass(ParseError, ValueError)


def test_dump_then_load_keeps_notes():
    chart = load_chart({"ArrowLeft": [{"press": 1.0}, {"press": 2.0, "release": 3.0}]})
    assert load_chart(dump_chart(chart)) == chart


def test_load_chart_file(tmp_path):
    chart_path = tmp_path / "keyTimings.json"
    chart_path.write_text('{"ArrowRight": [{"press": 3.25}]}', encoding="utf-8")
    chart = load_chart_file(chart_path)
    assert chart.notes_for("ArrowRight")[0].press_time_seconds == 3.25


def test_missing_chart_file_raises_parse_error(tmp_path):
    with pytest.raises(ParseError):
        load_chart_file(tmp_path / "missing.json")


def test_bundled_chart_parses():
    import paths

    chart = load_chart_file(paths.default_chart_path())
    assert set(chart.chart_keys()) == {"ArrowLeft", "ArrowRight"}
    assert any(note.is_long_note() for note in chart.notes_for("ArrowLeft"))
