"""Tests for the per chart key note arena."""

from conftest import make_chart
from note_scheduler import NoteScheduler


def test_equidistant_notes_pick_the_earlier_one():
    scheduler = NoteScheduler(make_chart({"ArrowLeft": [1.5, 1.0]}))
    nearest = scheduler.find_nearest_unjudged_note(chart_key="ArrowLeft", target_time_seconds=1.25, max_window_seconds=0.5)
    assert nearest.note_event.press_time_seconds == 1.0
    assert nearest.index == 1


def test_window_bound_is_exclusive():
    scheduler = NoteScheduler(make_chart({"ArrowLeft": [1.0]}))
    assert scheduler.find_nearest_unjudged_note(chart_key="ArrowLeft", target_time_seconds=1.25, max_window_seconds=0.25) is None


def test_judged_notes_are_skipped_and_reset_restores_them():
    scheduler = NoteScheduler(make_chart({"ArrowLeft": [1.0]}))
    note = scheduler.notes_for("ArrowLeft")[0]
    scheduler.mark_judged(note, judgement="perfect", delta_seconds=0.0)
    assert scheduler.find_nearest_unjudged_note(chart_key="ArrowLeft", target_time_seconds=1.0, max_window_seconds=0.2) is None

    scheduler.reset()
    assert not note.is_judged
    assert scheduler.find_nearest_unjudged_note(chart_key="ArrowLeft", target_time_seconds=1.0, max_window_seconds=0.2) is note


def test_unknown_chart_key_has_no_notes():
    scheduler = NoteScheduler(make_chart({"ArrowLeft": [1.0]}))
    assert scheduler.notes_for("Space") == []
    assert scheduler.find_nearest_unjudged_note(chart_key="Space", target_time_seconds=1.0, max_window_seconds=0.2) is None


def test_visible_notes_use_strict_bounds():
    scheduler = NoteScheduler(make_chart({"ArrowLeft": [0.5, 1.0, 3.0], "ArrowRight": [2.5]}))
    visible = scheduler.visible_notes(song_time_seconds=1.0, lookback_seconds=0.5, lookahead_seconds=1.5)
    assert sorted(note.note_event.press_time_seconds for note in visible) == [1.0]


def test_holds_are_tracked_by_index():
    scheduler = NoteScheduler(make_chart({"ArrowLeft": [(1.0, 2.0), (3.0, 4.0)]}))
    first, second = scheduler.notes_for("ArrowLeft")
    scheduler.begin_hold(first)
    scheduler.begin_hold(second)
    scheduler.begin_hold(first)
    assert scheduler.active_holds() == {"ArrowLeft": [first, second]}

    scheduler.finish_hold(first)
    assert scheduler.active_holds() == {"ArrowLeft": [second]}
    assert not first.is_holding

    scheduler.clear_holds()
    assert not scheduler.has_active_holds()
    assert not second.is_holding
