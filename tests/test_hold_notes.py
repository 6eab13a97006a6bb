"""Tests for long note holds: trickle, early release and finalization."""

import pytest

from conftest import make_chart, make_engine


def test_held_long_note_gets_trickle_and_bonus_once():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.5)]}))
    engine.on_key_down("ArrowLeft", 1.0)
    assert engine.score() == pytest.approx(110.0)
    assert engine.note_scheduler().has_active_holds()

    for tick_time in (1.1, 1.2, 1.3, 1.4, 1.5):
        engine.update_for_time(tick_time)
    assert engine.score() == pytest.approx(115.0)

    # Still inside the grace period.
    engine.update_for_time(1.7)
    assert engine.score() == pytest.approx(115.0)
    assert engine.note_scheduler().has_active_holds()

    engine.update_for_time(1.81)
    assert engine.score() == pytest.approx(120.0)
    assert engine.score_state().hold_bonus_total == 5
    assert not engine.note_scheduler().has_active_holds()

    engine.update_for_time(2.5)
    assert engine.score() == pytest.approx(120.0)


def test_early_release_breaks_combo_on_next_tick():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.5)]}))
    engine.on_key_down("ArrowLeft", 1.0)
    engine.on_key_up("ArrowLeft")
    assert engine.combo() == 1

    engine.update_for_time(1.25)
    assert engine.combo() == 0
    assert engine.score() == pytest.approx(110.0)


def test_early_release_breaks_combo_only_once():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.5)], "ArrowRight": [1.28]}))
    engine.on_key_down("ArrowLeft", 1.0)
    engine.on_key_up("ArrowLeft")
    engine.update_for_time(1.25)
    assert engine.combo() == 0

    engine.on_key_down("ArrowRight", 1.28)
    assert engine.combo() == 1
    engine.update_for_time(1.3)
    assert engine.combo() == 1

    engine.update_for_time(1.81)
    assert not engine.note_scheduler().has_active_holds()


def test_release_late_in_the_hold_keeps_combo():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.5)]}))
    engine.on_key_down("ArrowLeft", 1.0)
    engine.on_key_up("ArrowLeft")
    engine.update_for_time(1.4)
    assert engine.combo() == 1


def test_re_holding_resumes_trickle():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.5)]}))
    engine.on_key_down("ArrowLeft", 1.0)
    engine.on_key_up("ArrowLeft")
    engine.update_for_time(1.1)
    assert engine.score() == pytest.approx(110.0)

    assert engine.on_key_down("ArrowLeft", 1.2) is None
    engine.update_for_time(1.3)
    assert engine.score() == pytest.approx(111.0)


def test_alias_key_keeps_the_hold():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.5)]}))
    engine.on_key_down("KeyZ", 1.0)
    engine.update_for_time(1.2)
    assert engine.score() == pytest.approx(111.0)
    assert engine.is_chart_key_held("ArrowLeft")


def test_short_release_is_a_tap():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.1)]}))
    engine.on_key_down("ArrowLeft", 1.0)
    assert not engine.note_scheduler().has_active_holds()


def test_stop_clears_active_holds():
    engine = make_engine(make_chart({"ArrowLeft": [(1.0, 1.5)]}))
    engine.on_key_down("ArrowLeft", 1.0)
    engine.stop()
    assert not engine.note_scheduler().has_active_holds()
    assert engine.held_lanes() == frozenset()
