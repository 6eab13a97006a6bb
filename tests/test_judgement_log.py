"""Tests for the judgement log strategies and logging level parsing."""

import logging

import gameplay_models
from judgement_log import ActiveJudgementLog, DisabledJudgementLog, create_judgement_log
from logging_setup import _parse_level


def _event(judgement):
    return gameplay_models.JudgementEvent(
        time_seconds=1.0,
        chart_key="ArrowLeft",
        lane="left",
        note_time_seconds=1.0,
        delta_seconds=0.0,
        judgement=judgement,
        points=100.0,
    )


def test_factory_picks_the_strategy():
    assert isinstance(create_judgement_log(True), ActiveJudgementLog)
    assert isinstance(create_judgement_log(False), DisabledJudgementLog)


def test_active_log_keeps_events_and_summarizes():
    log = ActiveJudgementLog()
    log.record(_event("perfect"))
    log.record(_event("bad"))
    log.record_hold(chart_key="ArrowLeft", note_time_seconds=1.0, bonus_points=5, was_broken=False)
    assert len(log.events()) == 2
    assert log.summary() == {"perfect": 1, "great": 0, "good": 0, "bad": 1}
    log.clear()
    assert log.events() == []


def test_active_log_writes_debug_records(caplog):
    log = ActiveJudgementLog()
    with caplog.at_level(logging.DEBUG, logger="judgement_log"):
        log.record(_event("great"))
    assert "GREAT on ArrowLeft" in caplog.text


def test_disabled_log_keeps_nothing():
    log = DisabledJudgementLog()
    log.record(_event("perfect"))
    assert log.events() == []
    assert log.summary()["perfect"] == 0


def test_parse_level():
    assert _parse_level("warn") == logging.WARNING
    assert _parse_level(" debug ") == logging.DEBUG
    assert _parse_level("") is None
    assert _parse_level("loud") is None
