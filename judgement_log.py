# -*- coding: utf-8 -*-
########################
# judgement_log.py
########################
# Purpose:
# - Optional record of every judgement and hold result of a session.
# - Two interchangeable variants: ActiveJudgementLog keeps and logs events,
#   DisabledJudgementLog drops them. Chosen at runtime, not by a module flag.
#
# Design notes:
# - No Qt usage.
# - JudgeEngine only ever calls record() and clear(); it never branches on the variant.
#
########################
# Interfaces:
# Public classes:
# - class JudgementLog (base)
#   - record(event: JudgementEvent) -> None
#   - record_hold(*, chart_key: str, note_time_seconds: float, bonus_points: int, was_broken: bool) -> None
#   - events() -> list[JudgementEvent]
#   - summary() -> dict[str, int]
#   - clear() -> None
# - class ActiveJudgementLog(JudgementLog)
# - class DisabledJudgementLog(JudgementLog)
#
# Public functions:
# - create_judgement_log(enabled: bool) -> JudgementLog
#
########################

from __future__ import annotations

import logging
from typing import Dict, List

import gameplay_models

logger = logging.getLogger(__name__)


class JudgementLog:
    enabled = False

    def record(self, event: gameplay_models.JudgementEvent) -> None:
        raise NotImplementedError

    def record_hold(self, *, chart_key: str, note_time_seconds: float, bonus_points: int, was_broken: bool) -> None:
        raise NotImplementedError

    def events(self) -> List[gameplay_models.JudgementEvent]:
        raise NotImplementedError

    def summary(self) -> Dict[str, int]:
        counts = {judgement: 0 for judgement in gameplay_models.JUDGEMENT_ORDER}
        for event in self.events():
            counts[event.judgement] = counts.get(event.judgement, 0) + 1
        return counts

    def clear(self) -> None:
        raise NotImplementedError


class ActiveJudgementLog(JudgementLog):
    enabled = True

    def __init__(self) -> None:
        self._events: List[gameplay_models.JudgementEvent] = []

    def record(self, event: gameplay_models.JudgementEvent) -> None:
        self._events.append(event)
        logger.debug(
            "%s on %s (%s lane) at %.3fs, delta %+.3fs, +%.1f",
            event.judgement.upper(),
            event.chart_key,
            event.lane,
            event.time_seconds,
            event.delta_seconds,
            event.points,
        )

    def record_hold(self, *, chart_key: str, note_time_seconds: float, bonus_points: int, was_broken: bool) -> None:
        logger.debug(
            "Hold on %s at %.3fs finalized, bonus %d%s",
            chart_key,
            note_time_seconds,
            bonus_points,
            " (released early)" if was_broken else "",
        )

    def events(self) -> List[gameplay_models.JudgementEvent]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()


class DisabledJudgementLog(JudgementLog):
    def record(self, event: gameplay_models.JudgementEvent) -> None:
        return

    def record_hold(self, *, chart_key: str, note_time_seconds: float, bonus_points: int, was_broken: bool) -> None:
        return

    def events(self) -> List[gameplay_models.JudgementEvent]:
        return []

    def clear(self) -> None:
        return


def create_judgement_log(enabled: bool) -> JudgementLog:
    if enabled:
        return ActiveJudgementLog()
    return DisabledJudgementLog()
