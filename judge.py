# -*- coding: utf-8 -*-
########################
# judge.py
########################
# Purpose:
# - Hit judgement and scoring engine for the two lane playfield.
# - Matches key presses to the nearest unjudged note of the resolved chart key within the timing window.
# - Tracks active long note holds: per tick trickle, early release combo break, finalization bonus.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Two states: IDLE and PLAYING. In IDLE every per frame call is a no-op.
# - Per frame operations (on_key_down, on_key_up, update_for_time) never raise.
# - A press with no qualifying note is a silent miss: no score or combo change.
# - Key repeat policy: a key-down for a key already held is not judged again.
# - All windows are divided by the playback rate; song time is multiplied by it (TimingModel).
#
########################
# Interfaces:
# Public dataclasses:
# - JudgementWindows(timing_window_seconds, perfect_seconds, great_seconds, good_seconds)
#   - classify_distance(distance_seconds: float, playback_rate: float) -> Optional[str]
# - HoldRules(long_note_threshold_seconds, grace_period_seconds, min_hold_ratio, trickle_points)
# - ScoreState(score: float, combo: int, max_combo: int, perfect_count, great_count, good_count, bad_count, hold_bonus_total)
#   - apply_judgement(judgement: str) -> float
#   - add_points(points: float) -> None
#   - break_combo() -> None
# - OverlayNote / OverlayFrame: read-only per frame view handed to OverlayRenderer
#
# Public enums / exceptions:
# - class EngineState(enum.Enum): IDLE, PLAYING
# - class NotReady(RuntimeError)
#
# Public classes:
# - class JudgeEngine
#   - load_chart(chart: gameplay_models.Chart) -> None
#   - set_playback_rate(playback_rate: float) -> None
#   - start(now: Optional[float] = None) -> None
#   - stop() -> None
#   - on_key_down(physical_key: str, time_now: float) -> Optional[JudgementEvent]
#   - on_key_up(physical_key: str) -> None
#   - update_for_time(time_now: float) -> float   (returns song time)
#   - frame(song_time_seconds: float) -> OverlayFrame
#   - score() / combo() / score_state() / held_keys() / held_lanes() / is_lane_held(lane) / state()
#
# Inputs:
# - Physical key names and wall clock timestamps (converted through TimingModel).
#
# Outputs:
# - JudgementEvent objects, ScoreState readouts and OverlayFrame views.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import enum
import logging
import math
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

import gameplay_models
import hit_feedback
import judgement_log
import lane_registry
import note_scheduler
import timing_model

logger = logging.getLogger(__name__)


class NotReady(RuntimeError):
    """Raised when a session is started without a loaded chart."""


class EngineState(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"


@dataclass(frozen=True)
class JudgementWindows:
    timing_window_seconds: float = 0.2
    perfect_seconds: float = 0.05
    great_seconds: float = 0.10
    good_seconds: float = 0.15

    def match_window(self, playback_rate: float) -> float:
        return float(self.timing_window_seconds) / float(playback_rate)

    def classify_distance(self, distance_seconds: float, playback_rate: float) -> Optional[str]:
        rate = float(playback_rate)
        distance = abs(float(distance_seconds))
        if distance >= self.match_window(rate):
            return None
        if distance < float(self.perfect_seconds) / rate:
            return gameplay_models.PERFECT
        if distance < float(self.great_seconds) / rate:
            return gameplay_models.GREAT
        if distance < float(self.good_seconds) / rate:
            return gameplay_models.GOOD
        return gameplay_models.BAD


@dataclass(frozen=True)
class HoldRules:
    long_note_threshold_seconds: float = gameplay_models.LONG_NOTE_THRESHOLD_SECONDS
    grace_period_seconds: float = 0.3
    min_hold_ratio: float = 0.7
    trickle_points: float = 1.0


COMBO_STEP = 0.1
COMBO_MULTIPLIER_CAP = 2.0


def combo_multiplier(combo: int) -> float:
    return 1.0 + min(int(combo) * COMBO_STEP, COMBO_MULTIPLIER_CAP)


@dataclass
class ScoreState:
    score: float = 0.0
    combo: int = 0
    max_combo: int = 0
    perfect_count: int = 0
    great_count: int = 0
    good_count: int = 0
    bad_count: int = 0
    hold_bonus_total: int = 0

    def apply_judgement(self, judgement: str) -> float:
        """Update combo and counts for a judgement and return the points awarded."""
        text = str(judgement).strip().lower()

        if text == gameplay_models.PERFECT:
            self.combo += 1
            self.perfect_count += 1
        elif text == gameplay_models.GREAT:
            self.combo += 1
            self.great_count += 1
        elif text == gameplay_models.GOOD:
            self.combo += 1
            self.good_count += 1
        elif text == gameplay_models.BAD:
            self.combo = 0
            self.bad_count += 1
        else:
            # Unknown judgements do not mutate score state.
            return 0.0

        if self.combo > self.max_combo:
            self.max_combo = self.combo

        points = gameplay_models.POINTS_BY_JUDGEMENT[text] * combo_multiplier(self.combo)
        self.score += points
        return points

    def add_points(self, points: float) -> None:
        if points > 0:
            self.score += float(points)

    def break_combo(self) -> None:
        self.combo = 0


@dataclass(frozen=True)
class OverlayNote:
    chart_key: str
    index: int
    lane: str
    press_time_seconds: float
    release_time_seconds: Optional[float]
    is_long_note: bool
    is_judged: bool
    is_holding: bool


@dataclass(frozen=True)
class OverlayFrame:
    song_time_seconds: float
    playback_rate: float
    score: float
    combo: int
    notes: Tuple[OverlayNote, ...] = ()
    held_lanes: FrozenSet[str] = frozenset()
    feedback: Tuple[hit_feedback.FeedbackVisual, ...] = ()


@dataclass
class _Session:
    held_keys: Set[str] = field(default_factory=set)


class JudgeEngine:
    def __init__(
        self,
        playfield: lane_registry.Playfield,
        *,
        windows: Optional[JudgementWindows] = None,
        hold_rules: Optional[HoldRules] = None,
        feedback_tracker: Optional[hit_feedback.FeedbackTracker] = None,
        log: Optional[judgement_log.JudgementLog] = None,
        timing: Optional[timing_model.TimingModel] = None,
    ) -> None:
        self._playfield = playfield
        self._key_binding = playfield.key_binding
        self._windows = windows or JudgementWindows()
        self._hold_rules = hold_rules or HoldRules()
        self._feedback = feedback_tracker or hit_feedback.FeedbackTracker()
        self._log = log or judgement_log.DisabledJudgementLog()
        self._timing = timing or timing_model.TimingModel()

        self._state = EngineState.IDLE
        self._chart: Optional[gameplay_models.Chart] = None
        self._note_scheduler: Optional[note_scheduler.NoteScheduler] = None
        self._score_state = ScoreState()
        self._session = _Session()

    # -----------------
    # Readouts
    # -----------------

    def state(self) -> EngineState:
        return self._state

    def is_playing(self) -> bool:
        return self._state == EngineState.PLAYING

    def chart(self) -> Optional[gameplay_models.Chart]:
        return self._chart

    def note_scheduler(self) -> Optional[note_scheduler.NoteScheduler]:
        return self._note_scheduler

    def timing(self) -> timing_model.TimingModel:
        return self._timing

    def playfield(self) -> lane_registry.Playfield:
        return self._playfield

    def judgement_windows(self) -> JudgementWindows:
        return self._windows

    def hold_rules(self) -> HoldRules:
        return self._hold_rules

    def feedback_tracker(self) -> hit_feedback.FeedbackTracker:
        return self._feedback

    def judgement_log(self) -> judgement_log.JudgementLog:
        return self._log

    def score_state(self) -> ScoreState:
        return self._score_state

    def score(self) -> float:
        return float(self._score_state.score)

    def combo(self) -> int:
        return int(self._score_state.combo)

    def held_keys(self) -> FrozenSet[str]:
        return frozenset(self._session.held_keys)

    def held_lanes(self) -> FrozenSet[str]:
        lanes = set()
        for key in self._session.held_keys:
            lane = self._key_binding.lane_for(key)
            if lane is not None:
                lanes.add(lane)
        return frozenset(lanes)

    def is_lane_held(self, lane: str) -> bool:
        return lane in self.held_lanes()

    def is_chart_key_held(self, chart_key: str) -> bool:
        return any(self._key_binding.chart_key_for(key) == chart_key for key in self._session.held_keys)

    # -----------------
    # Lifecycle
    # -----------------

    def load_chart(self, chart: gameplay_models.Chart) -> None:
        """Replace the chart. A running session is stopped first."""
        if self.is_playing():
            self.stop()
        self._chart = chart
        self._note_scheduler = note_scheduler.NoteScheduler(chart)

    def set_playback_rate(self, playback_rate: float) -> None:
        self._timing.set_playback_rate(playback_rate)
        logger.info("Playback rate set to %sx", self._timing.playback_rate())

    def start(self, now: Optional[float] = None) -> None:
        if self._chart is None or self._note_scheduler is None:
            raise NotReady("No chart loaded")

        self._timing.start(now)
        self._session = _Session()
        self._note_scheduler.reset()
        self._feedback.clear()
        self._log.clear()
        self._score_state = ScoreState()
        self._state = EngineState.PLAYING
        logger.info("Session started with playback rate %sx", self._timing.playback_rate())

    def stop(self) -> None:
        # Score and combo stay readable until the next start().
        self._state = EngineState.IDLE
        self._session.held_keys.clear()
        if self._note_scheduler is not None:
            self._note_scheduler.clear_holds()
        self._feedback.clear()
        logger.info("Session stopped: score %.1f, max combo %d", self._score_state.score, self._score_state.max_combo)

    # -----------------
    # Input path
    # -----------------

    def on_key_down(self, physical_key: str, time_now: float) -> Optional[gameplay_models.JudgementEvent]:
        if not self.is_playing() or self._note_scheduler is None:
            return None

        key = str(physical_key)
        if key in self._session.held_keys:
            return None
        self._session.held_keys.add(key)

        chart_key = self._key_binding.chart_key_for(key)
        lane = self._key_binding.lane_for(key)
        if lane is None or not self._note_scheduler.notes_for(chart_key):
            return None

        song_time = self._song_time(time_now)
        if song_time is None:
            return None

        playback_rate = self._timing.playback_rate()
        scheduled_note = self._note_scheduler.find_nearest_unjudged_note(
            chart_key=chart_key,
            target_time_seconds=song_time,
            max_window_seconds=self._windows.match_window(playback_rate),
        )
        if scheduled_note is None:
            return None

        note_time = float(scheduled_note.note_event.press_time_seconds)
        delta = song_time - note_time
        judgement = self._windows.classify_distance(delta, playback_rate)
        if judgement is None:
            return None

        points = self._score_state.apply_judgement(judgement)

        lane_config = self._playfield.lane_config(lane)
        x_pixels = lane_config.x_pixels if lane_config is not None else 0.0
        self._feedback.spawn(
            chart_key=chart_key,
            note_index=scheduled_note.index,
            judge_time_seconds=song_time,
            judgement=judgement,
            x_pixels=x_pixels,
            y_pixels=self._playfield.note_y(note_time, song_time, playback_rate),
        )

        if scheduled_note.note_event.is_long_note(self._hold_rules.long_note_threshold_seconds):
            self._note_scheduler.begin_hold(scheduled_note)

        self._note_scheduler.mark_judged(scheduled_note, judgement=judgement, delta_seconds=delta)

        event = gameplay_models.JudgementEvent(
            time_seconds=song_time,
            chart_key=chart_key,
            lane=lane,
            note_time_seconds=note_time,
            delta_seconds=delta,
            judgement=judgement,
            points=points,
        )
        self._log.record(event)
        return event

    def on_key_up(self, physical_key: str) -> None:
        if not self.is_playing():
            return
        self._session.held_keys.discard(str(physical_key))

    # -----------------
    # Per tick bookkeeping
    # -----------------

    def update_for_time(self, time_now: float) -> Optional[float]:
        """Advance long note holds and feedback decay. Returns the song time, or None when idle."""
        if not self.is_playing() or self._note_scheduler is None:
            return None

        song_time = self._song_time(time_now)
        if song_time is None:
            return None

        self._update_holds(song_time)
        self._feedback.prune(song_time)
        return song_time

    def _update_holds(self, song_time: float) -> None:
        assert self._note_scheduler is not None
        rules = self._hold_rules

        for chart_key, hold_notes in self._note_scheduler.active_holds().items():
            is_key_held = self.is_chart_key_held(chart_key)

            for scheduled_note in hold_notes:
                note = scheduled_note.note_event
                if note.release_time_seconds is None:
                    self._note_scheduler.finish_hold(scheduled_note)
                    continue

                press_time = float(note.press_time_seconds)
                release_time = float(note.release_time_seconds)
                duration = release_time - press_time

                if press_time <= song_time <= release_time:
                    if is_key_held:
                        self._score_state.add_points(rules.trickle_points)
                    elif duration > 0.0 and not scheduled_note.hold_broken:
                        hold_progress = (song_time - press_time) / duration
                        if hold_progress < float(rules.min_hold_ratio):
                            scheduled_note.hold_broken = True
                            self._score_state.break_combo()

                if song_time > release_time + float(rules.grace_period_seconds):
                    bonus_points = 0
                    if duration > float(rules.long_note_threshold_seconds):
                        bonus_points = int(math.floor(duration * 10.0))
                        self._score_state.add_points(bonus_points)
                        self._score_state.hold_bonus_total += bonus_points
                    self._log.record_hold(
                        chart_key=chart_key,
                        note_time_seconds=press_time,
                        bonus_points=bonus_points,
                        was_broken=scheduled_note.hold_broken,
                    )
                    self._note_scheduler.finish_hold(scheduled_note)

    def _song_time(self, time_now: float) -> Optional[float]:
        try:
            song_time = self._timing.song_time_seconds(time_now)
        except (TypeError, ValueError):
            logger.warning("Ignoring unusable timestamp %r", time_now)
            return None
        if not math.isfinite(song_time):
            logger.warning("Ignoring non-finite song time for timestamp %r", time_now)
            return None
        return song_time

    # -----------------
    # Render view
    # -----------------

    def frame(self, song_time_seconds: float, *, lookback_seconds: float, lookahead_seconds: float) -> OverlayFrame:
        playback_rate = self._timing.playback_rate()
        notes: List[OverlayNote] = []

        if self._note_scheduler is not None:
            threshold = self._hold_rules.long_note_threshold_seconds
            visible_heads = {
                (scheduled_note.chart_key, scheduled_note.index)
                for scheduled_note in self._note_scheduler.visible_notes(
                    song_time_seconds=song_time_seconds,
                    lookback_seconds=lookback_seconds / playback_rate,
                    lookahead_seconds=lookahead_seconds / playback_rate,
                )
            }
            for scheduled_note in self._note_scheduler.all_notes():
                lane = self._playfield.lane_for_chart_key(scheduled_note.chart_key)
                if lane is None:
                    continue
                note = scheduled_note.note_event
                is_long = note.is_long_note(threshold)
                head_visible = (scheduled_note.chart_key, scheduled_note.index) in visible_heads
                tail_visible = is_long and not (scheduled_note.is_judged and not scheduled_note.is_holding)
                if not head_visible and not tail_visible:
                    continue
                notes.append(
                    OverlayNote(
                        chart_key=scheduled_note.chart_key,
                        index=scheduled_note.index,
                        lane=lane,
                        press_time_seconds=float(note.press_time_seconds),
                        release_time_seconds=note.release_time_seconds,
                        is_long_note=is_long,
                        is_judged=scheduled_note.is_judged,
                        is_holding=scheduled_note.is_holding,
                    )
                )

        return OverlayFrame(
            song_time_seconds=float(song_time_seconds),
            playback_rate=playback_rate,
            score=self.score(),
            combo=self.combo(),
            notes=tuple(notes),
            held_lanes=self.held_lanes(),
            feedback=tuple(self._feedback.visuals(song_time_seconds)),
        )


def _run_unit_tests() -> None:
    chart = gameplay_models.Chart.from_lists(
        {
            "ArrowLeft": [
                gameplay_models.NoteEvent(press_time_seconds=1.0),
                gameplay_models.NoteEvent(press_time_seconds=2.0, release_time_seconds=2.5),
            ],
        }
    )
    playfield = lane_registry.Playfield(lanes=lane_registry.build_lane_configs(400.0))
    engine = JudgeEngine(playfield, timing=timing_model.TimingModel(clock=lambda: 0.0))

    try:
        engine.start(now=0.0)
    except NotReady:
        pass
    else:
        raise AssertionError("expected NotReady")

    assert engine.on_key_down("ArrowLeft", 1.0) is None

    engine.load_chart(chart)
    engine.start(now=0.0)

    hit = engine.on_key_down("ArrowLeft", 1.0)
    assert hit is not None
    assert hit.judgement == gameplay_models.PERFECT
    assert abs(engine.score() - 110.0) < 1e-9
    assert engine.combo() == 1

    engine.on_key_up("ArrowLeft")
    assert engine.on_key_down("ArrowLeft", 1.0) is None

    engine.on_key_up("ArrowLeft")
    held = engine.on_key_down("KeyZ", 2.0)
    assert held is not None
    for tick_time in (2.1, 2.3, 2.5):
        engine.update_for_time(tick_time)
    score_before_bonus = engine.score()
    engine.update_for_time(2.81)
    assert abs(engine.score() - (score_before_bonus + 5)) < 1e-9
    assert not engine.note_scheduler().has_active_holds()

    engine.stop()
    assert engine.combo() == 2
    engine.update_for_time(10.0)


if __name__ == "__main__":
    _run_unit_tests()
    print("judge.py: ok")
