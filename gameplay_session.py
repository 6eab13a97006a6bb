# -*- coding: utf-8 -*-
########################
# gameplay_session.py
########################
# Purpose:
# - One play session bound to one canvas: chart load, start/stop, key input and the per frame render tick.
# - Wires TimingModel + JudgeEngine + FeedbackTracker + JudgementLog + OverlayRenderer.
#
# Design notes:
# - No Qt usage. overlay_widget.GameplayOverlayWidget and the harness drive this object.
# - The canvas only has to report width() and height(). Lane positions are computed from its width once.
# - The draw surface may be the canvas itself, or passed per tick (Qt paints through a fresh QPainter each frame).
# - A missing canvas fails here, at construction, never during a frame.
# - A chart load failure leaves the previous chart and session state untouched.
#
########################
# Interfaces:
# Public exceptions:
# - class SurfaceError(RuntimeError)
#
# Public classes:
# - class GameplaySession
#   - __init__(canvas, *, surface=None, key_binding=None, overlay_config=None, windows=None, hold_rules=None,
#              feedback_lifetime_seconds=0.5, log=None, clock=time.monotonic)
#   - from_config(canvas, app_config, *, surface=None, clock=time.monotonic) -> GameplaySession
#   - load_chart(raw) -> Chart
#   - load_chart_file(chart_path) -> Chart
#   - set_playback_rate(playback_rate: float) -> None
#   - start(now: Optional[float] = None) -> None
#   - stop() -> None
#   - on_key_down(physical_key: str, now: Optional[float] = None) -> Optional[JudgementEvent]
#   - on_key_up(physical_key: str) -> None
#   - on_key_input(key_input: KeyInput) -> Optional[JudgementEvent]
#   - render_tick(now: Optional[float] = None, surface: Optional[DrawSurface] = None) -> Optional[OverlayFrame]
#   - score() -> float
#   - combo() -> int
#
########################

from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Any, Callable, Optional

import chart_loader
import draw_surface
import gameplay_models
import hit_feedback
import judge
import judgement_log
import lane_registry
import overlay_renderer
import timing_model

logger = logging.getLogger(__name__)


class SurfaceError(RuntimeError):
    """Raised when a session is constructed without a usable canvas."""


def _canvas_size(canvas: Any) -> tuple[float, float]:
    if canvas is None:
        raise SurfaceError("A canvas is required")
    try:
        width = float(canvas.width())
        height = float(canvas.height())
    except (AttributeError, TypeError, ValueError) as exception:
        raise SurfaceError(f"Canvas does not report a usable size: {exception}") from exception
    if width <= 0.0 or height <= 0.0:
        raise SurfaceError(f"Canvas size must be positive, got {width}x{height}")
    return width, height


class GameplaySession:
    def __init__(
        self,
        canvas: Any,
        *,
        surface: Optional[draw_surface.DrawSurface] = None,
        key_binding: Optional[lane_registry.KeyBinding] = None,
        overlay_config: Optional[overlay_renderer.OverlayConfig] = None,
        windows: Optional[judge.JudgementWindows] = None,
        hold_rules: Optional[judge.HoldRules] = None,
        feedback_lifetime_seconds: float = 0.5,
        log: Optional[judgement_log.JudgementLog] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        width, _height = _canvas_size(canvas)

        if surface is None and isinstance(canvas, draw_surface.DrawSurface):
            surface = canvas
        if surface is not None and not isinstance(surface, draw_surface.DrawSurface):
            raise SurfaceError(f"{type(surface).__name__} does not implement the drawing surface contract")

        self._canvas = canvas
        self._surface = surface
        self._renderer = overlay_renderer.OverlayRenderer(overlay_config)
        config = self._renderer.config()

        self._playfield = lane_registry.Playfield(
            lanes=lane_registry.build_lane_configs(width, lane_spacing_pixels=config.lane_spacing_pixels),
            target_y_pixels=config.target_y_pixels,
            approach_speed_pixels=config.approach_speed_pixels,
            key_binding=key_binding or lane_registry.default_key_binding(),
        )
        self._timing = timing_model.TimingModel(clock=clock)
        self._engine = judge.JudgeEngine(
            self._playfield,
            windows=windows,
            hold_rules=hold_rules,
            feedback_tracker=hit_feedback.FeedbackTracker(feedback_lifetime_seconds),
            log=log,
            timing=self._timing,
        )

    @classmethod
    def from_config(
        cls,
        canvas: Any,
        app_config: Any,
        *,
        surface: Optional[draw_surface.DrawSurface] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "GameplaySession":
        gameplay = app_config.gameplay
        session = cls(
            canvas,
            surface=surface,
            key_binding=lane_registry.KeyBinding(
                key_to_lane=dict(app_config.keys.key_to_lane),
                key_aliases=dict(app_config.keys.key_aliases),
            ),
            windows=judge.JudgementWindows(
                timing_window_seconds=gameplay.timing_window_seconds,
                perfect_seconds=gameplay.perfect_seconds,
                great_seconds=gameplay.great_seconds,
                good_seconds=gameplay.good_seconds,
            ),
            hold_rules=judge.HoldRules(
                long_note_threshold_seconds=gameplay.long_note_threshold_seconds,
                grace_period_seconds=gameplay.hold_grace_seconds,
                min_hold_ratio=gameplay.min_hold_ratio,
                trickle_points=gameplay.hold_trickle_points,
            ),
            feedback_lifetime_seconds=gameplay.feedback_lifetime_seconds,
            log=judgement_log.create_judgement_log(bool(app_config.logging.judgement_log)),
            clock=clock,
        )
        session.set_playback_rate(gameplay.playback_rate)
        return session

    # -----------------
    # Accessors
    # -----------------

    @property
    def engine(self) -> judge.JudgeEngine:
        return self._engine

    @property
    def renderer(self) -> overlay_renderer.OverlayRenderer:
        return self._renderer

    @property
    def playfield(self) -> lane_registry.Playfield:
        return self._playfield

    @property
    def timing(self) -> timing_model.TimingModel:
        return self._timing

    def state(self) -> judge.EngineState:
        return self._engine.state()

    def is_playing(self) -> bool:
        return self._engine.is_playing()

    def score(self) -> float:
        return self._engine.score()

    def combo(self) -> int:
        return self._engine.combo()

    # -----------------
    # Chart and lifecycle
    # -----------------

    def load_chart(self, raw: Any) -> gameplay_models.Chart:
        try:
            chart = chart_loader.load_chart(raw)
        except chart_loader.ParseError as exception:
            logger.warning("Chart load failed, keeping previous chart: %s", exception)
            raise
        self._engine.load_chart(chart)
        return chart

    def load_chart_file(self, chart_path: Path) -> gameplay_models.Chart:
        try:
            chart = chart_loader.load_chart_file(chart_path)
        except chart_loader.ParseError as exception:
            logger.warning("Chart load failed for %s, keeping previous chart: %s", chart_path, exception)
            raise
        self._engine.load_chart(chart)
        return chart

    def set_playback_rate(self, playback_rate: float) -> None:
        self._engine.set_playback_rate(playback_rate)

    def start(self, now: Optional[float] = None) -> None:
        self._engine.start(now)

    def stop(self) -> None:
        self._engine.stop()

    # -----------------
    # Input and frame
    # -----------------

    def on_key_down(self, physical_key: str, now: Optional[float] = None) -> Optional[gameplay_models.JudgementEvent]:
        time_now = self._timing.now() if now is None else now
        return self._engine.on_key_down(physical_key, time_now)

    def on_key_up(self, physical_key: str) -> None:
        self._engine.on_key_up(physical_key)

    def on_key_input(self, key_input: gameplay_models.KeyInput) -> Optional[gameplay_models.JudgementEvent]:
        if key_input.pressed:
            return self.on_key_down(key_input.key, key_input.time_seconds)
        self.on_key_up(key_input.key)
        return None

    def render_tick(
        self,
        now: Optional[float] = None,
        surface: Optional[draw_surface.DrawSurface] = None,
    ) -> Optional[judge.OverlayFrame]:
        if not self._engine.is_playing():
            return None

        time_now = self._timing.now() if now is None else now
        song_time = self._engine.update_for_time(time_now)
        if song_time is None:
            return None

        config = self._renderer.config()
        frame = self._engine.frame(
            song_time,
            lookback_seconds=config.lookback_seconds,
            lookahead_seconds=config.lookahead_seconds,
        )

        target = surface if surface is not None else self._surface
        if target is not None:
            self._renderer.render(target, frame, self._playfield)
        return frame
