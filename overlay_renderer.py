# -*- coding: utf-8 -*-
########################
# overlay_renderer.py
########################
# Purpose:
# - Per frame draw routine for the two lane playfield.
# - Projects notes by time to arrival and issues draw calls on a draw_surface.DrawSurface.
#
########################
# Key Logic:
# - Draw order:
#   - translucent strip with the song time and playback rate readout
#   - opaque backdrop behind the lane region only
#   - lane guide lines
#   - long note tails with a release end cap (gold while a judged hold is still active), then unjudged note heads
#   - target line and per lane target markers (glow while the lane key is held)
#   - decaying hit feedback markers and judgement labels
#   - score and combo readout
# - Note y: target_y - (note_time - song_time) * approach_speed * playback_rate.
# - Visibility windows are divided by the playback rate.
# - Strict boundaries:
#   - Reads an OverlayFrame built by JudgeEngine.frame. Holds no gameplay state of its own.
#   - No Qt usage. overlay_widget.GameplayOverlayWidget hosts this renderer inside Qt.
#
########################
# Interfaces:
# Public dataclasses:
# - OverlayConfig(lane_width_pixels: float, target_y_pixels: float, approach_speed_pixels: float, ...)
#
# Public classes:
# - class OverlayRenderer
#   - __init__(config: Optional[OverlayConfig] = None)
#   - config() -> OverlayConfig
#   - lane_top(surface) -> float
#   - lane_bottom(surface) -> float
#   - render(surface: DrawSurface, frame: judge.OverlayFrame, playfield: lane_registry.Playfield) -> None
#
# Inputs:
# - judge.OverlayFrame for the current song time.
# - lane_registry.Playfield for lane positions and projection.
#
# Outputs:
# - Draw calls on the provided surface.
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import draw_surface
import judge
import lane_registry

BACKDROP_COLOR = "#000000"
GUIDE_COLOR = "#888888"
TARGET_COLOR = "#ffffff"
SHADOW_COLOR = "#000000"
HELD_TAIL_COLOR = "#FFD700"
TEXT_COLOR = "#ffffff"
READOUT_STRIP_COLOR = "#ff0000"
READOUT_STRIP_ALPHA = 0.3


@dataclass(frozen=True)
class OverlayConfig:
    lane_width_pixels: float = 40.0
    lane_spacing_pixels: float = 60.0
    target_y_pixels: float = 250.0
    approach_speed_pixels: float = 200.0
    lane_top_offset_pixels: float = 220.0
    lane_bottom_margin_pixels: float = 120.0
    note_width_pixels: float = 30.0
    note_height_pixels: float = 20.0
    tail_width_pixels: float = 10.0
    lookahead_seconds: float = 2.0
    lookback_seconds: float = 0.3
    head_hide_after_seconds: float = 0.05
    head_overdraw_pixels: float = 25.0
    feedback_label_offset_pixels: float = 25.0
    readout_height_pixels: float = 40.0


class OverlayRenderer:
    def __init__(self, config: Optional[OverlayConfig] = None) -> None:
        self._config = config or OverlayConfig()

    def config(self) -> OverlayConfig:
        return self._config

    def lane_top(self, surface: draw_surface.DrawSurface) -> float:
        return float(self._config.target_y_pixels) - float(self._config.lane_top_offset_pixels)

    def lane_bottom(self, surface: draw_surface.DrawSurface) -> float:
        bottom = float(surface.height()) - float(self._config.lane_bottom_margin_pixels)
        # Keep the target marker inside the lane region on short surfaces.
        return max(bottom, float(self._config.target_y_pixels) + float(self._config.note_height_pixels))

    def render(
        self,
        surface: draw_surface.DrawSurface,
        frame: judge.OverlayFrame,
        playfield: lane_registry.Playfield,
    ) -> None:
        if not playfield.lanes:
            return
        self._draw_time_readout(surface, frame)
        self._draw_backdrop(surface, playfield)
        self._draw_lane_guides(surface, playfield)
        self._draw_notes(surface, frame, playfield)
        self._draw_targets(surface, frame, playfield)
        self._draw_feedback(surface, frame)
        self._draw_score(surface, frame)

    # -----------------
    # Layers
    # -----------------

    def _draw_time_readout(self, surface: draw_surface.DrawSurface, frame: judge.OverlayFrame) -> None:
        surface.save()
        surface.set_alpha(READOUT_STRIP_ALPHA)
        surface.fill_rect(0.0, 0.0, float(surface.width()), float(self._config.readout_height_pixels), READOUT_STRIP_COLOR)
        surface.restore()

        surface.save()
        surface.set_shadow(SHADOW_COLOR, 4.0)
        surface.text(
            10.0,
            12.0,
            f"♪ Time: {frame.song_time_seconds:.1f}s ({frame.playback_rate:g}x)",
            TEXT_COLOR,
            size_pixels=16.0,
        )
        surface.restore()

    def _lane_span(self, playfield: lane_registry.Playfield) -> tuple[float, float]:
        half_width = float(self._config.lane_width_pixels) / 2.0
        xs = [lane.x_pixels for lane in playfield.lanes.values()]
        return min(xs) - half_width, max(xs) + half_width

    def _draw_backdrop(self, surface: draw_surface.DrawSurface, playfield: lane_registry.Playfield) -> None:
        left, right = self._lane_span(playfield)
        top = self.lane_top(surface)
        bottom = self.lane_bottom(surface)
        surface.fill_rect(left, top, right - left, bottom - top, BACKDROP_COLOR)

    def _draw_lane_guides(self, surface: draw_surface.DrawSurface, playfield: lane_registry.Playfield) -> None:
        half_width = float(self._config.lane_width_pixels) / 2.0
        top = self.lane_top(surface)
        bottom = self.lane_bottom(surface)
        for lane in playfield.lanes.values():
            for x in (lane.x_pixels - half_width, lane.x_pixels + half_width):
                surface.line(x, top, x, bottom, GUIDE_COLOR, 2.0)

    def _draw_notes(
        self,
        surface: draw_surface.DrawSurface,
        frame: judge.OverlayFrame,
        playfield: lane_registry.Playfield,
    ) -> None:
        config = self._config
        top = self.lane_top(surface)
        bottom = self.lane_bottom(surface)
        rate = float(frame.playback_rate)
        song_time = float(frame.song_time_seconds)

        # Tails first so heads sit on top of them.
        for note in frame.notes:
            if not note.is_long_note or note.release_time_seconds is None:
                continue
            if note.is_judged and not note.is_holding:
                continue
            lane = playfield.lane_config(note.lane)
            if lane is None:
                continue

            press_y = playfield.note_y(note.press_time_seconds, song_time, rate)
            release_y = playfield.note_y(note.release_time_seconds, song_time, rate)
            tail_top = max(min(press_y, release_y), top)
            tail_bottom = min(max(press_y, release_y), bottom)
            if tail_bottom <= tail_top:
                continue

            color = HELD_TAIL_COLOR if note.is_judged else lane.color
            half_tail = float(config.tail_width_pixels) / 2.0
            surface.fill_rect(lane.x_pixels - half_tail, tail_top, float(config.tail_width_pixels), tail_bottom - tail_top, color)

            # Release end cap.
            if top <= release_y <= bottom + float(config.head_overdraw_pixels):
                self._draw_note_rect(surface, lane.x_pixels, release_y, color)

        lookahead = float(config.lookahead_seconds) / rate
        lookback = float(config.lookback_seconds) / rate
        for note in frame.notes:
            if note.is_judged:
                continue
            lane = playfield.lane_config(note.lane)
            if lane is None:
                continue

            time_offset = note.press_time_seconds - song_time
            if not (-lookback < time_offset < lookahead):
                continue
            if time_offset <= -float(config.head_hide_after_seconds) / rate:
                continue

            y = playfield.note_y(note.press_time_seconds, song_time, rate)
            if y < top or y > bottom + float(config.head_overdraw_pixels):
                continue
            self._draw_note_rect(surface, lane.x_pixels, y, lane.color)

    def _draw_note_rect(self, surface: draw_surface.DrawSurface, x: float, y: float, color: str) -> None:
        width = float(self._config.note_width_pixels)
        height = float(self._config.note_height_pixels)
        surface.save()
        surface.set_shadow(SHADOW_COLOR, 3.0, 1.0, 1.0)
        surface.fill_rect(x - width / 2.0, y - height / 2.0, width, height, color)
        surface.restore()

    def _draw_targets(
        self,
        surface: draw_surface.DrawSurface,
        frame: judge.OverlayFrame,
        playfield: lane_registry.Playfield,
    ) -> None:
        width = float(self._config.note_width_pixels)
        height = float(self._config.note_height_pixels)
        target_y = float(playfield.target_y_pixels)
        left, right = self._lane_span(playfield)

        surface.save()
        surface.set_shadow(SHADOW_COLOR, 2.0)
        surface.line(left, target_y, right, target_y, TARGET_COLOR, 3.0)

        for lane_name, lane in playfield.lanes.items():
            x = lane.x_pixels - width / 2.0
            y = target_y - height / 2.0

            if lane_name in frame.held_lanes:
                surface.save()
                surface.set_shadow(TARGET_COLOR, 10.0)
                surface.stroke_rect(x - 2.0, y - 2.0, width + 4.0, height + 4.0, TARGET_COLOR, 6.0)
                surface.restore()

            surface.stroke_rect(x, y, width, height, lane.color, 3.0)
            surface.stroke_rect(x + 2.0, y + 2.0, width - 4.0, height - 4.0, TARGET_COLOR, 1.0)
        surface.restore()

    def _draw_feedback(self, surface: draw_surface.DrawSurface, frame: judge.OverlayFrame) -> None:
        base_width = float(self._config.note_width_pixels)
        base_height = float(self._config.note_height_pixels)

        for visual in frame.feedback:
            x = visual.event.x_pixels
            y = visual.event.y_pixels + visual.y_offset_pixels
            width = base_width * visual.scale
            height = base_height * visual.scale

            surface.save()
            surface.set_alpha(visual.alpha)
            surface.set_shadow(visual.color, 15.0)
            surface.fill_rect(x - width / 2.0, y - height / 2.0, width, height, visual.color)
            surface.stroke_rect(x - width / 2.0, y - height / 2.0, width, height, TEXT_COLOR, 2.0)
            surface.clear_shadow()
            surface.text(
                x,
                y - float(self._config.feedback_label_offset_pixels),
                visual.event.judgement.upper(),
                visual.color,
                size_pixels=14.0,
                align=draw_surface.TEXT_ALIGN_CENTER,
                bold=True,
                outline_color=SHADOW_COLOR,
            )
            surface.restore()

    def _draw_score(self, surface: draw_surface.DrawSurface, frame: judge.OverlayFrame) -> None:
        right = float(surface.width()) - 20.0
        surface.save()
        surface.set_shadow(SHADOW_COLOR, 2.0)
        surface.text(right, 20.0, f"Score: {int(round(frame.score))}", TEXT_COLOR, size_pixels=20.0, align=draw_surface.TEXT_ALIGN_RIGHT)
        surface.text(right, 45.0, f"Combo: {int(frame.combo)}x", TEXT_COLOR, size_pixels=20.0, align=draw_surface.TEXT_ALIGN_RIGHT)
        surface.restore()
