# -*- coding: utf-8 -*-
########################
# lane_registry.py
########################
# Purpose:
# - Static lane layout and key binding for the two lane playfield.
# - Maps physical keys to lanes, and physical keys to the chart key whose notes they judge.
# - Projects note times onto the screen (Playfield.note_y).
#
# Design notes:
# - No Qt usage. Pure geometry and lookup tables.
# - Everything here is computed once at construction time and never mutated.
#
########################
# Interfaces:
# Public constants:
# - LEFT, RIGHT, LANE_NAMES
#
# Public dataclasses:
# - LaneConfig(name: str, x_pixels: float, color: str)
# - KeyBinding(key_to_lane: dict[str, str], key_aliases: dict[str, str])
# - Playfield(lanes: dict[str, LaneConfig], target_y_pixels: float, approach_speed_pixels: float, key_binding: KeyBinding)
#
# Public functions:
# - build_lane_configs(surface_width: float, *, lane_spacing_pixels: float = 60.0) -> dict[str, LaneConfig]
# - default_key_binding() -> KeyBinding
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

LEFT = "left"
RIGHT = "right"
LANE_NAMES = (LEFT, RIGHT)

LANE_COLORS: Dict[str, str] = {
    LEFT: "#00ff00",
    RIGHT: "#0080ff",
}


@dataclass(frozen=True)
class LaneConfig:
    name: str
    x_pixels: float
    color: str


@dataclass(frozen=True)
class KeyBinding:
    key_to_lane: Mapping[str, str] = field(default_factory=dict)
    key_aliases: Mapping[str, str] = field(default_factory=dict)

    def lane_for(self, key: str) -> Optional[str]:
        return self.key_to_lane.get(str(key))

    def chart_key_for(self, key: str) -> str:
        return str(self.key_aliases.get(str(key), key))

    def keys_for_chart_key(self, chart_key: str) -> List[str]:
        return [key for key in self.key_to_lane.keys() if self.chart_key_for(key) == chart_key]


def default_key_binding() -> KeyBinding:
    """
    Arrow keys are the chart keys. Z and X are aliases that judge against
    the arrow key notes of the same lane.
    """
    return KeyBinding(
        key_to_lane={
            "ArrowLeft": LEFT,
            "ArrowRight": RIGHT,
            "KeyZ": LEFT,
            "KeyX": RIGHT,
        },
        key_aliases={
            "KeyZ": "ArrowLeft",
            "KeyX": "ArrowRight",
        },
    )


def build_lane_configs(surface_width: float, *, lane_spacing_pixels: float = 60.0) -> Dict[str, LaneConfig]:
    center_x = float(surface_width) / 2.0
    half_spacing = float(lane_spacing_pixels) / 2.0
    return {
        LEFT: LaneConfig(name=LEFT, x_pixels=center_x - half_spacing, color=LANE_COLORS[LEFT]),
        RIGHT: LaneConfig(name=RIGHT, x_pixels=center_x + half_spacing, color=LANE_COLORS[RIGHT]),
    }


@dataclass(frozen=True)
class Playfield:
    lanes: Mapping[str, LaneConfig]
    target_y_pixels: float = 250.0
    approach_speed_pixels: float = 200.0
    key_binding: KeyBinding = field(default_factory=default_key_binding)

    def note_y(self, note_time_seconds: float, song_time_seconds: float, playback_rate: float) -> float:
        time_offset = float(note_time_seconds) - float(song_time_seconds)
        return float(self.target_y_pixels) - time_offset * float(self.approach_speed_pixels) * float(playback_rate)

    def lane_config(self, lane: Optional[str]) -> Optional[LaneConfig]:
        if lane is None:
            return None
        return self.lanes.get(lane)

    def lane_for_chart_key(self, chart_key: str) -> Optional[str]:
        # The chart key is itself a physical key in every binding we ship; fall back to any alias.
        lane = self.key_binding.lane_for(chart_key)
        if lane is not None:
            return lane
        for key in self.key_binding.keys_for_chart_key(chart_key):
            lane = self.key_binding.lane_for(key)
            if lane is not None:
                return lane
        return None
