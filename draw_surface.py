# -*- coding: utf-8 -*-
########################
# draw_surface.py
########################
# Purpose:
# - Minimal immediate mode 2D drawing contract consumed by OverlayRenderer.
# - Headless RecordingSurface that records draw calls instead of painting.
#
# Design notes:
# - No Qt usage. qt_surface.QPainterSurface adapts this contract onto QPainter.
# - Colors are "#rrggbb" strings. Alpha is a separate multiplier in [0, 1].
# - save() and restore() bracket alpha and shadow state, like a canvas context.
#
########################
# Interfaces:
# Public protocols:
# - class DrawSurface(Protocol)
#   - width() -> float
#   - height() -> float
#   - save() -> None
#   - restore() -> None
#   - set_alpha(alpha: float) -> None
#   - set_shadow(color: str, blur_pixels: float, offset_x: float = 0.0, offset_y: float = 0.0) -> None
#   - clear_shadow() -> None
#   - fill_rect(x, y, width, height, color) -> None
#   - stroke_rect(x, y, width, height, color, line_width) -> None
#   - line(x1, y1, x2, y2, color, line_width) -> None
#   - text(x, y, text, color, *, size_pixels, align, bold, outline_color) -> None
#
# Public dataclasses:
# - DrawCall(op: str, args: tuple, alpha: float, shadow: Optional[tuple])
#
# Public classes:
# - class RecordingSurface
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Tuple, runtime_checkable

TEXT_ALIGN_LEFT = "left"
TEXT_ALIGN_CENTER = "center"
TEXT_ALIGN_RIGHT = "right"


@runtime_checkable
class DrawSurface(Protocol):
    def width(self) -> float: ...

    def height(self) -> float: ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def set_alpha(self, alpha: float) -> None: ...

    def set_shadow(self, color: str, blur_pixels: float, offset_x: float = 0.0, offset_y: float = 0.0) -> None: ...

    def clear_shadow(self) -> None: ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...

    def stroke_rect(self, x: float, y: float, width: float, height: float, color: str, line_width: float) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, line_width: float) -> None: ...

    def text(
        self,
        x: float,
        y: float,
        text: str,
        color: str,
        *,
        size_pixels: float = 16.0,
        align: str = TEXT_ALIGN_LEFT,
        bold: bool = False,
        outline_color: Optional[str] = None,
    ) -> None: ...


@dataclass(frozen=True)
class DrawCall:
    op: str
    args: Tuple[Any, ...]
    alpha: float = 1.0
    shadow: Optional[Tuple[str, float, float, float]] = None


@dataclass
class _SurfaceState:
    alpha: float = 1.0
    shadow: Optional[Tuple[str, float, float, float]] = None


class RecordingSurface:
    """DrawSurface that keeps every call, for headless tests and the --run-tests harness."""

    def __init__(self, width: float = 640.0, height: float = 480.0) -> None:
        self._width = float(width)
        self._height = float(height)
        self._state = _SurfaceState()
        self._stack: List[_SurfaceState] = []
        self.calls: List[DrawCall] = []

    def width(self) -> float:
        return self._width

    def height(self) -> float:
        return self._height

    def save(self) -> None:
        self._stack.append(_SurfaceState(alpha=self._state.alpha, shadow=self._state.shadow))

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    def set_alpha(self, alpha: float) -> None:
        self._state.alpha = max(0.0, min(1.0, float(alpha)))

    def set_shadow(self, color: str, blur_pixels: float, offset_x: float = 0.0, offset_y: float = 0.0) -> None:
        self._state.shadow = (str(color), float(blur_pixels), float(offset_x), float(offset_y))

    def clear_shadow(self) -> None:
        self._state.shadow = None

    def _record(self, op: str, *args: Any) -> None:
        self.calls.append(DrawCall(op=op, args=tuple(args), alpha=self._state.alpha, shadow=self._state.shadow))

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._record("fill_rect", float(x), float(y), float(width), float(height), str(color))

    def stroke_rect(self, x: float, y: float, width: float, height: float, color: str, line_width: float) -> None:
        self._record("stroke_rect", float(x), float(y), float(width), float(height), str(color), float(line_width))

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, line_width: float) -> None:
        self._record("line", float(x1), float(y1), float(x2), float(y2), str(color), float(line_width))

    def text(
        self,
        x: float,
        y: float,
        text: str,
        color: str,
        *,
        size_pixels: float = 16.0,
        align: str = TEXT_ALIGN_LEFT,
        bold: bool = False,
        outline_color: Optional[str] = None,
    ) -> None:
        self._record("text", float(x), float(y), str(text), str(color), float(size_pixels), str(align), bool(bold), outline_color)

    def clear(self) -> None:
        self.calls.clear()

    def calls_of(self, op: str) -> List[DrawCall]:
        return [call for call in self.calls if call.op == op]

    def texts(self) -> List[str]:
        return [str(call.args[2]) for call in self.calls_of("text")]
