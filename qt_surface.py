# -*- coding: utf-8 -*-
########################
# qt_surface.py
########################
# Purpose:
# - Adapt the draw_surface.DrawSurface contract onto a PyQt6 QPainter.
#
# Design notes:
# - QPainter has no canvas style shadow. A shadow is drawn as a translucent pre-pass of the same
#   shape, grown by half the blur radius and moved by the shadow offset.
# - Text y is the top of the text line (matches RecordingSurface and OverlayRenderer).
#
########################
# Interfaces:
# Public classes:
# - class QPainterSurface
#   - __init__(painter: QPainter, width: float, height: float)
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QPainter, QPainterPath, QPen

import draw_surface

SHADOW_OPACITY = 0.45


@dataclass
class _QtSurfaceState:
    alpha: float = 1.0
    shadow: Optional[Tuple[str, float, float, float]] = None


class QPainterSurface:
    def __init__(self, painter: QPainter, width: float, height: float) -> None:
        if painter is None:
            raise ValueError("QPainterSurface requires an active QPainter")
        self._painter = painter
        self._width = float(width)
        self._height = float(height)
        self._state = _QtSurfaceState()
        self._stack: List[_QtSurfaceState] = []
        self._base_opacity = float(painter.opacity())

    def width(self) -> float:
        return self._width

    def height(self) -> float:
        return self._height

    def save(self) -> None:
        self._painter.save()
        self._stack.append(_QtSurfaceState(alpha=self._state.alpha, shadow=self._state.shadow))

    def restore(self) -> None:
        self._painter.restore()
        if self._stack:
            self._state = self._stack.pop()

    def set_alpha(self, alpha: float) -> None:
        self._state.alpha = max(0.0, min(1.0, float(alpha)))
        self._painter.setOpacity(self._base_opacity * self._state.alpha)

    def set_shadow(self, color: str, blur_pixels: float, offset_x: float = 0.0, offset_y: float = 0.0) -> None:
        self._state.shadow = (str(color), float(blur_pixels), float(offset_x), float(offset_y))

    def clear_shadow(self) -> None:
        self._state.shadow = None

    # -----------------
    # Shapes
    # -----------------

    def _shadow_rect(self, rect: QRectF) -> Optional[Tuple[QRectF, QColor]]:
        if self._state.shadow is None:
            return None
        color_text, blur_pixels, offset_x, offset_y = self._state.shadow
        if blur_pixels <= 0.0 and offset_x == 0.0 and offset_y == 0.0:
            return None
        grow = blur_pixels / 2.0
        shadow_rect = rect.adjusted(-grow, -grow, grow, grow).translated(offset_x, offset_y)
        return shadow_rect, QColor(color_text)

    def _paint_shadow_fill(self, rect: QRectF) -> None:
        shadow = self._shadow_rect(rect)
        if shadow is None:
            return
        shadow_rect, shadow_color = shadow
        self._painter.save()
        self._painter.setOpacity(self._painter.opacity() * SHADOW_OPACITY)
        self._painter.fillRect(shadow_rect, QBrush(shadow_color))
        self._painter.restore()

    def _paint_shadow_stroke(self, rect: QRectF, line_width: float) -> None:
        shadow = self._shadow_rect(rect)
        if shadow is None:
            return
        shadow_rect, shadow_color = shadow
        _color_text, blur_pixels, _offset_x, _offset_y = self._state.shadow  # type: ignore[misc]
        self._painter.save()
        self._painter.setOpacity(self._painter.opacity() * SHADOW_OPACITY)
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        self._painter.setPen(QPen(shadow_color, float(line_width) + float(blur_pixels)))
        self._painter.drawRect(shadow_rect)
        self._painter.restore()

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        rect = QRectF(float(x), float(y), float(width), float(height))
        self._paint_shadow_fill(rect)
        self._painter.fillRect(rect, QBrush(QColor(color)))

    def stroke_rect(self, x: float, y: float, width: float, height: float, color: str, line_width: float) -> None:
        rect = QRectF(float(x), float(y), float(width), float(height))
        self._paint_shadow_stroke(rect, line_width)
        self._painter.save()
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        self._painter.setPen(QPen(QColor(color), float(line_width)))
        self._painter.drawRect(rect)
        self._painter.restore()

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, line_width: float) -> None:
        self._painter.save()
        self._painter.setPen(QPen(QColor(color), float(line_width)))
        self._painter.drawLine(QPointF(float(x1), float(y1)), QPointF(float(x2), float(y2)))
        self._painter.restore()

    def text(
        self,
        x: float,
        y: float,
        text: str,
        color: str,
        *,
        size_pixels: float = 16.0,
        align: str = draw_surface.TEXT_ALIGN_LEFT,
        bold: bool = False,
        outline_color: Optional[str] = None,
    ) -> None:
        font = QFont("Arial")
        font.setPixelSize(max(1, int(round(float(size_pixels)))))
        font.setBold(bool(bold))
        metrics = QFontMetricsF(font)

        text_width = metrics.horizontalAdvance(str(text))
        left = float(x)
        if align == draw_surface.TEXT_ALIGN_CENTER:
            left -= text_width / 2.0
        elif align == draw_surface.TEXT_ALIGN_RIGHT:
            left -= text_width
        baseline = QPointF(left, float(y) + metrics.ascent())

        self._painter.save()
        self._painter.setFont(font)
        if outline_color is not None or self._state.shadow is not None:
            path = QPainterPath()
            path.addText(baseline, font, str(text))
            if self._state.shadow is not None:
                shadow_color_text, blur_pixels, offset_x, offset_y = self._state.shadow
                self._painter.save()
                self._painter.setOpacity(self._painter.opacity() * SHADOW_OPACITY)
                self._painter.strokePath(
                    path.translated(offset_x, offset_y),
                    QPen(QColor(shadow_color_text), max(1.0, blur_pixels)),
                )
                self._painter.restore()
            if outline_color is not None:
                self._painter.strokePath(path, QPen(QColor(outline_color), 2.0))
        self._painter.setPen(QPen(QColor(color)))
        self._painter.drawText(baseline, str(text))
        self._painter.restore()
