# -*- coding: utf-8 -*-
########################
# overlay_widget.py
########################
# Purpose:
# - Gameplay overlay Qt widget.
# - Hosts a GameplaySession and calls its render tick once per repaint.
#
# Design notes:
# - The widget is the canvas: lane positions come from its width when the session is built.
# - Each paintEvent wraps the QPainter in a QPainterSurface and hands it to the session.
# - A 16 ms QTimer drives repaints, like the rest of the gameplay UI.
#
########################
# Interfaces:
# Public classes:
# - class GameplayOverlayWidget(PyQt6.QtWidgets.QWidget)
#   - __init__(app_config: AppConfig, *, width: int = 480, height: int = 480, clock=time.monotonic, parent=None)
#   - session() -> GameplaySession
#   - set_state_text(state_text: str) -> None
#   - on_key_input(key_input: gameplay_models.KeyInput) -> None
#
########################

from __future__ import annotations

import time
from typing import Callable, Optional

from PyQt6.QtCore import QRectF, Qt, QTimer
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PyQt6.QtWidgets import QWidget

import config as app_config_module
import gameplay_models
import gameplay_session
import qt_surface


class GameplayOverlayWidget(QWidget):
    def __init__(
        self,
        app_config: app_config_module.AppConfig,
        *,
        width: int = 480,
        height: int = 480,
        clock: Callable[[], float] = time.monotonic,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setMinimumSize(int(width), int(height))
        self.resize(int(width), int(height))
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self._state_text = ""
        self._session = gameplay_session.GameplaySession.from_config(self, app_config, clock=clock)

        self._paint_timer = QTimer(self)
        self._paint_timer.setInterval(16)
        self._paint_timer.timeout.connect(self.update)
        self._paint_timer.start()

    def session(self) -> gameplay_session.GameplaySession:
        return self._session

    def set_state_text(self, state_text: str) -> None:
        self._state_text = str(state_text or "")

    def on_key_input(self, key_input: gameplay_models.KeyInput) -> None:
        self._session.on_key_input(key_input)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QBrush(QColor(10, 10, 12)))

        surface = qt_surface.QPainterSurface(painter, float(self.width()), float(self.height()))
        self._session.render_tick(surface=surface)

        self._paint_state_text(painter)
        painter.end()

    def _paint_state_text(self, painter: QPainter) -> None:
        text = str(self._state_text or "").strip()
        if not text:
            return
        painter.save()
        painter.setPen(QPen(QColor(220, 220, 220)))
        painter.setFont(QFont("Arial", 12))
        painter.drawText(
            QRectF(0.0, float(self.height()) - 28.0, float(self.width()), 20.0),
            int(Qt.AlignmentFlag.AlignHCenter.value),
            text,
        )
        painter.restore()
