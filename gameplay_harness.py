# -*- coding: utf-8 -*-
########################
# gameplay_harness.py
########################
# Purpose:
# - Gameplay harness window for local testing and iteration.
# - Integrates InputRouter + GameplaySession (TimingModel, JudgeEngine, OverlayRenderer) + GameplayOverlayWidget.
#
# Design notes:
# - GameplaySession owns the clock. InputRouter timestamps key events with the same clock.
# - Provides a reusable controller (GameplayHarnessController) so the entry point and the window share
#   the same event filter and the same load/start/stop handlers.
# - The pure pipeline can be self tested without Qt: python gameplay_harness.py --run-tests
#
########################
# Interfaces:
# Public dataclasses:
# - HarnessState(chart_path: str, chart_source_kind: str, playback_rate: float, last_error: str)
#
# Public classes:
# - class GameplayHarnessController(PyQt6.QtCore.QObject)
# - class GameplayHarnessWindow(PyQt6.QtWidgets.QMainWindow)
#
# Public functions:
# - run_self_tests() -> None
# - run_gui(app_config, *, chart_path: Optional[Path], playback_rate: Optional[float]) -> int
# - main() -> int
#
# Inputs:
# - Chart JSON path (or the demo chart), playback rate.
# - Keyboard lane input (InputRouter handles QKeyEvent).
#
# Outputs:
# - Visible gameplay overlay and score and judgement rendering.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import argparse
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class HarnessState:
    chart_path: str = ""
    chart_source_kind: str = "none"
    playback_rate: float = 1.0
    last_error: str = ""


class GameplayHarnessController:  # QObject subclass, defined lazily inside Qt import block
    pass


def _create_controller_class():
    from PyQt6.QtCore import QEvent, QObject
    from PyQt6.QtGui import QKeyEvent

    import chart_loader
    import demo_chart
    import input_router
    import judge
    import overlay_widget

    class _GameplayHarnessController(QObject):
        """Keyboard routing and chart lifecycle around one GameplayOverlayWidget."""

        def __init__(self, *, overlay: overlay_widget.GameplayOverlayWidget, parent: Optional[QObject] = None) -> None:
            super().__init__(parent)
            self._state = HarnessState()
            self._overlay = overlay
            session = overlay.session()
            self._state.playback_rate = session.timing.playback_rate()

            self._router = input_router.InputRouter(
                session.timing.now,
                parent=self,
                gameplay_keys=frozenset(session.playfield.key_binding.key_to_lane.keys()),
            )
            self._router.keyInput.connect(self._overlay.on_key_input)

        @property
        def state(self) -> HarnessState:
            return self._state

        # -----------------
        # Event filter (shared)
        # -----------------

        def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
            if event.type() == QEvent.Type.KeyPress and isinstance(event, QKeyEvent):
                if self._router.handle_key_press(event):
                    return True
            if event.type() == QEvent.Type.KeyRelease and isinstance(event, QKeyEvent):
                if self._router.handle_key_release(event):
                    return True
            if event.type() in (QEvent.Type.WindowDeactivate, QEvent.Type.FocusOut):
                self._router.clear_pressed_keys()
            return super().eventFilter(watched, event)

        # -----------------
        # Core operations
        # -----------------

        def _set_status(self, text: str) -> None:
            self._overlay.set_state_text(text)

        def load_chart(self, chart_path: Optional[Path]) -> bool:
            session = self._overlay.session()
            if chart_path is None or not chart_path.exists():
                chart = demo_chart.build_demo_chart(difficulty="easy")
                session.load_chart(chart_loader.dump_chart(chart))
                self._state.chart_path = ""
                self._state.chart_source_kind = "demo"
                self._set_status("Demo chart loaded")
                return True

            try:
                session.load_chart_file(chart_path)
            except chart_loader.ParseError as exception:
                self._state.last_error = str(exception)
                self._set_status("Chart load failed")
                return False

            self._state.chart_path = str(chart_path)
            self._state.chart_source_kind = "file"
            self._set_status(f"Loaded {chart_path.name}")
            return True

        def set_playback_rate(self, playback_rate: float) -> None:
            try:
                self._overlay.session().set_playback_rate(playback_rate)
            except ValueError as exception:
                self._state.last_error = str(exception)
                self._set_status(str(exception))
                return
            self._state.playback_rate = float(playback_rate)

        def start(self) -> None:
            try:
                self._overlay.session().start()
            except judge.NotReady:
                self._set_status("Load a chart first")
                return
            self._set_status(f"Playing ({self._state.playback_rate}x)")

        def stop(self) -> None:
            session = self._overlay.session()
            session.stop()
            self._router.clear_pressed_keys()
            self._set_status(f"Stopped: score {int(round(session.score()))}")

    return _GameplayHarnessController


class GameplayHarnessWindow:
    pass


def _create_window_class():
    from PyQt6.QtWidgets import (
        QDoubleSpinBox,
        QHBoxLayout,
        QLineEdit,
        QMainWindow,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )

    import config as app_config_module
    import overlay_widget

    class _GameplayHarnessWindow(QMainWindow):
        def __init__(self, app_config: app_config_module.AppConfig, *, chart_path: Optional[Path] = None) -> None:
            super().__init__()
            self.setWindowTitle("Lanebeat Gameplay Harness")

            self._overlay = overlay_widget.GameplayOverlayWidget(app_config, parent=self)
            self._controller = GameplayHarnessController(overlay=self._overlay, parent=self)

            root_widget = QWidget(self)
            root_layout = QVBoxLayout(root_widget)
            controls = QWidget(root_widget)
            controls_layout = QHBoxLayout(controls)

            self._chart_edit = QLineEdit(str(chart_path) if chart_path is not None else "", controls)
            self._rate_spin = QDoubleSpinBox(controls)
            self._rate_spin.setRange(0.25, 4.0)
            self._rate_spin.setSingleStep(0.25)
            self._rate_spin.setValue(float(self._controller.state.playback_rate))
            load_button = QPushButton("Load", controls)
            start_button = QPushButton("Start", controls)
            stop_button = QPushButton("Stop", controls)

            controls_layout.addWidget(self._chart_edit)
            controls_layout.addWidget(self._rate_spin)
            controls_layout.addWidget(load_button)
            controls_layout.addWidget(start_button)
            controls_layout.addWidget(stop_button)

            root_layout.addWidget(controls)
            root_layout.addWidget(self._overlay, stretch=1)
            self.setCentralWidget(root_widget)

            load_button.clicked.connect(self._on_load_clicked)
            start_button.clicked.connect(self._on_start_clicked)
            stop_button.clicked.connect(self._controller.stop)

            # Install the shared event filter.
            self.installEventFilter(self._controller)
            self._overlay.installEventFilter(self._controller)

            self._controller.load_chart(chart_path)

        @property
        def controller(self) -> GameplayHarnessController:
            return self._controller

        def _on_load_clicked(self) -> None:
            text = self._chart_edit.text().strip()
            self._controller.load_chart(Path(text) if text else None)

        def _on_start_clicked(self) -> None:
            self._controller.set_playback_rate(float(self._rate_spin.value()))
            self._controller.start()
            self._overlay.setFocus()

    return _GameplayHarnessWindow


def _install_qt_classes() -> None:
    global GameplayHarnessController, GameplayHarnessWindow
    GameplayHarnessController = _create_controller_class()  # type: ignore[misc]
    GameplayHarnessWindow = _create_window_class()  # type: ignore[misc]


def run_self_tests() -> None:
    import chart_loader
    import demo_chart
    import draw_surface
    import gameplay_session
    import judge
    import note_scheduler
    import timing_model

    chart_loader._run_unit_tests()
    timing_model._run_unit_tests()
    note_scheduler._run_unit_tests()
    judge._run_unit_tests()

    # Full pipeline on a headless surface with a hand driven clock.
    chart = demo_chart.build_demo_chart(difficulty="easy")
    surface = draw_surface.RecordingSurface(480.0, 480.0)
    session = gameplay_session.GameplaySession(surface, clock=lambda: 0.0)
    session.load_chart(chart_loader.dump_chart(chart))
    session.start(now=0.0)

    first_note = chart.notes_for("ArrowLeft")[0]
    hit = session.on_key_down("ArrowLeft", first_note.press_time_seconds)
    assert hit is not None
    assert hit.judgement == "perfect"
    session.on_key_up("ArrowLeft")

    frame = session.render_tick(now=first_note.press_time_seconds + 0.1)
    assert frame is not None
    assert "PERFECT" in surface.texts()
    assert any(text.startswith("Score: ") for text in surface.texts())

    session.stop()
    assert session.render_tick(now=5.0) is None


def run_gui(app_config, *, chart_path: Optional[Path], playback_rate: Optional[float]) -> int:
    from PyQt6.QtWidgets import QApplication
    import sys

    _install_qt_classes()

    app = QApplication(sys.argv)
    window = GameplayHarnessWindow(app_config, chart_path=chart_path)  # type: ignore[call-arg]
    if playback_rate is not None:
        window.controller.set_playback_rate(float(playback_rate))
    window.resize(640, 620)
    window.show()
    return int(app.exec())


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--run-tests",
        action="store_true",
        help="Run pure logic tests (no Qt).",
    )
    return parser


def main() -> int:
    args = build_argument_parser().parse_args()
    if args.run_tests:
        run_self_tests()
        print("Self tests passed.")
        return 0

    import config as app_config_module
    import paths

    app_config, _config_path = app_config_module.get_config()
    return run_gui(app_config, chart_path=paths.resolve_chart_path(app_config.chart.path), playback_rate=None)


if __name__ == "__main__":
    raise SystemExit(main())
