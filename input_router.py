# -*- coding: utf-8 -*-
########################
# input_router.py
########################
# Purpose:
# - Single keyboard listener for gameplay lane input.
# - Translates QKeyEvent into gameplay_models.KeyInput (key name, pressed, wall clock time) and emits a Qt signal.
#
# Design notes:
# - This must be the only lane input source. No duplicate key mapping elsewhere.
# - Key names follow the browser KeyboardEvent.code convention ("ArrowLeft", "KeyZ", "Space"),
#   so chart files recorded in a browser keep working.
# - Debounce rules:
#   - Ignore auto repeat.
#   - Track pressed keys to avoid duplicate presses.
# - Time source is injected as a callable returning wall clock seconds (the session clock).
#
########################
# Interfaces:
# Public functions:
# - qt_key_to_code(key_constant: int) -> Optional[str]
#
# Public classes:
# - class InputRouter(PyQt6.QtCore.QObject)
#   - Signals:
#     - keyInput(gameplay_models.KeyInput)
#   - Methods:
#     - handle_key_press(event: QKeyEvent) -> bool
#     - handle_key_release(event: QKeyEvent) -> bool
#     - clear_pressed_keys() -> None
#
# Inputs:
# - Raw QKeyEvent from the Qt event loop.
#
# Outputs:
# - KeyInput events consumed by GameplaySession.on_key_input.
#
########################

from __future__ import annotations

from typing import Callable, Dict, FrozenSet, Optional, Set

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QKeyEvent

import gameplay_models


def _build_key_code_map() -> Dict[int, str]:
    """
    Qt key constants to KeyboardEvent.code style names.

    Covers the arrow keys, Space, and the letters A-Z as "KeyA".."KeyZ".
    """
    key_codes: Dict[int, str] = {
        int(Qt.Key.Key_Left.value): "ArrowLeft",
        int(Qt.Key.Key_Right.value): "ArrowRight",
        int(Qt.Key.Key_Up.value): "ArrowUp",
        int(Qt.Key.Key_Down.value): "ArrowDown",
        int(Qt.Key.Key_Space.value): "Space",
    }
    for offset in range(26):
        letter = chr(ord("A") + offset)
        key_constant = getattr(Qt.Key, f"Key_{letter}")
        key_codes[int(key_constant.value)] = f"Key{letter}"
    return key_codes


_KEY_CODES = _build_key_code_map()


def qt_key_to_code(key_constant: int) -> Optional[str]:
    return _KEY_CODES.get(int(key_constant))


class InputRouter(QObject):
    """
    Central keyboard router for gameplay lane input.

    This object never judges timing. Its only job is to:
      - name keys the same way chart files do
      - attach the current wall clock time from the injected time provider
      - emit a gameplay_models.KeyInput for each valid press and release
    """

    keyInput = pyqtSignal(object)

    def __init__(
        self,
        time_provider: Callable[[], float],
        parent: Optional[QObject] = None,
        gameplay_keys: Optional[FrozenSet[str]] = None,
    ) -> None:
        """
        time_provider:
            Callable that returns wall clock seconds on the session clock.
        parent:
            Optional QObject parent.
        gameplay_keys:
            Key names this router consumes. Others pass through to Qt.
        """
        super().__init__(parent)

        self._time_provider: Callable[[], float] = time_provider
        self._gameplay_keys: FrozenSet[str] = frozenset(gameplay_keys or ())

        # Press tracking for debounce and focus loss handling.
        self._pressed_keys: Set[str] = set()

    # ------------------------------------------------------------------
    # Public API used by gameplay_harness
    # ------------------------------------------------------------------

    def handle_key_press(self, event: QKeyEvent) -> bool:
        """
        Handle a Qt key press.

        Returns True if this router consumed the event, False otherwise.
        """
        key_code = qt_key_to_code(int(event.key()))
        if key_code is None or key_code not in self._gameplay_keys:
            return False

        # Ignore auto repeat so holding a key does not spam input events.
        if event.isAutoRepeat() or key_code in self._pressed_keys:
            return True

        self._pressed_keys.add(key_code)
        self._emit(key_code, pressed=True)
        return True

    def handle_key_release(self, event: QKeyEvent) -> bool:
        """
        Handle a Qt key release.

        Returns True if this router consumed the event, False otherwise.
        """
        key_code = qt_key_to_code(int(event.key()))
        if key_code is None or key_code not in self._gameplay_keys:
            return False

        if event.isAutoRepeat():
            return True

        if key_code in self._pressed_keys:
            self._pressed_keys.discard(key_code)
            self._emit(key_code, pressed=False)
        return True

    def clear_pressed_keys(self) -> None:
        """
        Release every pressed key.

        Called by the harness on focus loss or window deactivation, so holds do not stay stuck.
        """
        for key_code in sorted(self._pressed_keys):
            self._emit(key_code, pressed=False)
        self._pressed_keys.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, key_code: str, *, pressed: bool) -> None:
        key_input = gameplay_models.KeyInput(
            key=key_code,
            pressed=bool(pressed),
            time_seconds=float(self._time_provider()),
        )
        self.keyInput.emit(key_input)

    @property
    def gameplay_keys(self) -> FrozenSet[str]:
        return self._gameplay_keys
