"""Tests for Qt key event translation and auto repeat filtering."""

import pytest

pytest.importorskip("PyQt6.QtGui")

from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtGui import QKeyEvent

from input_router import InputRouter, qt_key_to_code


def _key_event(event_type, key, *, auto_repeat=False):
    return QKeyEvent(event_type, int(key.value), Qt.KeyboardModifier.NoModifier, "", auto_repeat)


@pytest.fixture
def router_and_inputs():
    received = []
    router = InputRouter(lambda: 2.5, gameplay_keys=frozenset({"ArrowLeft", "KeyZ"}))

    def on_key_input(key_input):
        received.append(key_input)

    router.keyInput.connect(on_key_input)
    return router, received


def test_qt_key_to_code():
    assert qt_key_to_code(int(Qt.Key.Key_Left.value)) == "ArrowLeft"
    assert qt_key_to_code(int(Qt.Key.Key_Right.value)) == "ArrowRight"
    assert qt_key_to_code(int(Qt.Key.Key_Space.value)) == "Space"
    assert qt_key_to_code(int(Qt.Key.Key_Z.value)) == "KeyZ"
    assert qt_key_to_code(int(Qt.Key.Key_Escape.value)) is None


def test_press_and_release_emit_timestamped_inputs(router_and_inputs):
    router, received = router_and_inputs
    assert router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Left))
    assert router.handle_key_release(_key_event(QEvent.Type.KeyRelease, Qt.Key.Key_Left))
    assert [(item.key, item.pressed, item.time_seconds) for item in received] == [
        ("ArrowLeft", True, 2.5),
        ("ArrowLeft", False, 2.5),
    ]


def test_auto_repeat_is_consumed_without_emitting(router_and_inputs):
    router, received = router_and_inputs
    router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Z))
    assert router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Z, auto_repeat=True))
    assert router.handle_key_release(_key_event(QEvent.Type.KeyRelease, Qt.Key.Key_Z, auto_repeat=True))
    assert router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Z))
    assert [(item.key, item.pressed) for item in received] == [("KeyZ", True)]


def test_keys_outside_the_gameplay_set_pass_through(router_and_inputs):
    router, received = router_and_inputs
    assert not router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Right))
    assert not router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Escape))
    assert received == []


def test_clear_pressed_keys_releases_everything(router_and_inputs):
    router, received = router_and_inputs
    router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Left))
    router.handle_key_press(_key_event(QEvent.Type.KeyPress, Qt.Key.Key_Z))
    received.clear()
    router.clear_pressed_keys()
    assert sorted((item.key, item.pressed) for item in received) == [("ArrowLeft", False), ("KeyZ", False)]
    assert router.gameplay_keys == frozenset({"ArrowLeft", "KeyZ"})
