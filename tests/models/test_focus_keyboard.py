"""Unit tests for keyboard controls.

Terminal calls are mocked so tests run without a real TTY.
"""

from __future__ import annotations

import sys
from unittest.mock import MagicMock

import pytest

from deepflow.models.focus.keyboard import KEY_BINDINGS, handle_key
from deepflow.models.focus.session import TimerState


def _make_keyboard_handler(mocker, old_settings=None):
    """Create a KeyboardHandler with all terminal calls patched."""
    mocker.patch("sys.stdin.fileno", return_value=0)
    mocker.patch("termios.tcgetattr", return_value=old_settings or ["saved"])
    mocker.patch("tty.setcbreak")
    from deepflow.models.focus.keyboard import KeyboardHandler

    return KeyboardHandler()


class TestHandleKey:
    @pytest.mark.parametrize("key", [" ", "p", "P"])
    def test_toggle_starts_when_idle(self, engine, key):
        assert handle_key(engine, key) == "toggle"
        assert engine.get_status().state is TimerState.RUNNING

    def test_toggle_pauses_when_running(self, engine):
        engine.start()

        handle_key(engine, "p")

        assert engine.get_status().state is TimerState.PAUSED

    def test_skip(self, engine, store):
        assert handle_key(engine, "s") == "skip"
        assert len(store.all()) == 1

    def test_reset(self, engine):
        engine.start()

        assert handle_key(engine, "r") == "reset"
        assert engine.get_status().state is TimerState.IDLE

    def test_quit_leaves_engine_alone(self):
        engine = MagicMock()

        assert handle_key(engine, "q") == "quit"
        engine.start.assert_not_called()
        engine.pause.assert_not_called()

    @pytest.mark.parametrize("key", [None, "x", "\n"])
    def test_unbound_keys(self, key):
        engine = MagicMock()

        assert handle_key(engine, key) is None
        assert engine.method_calls == []

    def test_bindings_cover_every_action(self):
        assert set(KEY_BINDINGS.values()) == {"toggle", "skip", "reset", "quit"}


class TestKeyboardHandler:
    def test_setup_saves_settings_and_sets_cbreak(self, mocker):
        handler = _make_keyboard_handler(mocker, old_settings=["saved-attrs"])

        assert handler.fd == 0
        assert handler.old_settings == ["saved-attrs"]

    def test_setup_without_tty(self, mocker):
        mocker.patch("sys.stdin.fileno", return_value=0)
        mocker.patch("termios.tcgetattr", side_effect=Exception("no tty"))
        from deepflow.models.focus.keyboard import KeyboardHandler

        handler = KeyboardHandler()

        assert handler.old_settings is None

    def test_get_key_returns_pending_char(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch(
            "deepflow.models.focus.keyboard.select.select",
            return_value=([sys.stdin], [], []),
        )
        mocker.patch("sys.stdin.read", return_value="s")

        assert handler.get_key() == "s"

    def test_get_key_nothing_pending(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch("deepflow.models.focus.keyboard.select.select", return_value=([], [], []))

        assert handler.get_key() is None

    def test_get_key_select_error(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch(
            "deepflow.models.focus.keyboard.select.select", side_effect=ValueError("closed")
        )

        assert handler.get_key() is None

    def test_context_manager_restores_terminal(self, mocker):
        mock_setattr = mocker.patch("termios.tcsetattr")

        with _make_keyboard_handler(mocker, old_settings=["saved-attrs"]) as handler:
            pass

        mock_setattr.assert_called_once()
        assert mock_setattr.call_args[0][2] == ["saved-attrs"]
        assert handler.old_settings is None

    def test_stop_is_idempotent(self, mocker):
        mock_setattr = mocker.patch("termios.tcsetattr")
        handler = _make_keyboard_handler(mocker)

        handler.stop()
        handler.stop()

        mock_setattr.assert_called_once()
