from unittest.mock import MagicMock

import pytest

pytest.importorskip("customtkinter")
pytest.importorskip("tkcalendar")
pytest.importorskip("matplotlib")

import ui.app_window as app_window
from ui.app_window import AppWindow
from utils.errors import AuthError


class _InlineThread:
    """Runs the worker on start() so the reload can be checked without a Tk loop."""

    def __init__(self, target, daemon=None):
        self._target = target

    def start(self):
        self._target()


def _window():
    window = MagicMock()
    window._reload_gen = 0
    return window


def test_unexpected_reload_error_reaches_the_ui_thread(monkeypatch):
    monkeypatch.setattr(app_window.threading, "Thread", _InlineThread)
    window = _window()
    window._sync.load_all.side_effect = AttributeError("boom")

    AppWindow.reload_from_server(window)

    window._sync_btn.configure.assert_called_with(state="disabled")
    callback = window.after.call_args.args[1]
    callback()
    gen, error = window._on_reload_done.call_args.args
    assert gen == 1
    assert isinstance(error, AttributeError)


def test_failed_reload_shows_banner_and_reenables_sync():
    window = _window()
    window._reload_gen = 1
    window.winfo_exists.return_value = True

    AppWindow._on_reload_done(window, 1, ValueError("bad"))

    window._sync_btn.configure.assert_called_with(state="normal")
    window.show_error.assert_called_once_with("Sync failed: bad", "Retry", window.reload_from_server)
    window.notify_tabs_refresh.assert_not_called()


def test_expired_session_asks_for_sign_in():
    window = _window()
    window._reload_gen = 1
    window.winfo_exists.return_value = True

    AppWindow._on_reload_done(window, 1, AuthError("Unauthorized", 401))

    message = window.show_error.call_args.args[0]
    assert "sign in again" in message


def test_stale_reload_result_is_ignored():
    window = _window()
    window._reload_gen = 2

    AppWindow._on_reload_done(window, 1, None)

    window._sync_btn.configure.assert_not_called()
    window.notify_tabs_refresh.assert_not_called()
