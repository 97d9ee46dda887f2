# restbreak reminds you to take tiny and big breaks while working at the
# computer.

# Copyright (C) 2026  restbreak contributors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from unittest import mock

import pytest

from restbreak import session


class TestLockScreenCommand:
    @pytest.fixture(autouse=True)
    def commands(self, monkeypatch: pytest.MonkeyPatch):
        available = set()
        monkeypatch.setattr(
            session.utility, "command_exist", lambda command: command in available
        )
        monkeypatch.delenv("XDG_SESSION_ID", raising=False)
        return available

    def set_desktop(self, monkeypatch: pytest.MonkeyPatch, desktop: str) -> None:
        monkeypatch.setattr(session.utility, "desktop_environment", lambda: desktop)

    def test_xfce(self, monkeypatch: pytest.MonkeyPatch, commands):
        self.set_desktop(monkeypatch, "xfce")
        commands.add("xflock4")

        assert session.lock_screen_command() == ["xflock4"]

    def test_gnome_without_command(self, monkeypatch: pytest.MonkeyPatch):
        self.set_desktop(monkeypatch, "gnome")

        assert callable(session.lock_screen_command())

    def test_loginctl_fallback(self, monkeypatch: pytest.MonkeyPatch, commands):
        self.set_desktop(monkeypatch, "sway")
        commands.add("loginctl")
        monkeypatch.setenv("XDG_SESSION_ID", "2")

        assert session.lock_screen_command() == ["loginctl", "lock-session"]

    def test_nothing_found(self, monkeypatch: pytest.MonkeyPatch):
        self.set_desktop(monkeypatch, "unknown")

        assert session.lock_screen_command() is None


class TestSessionMonitor:
    def test_request_lock_with_command(self, monkeypatch: pytest.MonkeyPatch):
        execute_command = mock.Mock()
        monkeypatch.setattr(session.utility, "execute_command", execute_command)

        session.SessionMonitor("i3lock -c 000000").request_lock()

        execute_command.assert_called_once_with(["i3lock", "-c", "000000"])

    def test_request_lock_without_command(self, monkeypatch: pytest.MonkeyPatch):
        execute_command = mock.Mock()
        monkeypatch.setattr(session.utility, "execute_command", execute_command)
        monkeypatch.setattr(session, "lock_screen_command", lambda: None)

        session.SessionMonitor().request_lock()

        execute_command.assert_not_called()

    def test_screensaver_signal(self):
        on_locked = mock.Mock()
        on_unlocked = mock.Mock()
        monitor = session.SessionMonitor("xflock4")
        monitor._on_locked = on_locked
        monitor._on_unlocked = on_unlocked

        monitor._handle_proxy_signal(mock.Mock(), None, "ActiveChanged", (True,))
        on_locked.assert_called_once_with()
        on_unlocked.assert_not_called()

        monitor._handle_proxy_signal(mock.Mock(), None, "ActiveChanged", (False,))
        on_unlocked.assert_called_once_with()

        monitor._handle_proxy_signal(mock.Mock(), None, "WakeUpScreen", ())
        assert on_locked.call_count == 1
