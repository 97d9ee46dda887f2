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

from restbreak import overlay
from restbreak.model import BreakType


class TestNotificationOverlay:
    @pytest.fixture
    def application(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(overlay.utility, "format_time", lambda time: "13:20")
        return mock.Mock()

    def test_activate(self, application):
        break_overlay = overlay.NotificationOverlay(application)

        break_overlay.activate(
            BreakType.TINY, 30, can_skip=True, can_postpone=False, can_lock=True
        )

        assert break_overlay.active
        application.send_notification.assert_called_once()
        assert application.send_notification.call_args.args[0] == "break"

    def test_deactivate(self, application):
        break_overlay = overlay.NotificationOverlay(application)

        break_overlay.deactivate()
        application.withdraw_notification.assert_not_called()

        break_overlay.activate(
            BreakType.BIG, 300, can_skip=True, can_postpone=True, can_lock=True
        )
        break_overlay.deactivate()
        break_overlay.deactivate()

        application.withdraw_notification.assert_called_once_with("break")
        assert not break_overlay.active
