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

from restbreak.idle import x11
from restbreak.model import AdapterUnavailable


class TestIdleMonitorX11:
    @pytest.fixture
    def callbacks(self):
        return mock.Mock(), mock.Mock()

    @pytest.fixture
    def adapter(self, callbacks):
        adapter = x11.IdleMonitorX11()
        # not started, the poll thread is not needed to deliver events
        adapter._on_timeout, adapter._on_resumed = callbacks
        return adapter

    def test_xprintidle_missing(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(x11.utility, "command_exist", lambda command: False)
        adapter = x11.IdleMonitorX11()

        with pytest.raises(AdapterUnavailable):
            adapter.init(mock.Mock(), mock.Mock())

    def test_read_idle_time(self, adapter, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(
            x11.subprocess, "check_output", mock.Mock(return_value=b"1234\n")
        )

        assert adapter._read_idle_time() == 1234

    def test_read_idle_time_fails(self, adapter, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(
            x11.subprocess, "check_output", mock.Mock(side_effect=OSError("no display"))
        )

        with pytest.raises(AdapterUnavailable):
            adapter._read_idle_time()

    def test_deliver(self, adapter, callbacks):
        on_timeout, on_resumed = callbacks
        watch_id = adapter.arm_idle_watch(2000)

        adapter._deliver_timeout(0, watch_id)
        adapter._deliver_resumed(0)

        on_timeout.assert_called_once_with(watch_id)
        on_resumed.assert_called_once_with()

    def test_cancelled_delivery_is_dropped(self, adapter, callbacks):
        on_timeout, on_resumed = callbacks
        watch_id = adapter.arm_idle_watch(2000)

        adapter.cancel_all_watches()
        adapter._deliver_timeout(0, watch_id)
        adapter._deliver_resumed(0)

        on_timeout.assert_not_called()
        on_resumed.assert_not_called()

    def test_failure(self, adapter):
        adapter.failure = "xprintidle failed"

        with pytest.raises(AdapterUnavailable):
            adapter.arm_idle_watch(2000)
