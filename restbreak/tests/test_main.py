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

from restbreak import __main__ as main_module
from restbreak.model import RestBreakError


class TestMain:
    def test_missing_default_config(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(main_module.signal, "signal", mock.Mock())
        monkeypatch.setattr(main_module.translations, "setup", mock.Mock())
        monkeypatch.setattr(
            main_module.Config,
            "load",
            mock.Mock(side_effect=RestBreakError("default configuration is missing")),
        )
        rest_break = mock.Mock()
        monkeypatch.setattr(main_module, "RestBreak", rest_break)

        with pytest.raises(SystemExit) as e:
            main_module.main()

        assert e.value.code == 1
        rest_break.assert_not_called()
