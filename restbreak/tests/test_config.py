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

import json
import os

import pytest

from restbreak import utility
from restbreak.config import Config
from restbreak.model import InvalidPolicy, RestBreakError, TinyMode


def default_config() -> dict:
    with open(os.path.join(utility.BIN_DIRECTORY, "config/restbreak.json")) as f:
        return json.load(f)


class TestConfig:
    @pytest.fixture
    def config_files(self, tmp_path, monkeypatch):
        config_directory = tmp_path / "restbreak"
        system_config_path = tmp_path / "system.json"
        system_config_path.write_text(json.dumps(default_config()))

        monkeypatch.setattr(utility, "CONFIG_DIRECTORY", str(config_directory))
        monkeypatch.setattr(
            utility, "CONFIG_FILE_PATH", str(config_directory / "restbreak.json")
        )
        monkeypatch.setattr(utility, "SYSTEM_CONFIG_FILE_PATH", str(system_config_path))
        return config_directory / "restbreak.json"

    def test_default_policy(self):
        system_config = default_config()
        config = Config({}, system_config)

        policy = config.policy()

        assert policy.tiny_interval == 1200
        assert policy.tiny_duration == 30
        assert policy.big_interval == 3600
        assert policy.big_duration == 300
        assert policy.postpone_length == 300
        assert policy.idle_reset_threshold == 300
        assert policy.max_tiny_postponements == 2
        assert policy.tiny_mode == TinyMode.INTERACTIVE
        assert policy.suspend_on_lock

    def test_user_value_wins(self):
        config = Config(
            {"tiny_break_interval": 10, "tiny_break_mode": "simple"}, default_config()
        )

        policy = config.policy()

        assert policy.tiny_interval == 600
        assert policy.tiny_mode == TinyMode.SIMPLE
        assert config.get("big_break_interval") == 60

    def test_postpone_in_seconds(self):
        config = Config(
            {"postpone_duration": 90, "postpone_unit": "seconds"}, default_config()
        )

        assert config.policy().postpone_length == 90

    def test_unknown_mode(self):
        config = Config({"tiny_break_mode": "strict"}, default_config())

        with pytest.raises(InvalidPolicy):
            config.policy()

    def test_not_a_number(self):
        config = Config({"big_break_duration": "long"}, default_config())

        with pytest.raises(InvalidPolicy):
            config.policy()

    def test_invalid_policy(self):
        config = Config(
            {"tiny_breaks_enabled": False, "big_breaks_enabled": False},
            default_config(),
        )

        with pytest.raises(InvalidPolicy):
            config.policy()

    def test_first_run(self, config_files):
        config = Config.load()

        assert config_files.exists()
        assert config.get("tiny_break_interval") == 20

    def test_load_user_config(self, config_files):
        user_config = default_config()
        user_config["tiny_break_interval"] = 15
        config_files.parent.mkdir()
        config_files.write_text(json.dumps(user_config))

        config = Config.load()

        assert config.policy().tiny_interval == 900

    def test_merge_old_user_config(self, config_files):
        config_files.parent.mkdir()
        config_files.write_text(
            json.dumps(
                {
                    "meta": {"config_version": "0.9.0"},
                    "tiny_break_interval": 15,
                    "big_break_interval": "often",
                    "removed_option": True,
                }
            )
        )

        config = Config.load()

        assert config.get("tiny_break_interval") == 15
        # type changed, so the default is used
        assert config.get("big_break_interval") == 60
        assert config.get("removed_option") is None
        assert config.get("suspend_on_lock") is True
        saved = json.loads(config_files.read_text())
        assert saved["meta"]["config_version"] == "1.0.0"

    def test_corrupted_user_config(self, config_files):
        config_files.parent.mkdir()
        config_files.write_text(json.dumps({"meta": "broken", "tiny_break_interval": 1}))

        config = Config.load()

        assert config.get("tiny_break_interval") == 20

    def test_missing_system_config(self, config_files, monkeypatch, tmp_path):
        monkeypatch.setattr(
            utility, "SYSTEM_CONFIG_FILE_PATH", str(tmp_path / "missing.json")
        )

        with pytest.raises(RestBreakError) as e:
            Config.load()

        # a broken installation, not a bad setting
        assert not isinstance(e.value, InvalidPolicy)
