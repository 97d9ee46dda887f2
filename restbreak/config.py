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
"""The configuration of restbreak, turned into a BreakPolicy for the scheduler."""

import copy
import logging
import typing

from packaging.version import InvalidVersion, parse

from restbreak import utility
from restbreak.model import BreakPolicy, InvalidPolicy, RestBreakError, TinyMode


class Config:
    """The configuration of restbreak."""

    __user_config: dict[str, typing.Any]
    __system_config: dict[str, typing.Any]

    @classmethod
    def load(cls) -> "Config":
        # Read the config files
        user_config = utility.load_json(utility.CONFIG_FILE_PATH)
        system_config = utility.load_json(utility.SYSTEM_CONFIG_FILE_PATH)
        if system_config is None:
            raise RestBreakError(
                "default configuration is missing: " + utility.SYSTEM_CONFIG_FILE_PATH
            )

        if user_config is None:
            utility.initialize_config()
            user_config = copy.deepcopy(system_config)
            cfg = cls(user_config, system_config)
            cfg.save()
            return cfg

        system_config_version = system_config["meta"]["config_version"]
        meta_obj = user_config.get("meta", None)
        if not isinstance(meta_obj, dict):
            logging.warning("Corrupted user config, restore the defaults")
            user_config = copy.deepcopy(system_config)
        elif not cls.__same_version(
            str(meta_obj.get("config_version", "0.0.0")), system_config_version
        ):
            # Update the user config
            new_user_config = copy.deepcopy(system_config)
            cls.__merge_dictionary(user_config, new_user_config)
            user_config = new_user_config

        cfg = cls(user_config, system_config)
        cfg.save()
        return cfg

    def __init__(
        self,
        user_config: dict[str, typing.Any],
        system_config: dict[str, typing.Any],
    ):
        self.__user_config = user_config
        self.__system_config = system_config

    @staticmethod
    def __same_version(user_version: str, system_version: str) -> bool:
        try:
            return parse(user_version) == parse(system_version)
        except InvalidVersion:
            return False

    @classmethod
    def __merge_dictionary(cls, old_dict, new_dict):
        """Copy the values of old_dict into new_dict where the types agree."""
        for key in new_dict:
            if key == "meta":
                continue
            if key in old_dict:
                new_value = new_dict[key]
                old_value = old_dict[key]
                if type(new_value) is type(old_value):
                    # Both properties have same type
                    if isinstance(new_value, dict):
                        cls.__merge_dictionary(old_value, new_value)
                    else:
                        new_dict[key] = old_value

    def save(self) -> None:
        """Save the configuration to file."""
        utility.write_json(utility.CONFIG_FILE_PATH, self.__user_config)

    def get(self, key, default_value=None):
        """Get the value."""
        value = self.__user_config.get(key, default_value)
        if value is None:
            value = self.__system_config.get(key, None)
        return value

    def policy(self) -> BreakPolicy:
        """Build the validated BreakPolicy described by this configuration.

        Intervals are configured in minutes, durations in seconds.
        """
        postpone_length = self.__number("postpone_duration")
        if self.get("postpone_unit") != "seconds":
            postpone_length *= 60

        mode = self.get("tiny_break_mode", TinyMode.INTERACTIVE.value)
        try:
            tiny_mode = TinyMode(mode)
        except ValueError:
            raise InvalidPolicy(f"unknown tiny_break_mode: {mode}") from None

        policy = BreakPolicy(
            tiny_interval=self.__number("tiny_break_interval") * 60,
            tiny_duration=self.__number("tiny_break_duration"),
            big_interval=self.__number("big_break_interval") * 60,
            big_duration=self.__number("big_break_duration"),
            max_tiny_postponements=int(self.__number("max_tiny_postponements")),
            max_big_postponements=int(self.__number("max_big_postponements")),
            postpone_length=postpone_length,
            idle_reset_threshold=self.__number("idle_reset_threshold"),
            tiny_mode=tiny_mode,
            tiny_enabled=bool(self.get("tiny_breaks_enabled", True)),
            big_enabled=bool(self.get("big_breaks_enabled", True)),
            suspend_on_lock=bool(self.get("suspend_on_lock", True)),
        )
        return policy.validate()

    def __number(self, key) -> float:
        value = self.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidPolicy(f"{key} must be a number, got {value!r}")
        return value
