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
"""Idle time sources for the break scheduler."""

import logging

from restbreak import utility

from .interface import IdleSignalAdapter
from .fake import FakeIdleAdapter

__all__ = ["IdleSignalAdapter", "FakeIdleAdapter", "create_adapter"]


def create_adapter() -> IdleSignalAdapter:
    """Pick the idle time source matching the running desktop."""
    desktop = utility.desktop_environment()
    if desktop == "gnome" or utility.is_wayland():
        from .gnome_dbus import IdleMonitorGnomeDBus

        logging.info("Use the Mutter idle monitor for %s", desktop)
        return IdleMonitorGnomeDBus()

    from .x11 import IdleMonitorX11

    logging.info("Use xprintidle for %s", desktop)
    return IdleMonitorX11()
