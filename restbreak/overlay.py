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
"""The break overlay shows the running break and offers the break controls."""

import datetime
import logging
from abc import ABC, abstractmethod

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib

from restbreak import utility
from restbreak.model import BreakType
from restbreak.translations import translate as _


class BreakOverlay(ABC):
    """Something the user sees while a break is running.

    The controls report back through the skip, postpone and lock commands of
    the scheduler.
    """

    @abstractmethod
    def activate(
        self,
        break_type: BreakType,
        remaining_seconds: int,
        can_skip: bool,
        can_postpone: bool,
        can_lock: bool,
    ) -> None:
        """Show the break, with only the allowed controls."""
        pass

    @abstractmethod
    def deactivate(self) -> None:
        """Hide the break. Hiding a hidden overlay does nothing."""
        pass


class NotificationOverlay(BreakOverlay):
    """Shows breaks as an urgent desktop notification with action buttons.

    The buttons activate the app.skip, app.postpone and app.lock actions of
    the application, targeted at the break type they were shown for.
    """

    NOTIFICATION_ID = "break"

    def __init__(self, application: Gio.Application) -> None:
        self.__application = application
        self.active = False

    def activate(
        self,
        break_type: BreakType,
        remaining_seconds: int,
        can_skip: bool,
        can_postpone: bool,
        can_lock: bool,
    ) -> None:
        logging.info("Show the %s break notification", break_type.value)
        if break_type == BreakType.TINY:
            title = _("Time for a tiny break")
        else:
            title = _("Time for a big break")

        end = datetime.datetime.now() + datetime.timedelta(seconds=remaining_seconds)
        notification = Gio.Notification.new(title)
        notification.set_body(
            _("Look away from the screen and relax until %s")
            % utility.format_time(end)
        )
        notification.set_priority(Gio.NotificationPriority.URGENT)

        target = GLib.Variant("s", break_type.value)
        if can_skip:
            notification.add_button_with_target(_("Skip"), "app.skip", target)
        if can_postpone:
            notification.add_button_with_target(
                _("Postpone"), "app.postpone", target
            )
        if can_lock:
            notification.add_button_with_target(
                _("Lock screen"), "app.lock", target
            )

        self.__application.send_notification(self.NOTIFICATION_ID, notification)
        self.active = True

    def deactivate(self) -> None:
        if not self.active:
            return
        logging.info("Close the break notification")
        self.__application.withdraw_notification(self.NOTIFICATION_ID)
        self.active = False
