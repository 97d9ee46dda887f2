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

import logging
import typing

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib

from restbreak.model import AdapterUnavailable

from .interface import IdleSignalAdapter


class IdleMonitorGnomeDBus(IdleSignalAdapter):
    """IdleSignalAdapter implementation for GNOME, using the Mutter idle monitor."""

    dbus_proxy: typing.Optional[Gio.DBusProxy] = None
    active_watch_id: typing.Optional[int] = None

    _on_timeout: typing.Optional[typing.Callable[[int], None]] = None
    _on_resumed: typing.Optional[typing.Callable[[], None]] = None

    def __init__(self) -> None:
        self.idle_watch_ids: set[int] = set()

    def init(
        self,
        on_timeout: typing.Callable[[int], None],
        on_resumed: typing.Callable[[], None],
    ) -> None:
        self._on_timeout = on_timeout
        self._on_resumed = on_resumed

        if self.dbus_proxy is not None:
            return

        try:
            dbus_proxy = Gio.DBusProxy.new_for_bus_sync(
                bus_type=Gio.BusType.SESSION,
                flags=Gio.DBusProxyFlags.NONE,
                info=None,
                name="org.gnome.Mutter.IdleMonitor",
                object_path="/org/gnome/Mutter/IdleMonitor/Core",
                interface_name="org.gnome.Mutter.IdleMonitor",
                cancellable=None,
            )
        except GLib.Error as e:
            raise AdapterUnavailable(str(e)) from e

        if dbus_proxy.get_name_owner() is None:
            raise AdapterUnavailable("org.gnome.Mutter.IdleMonitor is not running")

        dbus_proxy.connect("g-signal", self._handle_proxy_signal)
        self.dbus_proxy = dbus_proxy

    def arm_idle_watch(self, msec: int) -> int:
        if self.dbus_proxy is None:
            raise AdapterUnavailable("the idle monitor is not initialized")

        # NOTE: the watch does not restart counting when it is added
        # if the user is already idle for longer than msec, it fires right away
        try:
            watch_id = self.dbus_proxy.AddIdleWatch("(t)", msec)  # type: ignore[attr-defined]
        except GLib.Error as e:
            raise AdapterUnavailable(str(e)) from e

        self.idle_watch_ids.add(watch_id)
        return watch_id

    def cancel_all_watches(self) -> None:
        if self.dbus_proxy is not None:
            for watch_id in self.idle_watch_ids:
                self._remove_watch(watch_id)
            if self.active_watch_id is not None:
                self._remove_watch(self.active_watch_id)

        self.idle_watch_ids.clear()
        self.active_watch_id = None

    def watch_for_resume(self) -> None:
        if self.dbus_proxy is None or self.active_watch_id is not None:
            return
        try:
            self.active_watch_id = self.dbus_proxy.AddUserActiveWatch("()")  # type: ignore[attr-defined]
        except GLib.Error as e:
            raise AdapterUnavailable(str(e)) from e

    def _remove_watch(self, watch_id: int) -> None:
        try:
            self.dbus_proxy.RemoveWatch("(u)", watch_id)  # type: ignore[union-attr]
        except GLib.Error as e:
            # The watch may be gone with its connection already
            logging.debug("Unable to remove idle watch %d: %s", watch_id, e.message)

    def _handle_proxy_signal(
        self,
        dbus_proxy: Gio.DBusProxy,
        sender_name: typing.Optional[str],
        signal_name: str,
        parameters: GLib.Variant,
    ) -> None:
        if signal_name != "WatchFired":
            return

        watch_id: int
        (watch_id,) = parameters  # type: ignore[misc]

        if watch_id in self.idle_watch_ids:
            self.idle_watch_ids.discard(watch_id)
            # Idle watches stay registered in mutter until removed
            self._remove_watch(watch_id)
            if self._on_timeout:
                self._on_timeout(watch_id)

        elif self.active_watch_id is not None and watch_id == self.active_watch_id:
            self.active_watch_id = None
            if self._on_resumed:
                self._on_resumed()

    def stop(self) -> None:
        self.cancel_all_watches()
        self.dbus_proxy = None
        self._on_timeout = None
        self._on_resumed = None
