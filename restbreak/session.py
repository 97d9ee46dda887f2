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
"""The session layer: screen lock signals in, lock requests out."""

import logging
import os
import typing

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib

from restbreak import utility


def lock_screen_command() -> typing.Union[list[str], typing.Callable[[], None], None]:
    """Function tries to detect the screensaver command based on the current
    environment.

    Returns either a command to execute or function to call.

    Possible results:
        Modern GNOME:             DBus: org.gnome.ScreenSaver.Lock
        Old Gnome, Unity, Budgie: ['gnome-screensaver-command', '--lock']
        Cinnamon:                 ['cinnamon-screensaver-command', '--lock']
        Pantheon, LXDE:           ['light-locker-command', '--lock']
        Mate:                     ['mate-screensaver-command', '--lock']
        KDE:                      DBus: org.freedesktop.ScreenSaver.Lock
        XFCE:                     ['xflock4']
        Otherwise:                ['loginctl', 'lock-session']
    """
    desktop = utility.desktop_environment()
    if desktop == "xfce" or desktop == "xfce4":
        if utility.command_exist("xflock4"):
            return ["xflock4"]
    elif desktop == "cinnamon":
        if utility.command_exist("cinnamon-screensaver-command"):
            # This calls org.cinnamon.ScreenSaver.Lock internally
            return ["cinnamon-screensaver-command", "--lock"]
    elif desktop in ("pantheon", "lxde"):
        if utility.command_exist("light-locker-command"):
            return ["light-locker-command", "--lock"]
    elif desktop == "mate":
        if utility.command_exist("mate-screensaver-command"):
            return ["mate-screensaver-command", "--lock"]
    elif desktop == "kde":
        # Note that this is unfortunately a non-standard KDE extension.
        return lambda: lock_screen_dbus(
            destination="org.freedesktop.ScreenSaver",
            path="/ScreenSaver",
            method="Lock",
        )
    elif desktop in ("gnome", "unity", "budgie-desktop"):
        if utility.command_exist("gnome-screensaver-command"):
            return ["gnome-screensaver-command", "--lock"]
        # From Gnome 3.8 no gnome-screensaver-command
        return lambda: lock_screen_dbus(
            destination="org.gnome.ScreenSaver",
            path="/org/gnome/ScreenSaver",
            method="Lock",
        )

    if utility.command_exist("loginctl") and os.environ.get("XDG_SESSION_ID"):
        return ["loginctl", "lock-session"]
    return None


def lock_screen_dbus(destination: str, path: str, method: str) -> None:
    """This assumes that the interface is the same as the destination."""
    try:
        dbus_proxy = Gio.DBusProxy.new_for_bus_sync(
            bus_type=Gio.BusType.SESSION,
            flags=Gio.DBusProxyFlags.DO_NOT_LOAD_PROPERTIES,
            info=None,
            name=destination,
            object_path=path,
            interface_name=destination,
        )
        dbus_proxy.call_sync(method, None, Gio.DBusCallFlags.NONE, -1)
    except GLib.Error as e:
        logging.error("Unable to lock the screen using %s: %s", destination, e.message)


class SessionMonitor:
    """Watches the screensaver and locks the screen on request."""

    dbus_proxy: typing.Optional[Gio.DBusProxy] = None
    _on_locked: typing.Optional[typing.Callable[[], None]] = None
    _on_unlocked: typing.Optional[typing.Callable[[], None]] = None

    def __init__(self, command: typing.Optional[str] = None) -> None:
        self.__command: typing.Union[list[str], typing.Callable[[], None], None]
        if command:
            self.__command = command.split()
        else:
            self.__command = lock_screen_command()

    def start(
        self,
        on_locked: typing.Callable[[], None],
        on_unlocked: typing.Callable[[], None],
    ) -> None:
        """Report screen lock changes of the screensaver."""
        if utility.desktop_environment() == "gnome":
            name, path = "org.gnome.ScreenSaver", "/org/gnome/ScreenSaver"
        else:
            name, path = "org.freedesktop.ScreenSaver", "/org/freedesktop/ScreenSaver"

        try:
            self.dbus_proxy = Gio.DBusProxy.new_for_bus_sync(
                bus_type=Gio.BusType.SESSION,
                flags=Gio.DBusProxyFlags.DO_NOT_LOAD_PROPERTIES,
                info=None,
                name=name,
                object_path=path,
                interface_name=name,
                cancellable=None,
            )
        except GLib.Error as e:
            logging.warning("Unable to watch the screensaver: %s", e.message)
            return

        self._on_locked = on_locked
        self._on_unlocked = on_unlocked
        self.dbus_proxy.connect("g-signal", self._handle_proxy_signal)
        logging.debug("Watch the screensaver %s", name)

    def _handle_proxy_signal(
        self,
        dbus_proxy: Gio.DBusProxy,
        sender_name: typing.Optional[str],
        signal_name: str,
        parameters: GLib.Variant,
    ) -> None:
        if signal_name != "ActiveChanged":
            return

        active: bool
        (active,) = parameters  # type: ignore[misc]
        logging.info("Screensaver %s", "activated" if active else "deactivated")
        if active and self._on_locked:
            self._on_locked()
        elif not active and self._on_unlocked:
            self._on_unlocked()

    def request_lock(self) -> None:
        """Ask the desktop to lock the screen."""
        if self.__command is None:
            logging.warning("No way to lock the screen on this desktop")
        elif isinstance(self.__command, list):
            utility.execute_command(self.__command)
        else:
            self.__command()

    def stop(self) -> None:
        self.dbus_proxy = None
        self._on_locked = None
        self._on_unlocked = None
