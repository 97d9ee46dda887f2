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
"""RestBreak connects all the individual components and provides the complete
application.
"""

import logging
from importlib import metadata
import typing

import gi
from restbreak import utility
from restbreak.config import Config
from restbreak.idle import IdleSignalAdapter, create_adapter
from restbreak.model import (
    AdapterUnavailable,
    BreakType,
    InvalidPolicy,
    Phase,
    RestBreakError,
)
from restbreak.overlay import NotificationOverlay
from restbreak.scheduler import BreakScheduler
from restbreak.session import SessionMonitor
from restbreak.timer import Timer
from restbreak.translations import translate as _

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib

RESTBREAK_VERSION = metadata.version("restbreak")


class RestBreak(Gio.Application):
    """This class represents a runnable restbreak instance."""

    config: Config
    idle: typing.Optional[IdleSignalAdapter] = None
    scheduler: typing.Optional[BreakScheduler] = None
    session: typing.Optional[SessionMonitor] = None
    timer: Timer

    def __init__(self, config: Config) -> None:
        super().__init__(
            application_id="io.github.restbreak.RestBreak",
            flags=Gio.ApplicationFlags.HANDLES_COMMAND_LINE,
        )

        self.config = config
        self.timer = Timer()
        self.overlay = NotificationOverlay(self)

        self.__register_cli_arguments()
        self.__register_actions()

    def __register_cli_arguments(self):
        flags = [
            ("take-break", "t", _("take the next break now")),
            ("disable", "d", _("pause the currently running restbreak instance")),
            ("enable", "e", _("resume the currently running restbreak instance")),
            ("reload", "r", _("reload the configuration of the running instance")),
            ("quit", "q", _("quit the running restbreak instance and exit")),
            # special handling
            (
                "status",
                None,
                _("print the status of running restbreak instance and exit"),
            ),
            ("debug", None, _("start restbreak in debug mode")),
            ("version", None, _("show program's version number and exit")),
        ]

        for flag, short, desc in flags:
            # all flags are booleans
            self.add_main_option(
                flag,
                ord(short) if short else 0,
                GLib.OptionFlags.NONE,
                GLib.OptionArg.NONE,
                desc,
                None,
            )

    def __register_actions(self) -> None:
        actions = [
            ("take_break", self.take_break),
            ("disable", self.disable),
            ("enable", self.enable),
            ("reload", self.reload),
            ("quit", self.quit),
        ]

        # this is needed because of late bindings...
        def create_cb_discard_args(callback):
            return lambda action, parameter: callback()

        for name, callback in actions:
            action = Gio.SimpleAction.new(name, None)
            action.connect("activate", create_cb_discard_args(callback))
            self.add_action(action)

        # break controls, the target is the type of the break they belong to
        break_actions = [
            ("skip", self.on_skip),
            ("postpone", self.on_postpone),
            ("lock", self.on_lock),
        ]

        def create_cb_break_type(callback):
            return lambda action, parameter: callback(BreakType(parameter.unpack()))

        for name, callback in break_actions:
            action = Gio.SimpleAction.new(name, GLib.VariantType.new("s"))
            action.connect("activate", create_cb_break_type(callback))
            self.add_action(action)

    def do_handle_local_options(self, options):
        debug = options.contains("debug")

        # Initialize the logging
        utility.initialize_logging(debug)

        if options.contains("version"):
            print(f"restbreak {RESTBREAK_VERSION}")
            return 0  # exit

        # needed for calling is_remote
        self.register(None)

        if self.get_is_remote():
            logging.info("Remote instance")

            if options.contains("status"):
                # fall through the default handling
                # this will call do_command_line on the primary instance
                # where we will handle this
                return -1

            remote_actions = [
                ("quit", "quit"),
                ("enable", "enable"),
                ("disable", "disable"),
                ("reload", "reload"),
                ("take-break", "take_break"),
            ]
            for flag, action in remote_actions:
                if options.contains(flag):
                    self.activate_action(action, None)
                    return 0

            logging.info("restbreak is already running")
            return 0

        logging.info("Primary instance")
        if (
            options.contains("enable")
            or options.contains("disable")
            or options.contains("reload")
            or options.contains("status")
            or options.contains("quit")
        ):
            print(_("restbreak is not running"))
            return 1

        return -1  # continue default handling

    def do_command_line(self, command_line):
        cli = command_line.get_options_dict().end().unpack()

        if cli.get("status"):
            # this is only invoked remotely
            command_line.print_literal(self.status())
            return 0

        logging.info("Handle primary command line")

        self.activate()

        if cli.get("take-break"):
            self.take_break()

        return 0

    def do_activate(self) -> None:
        pass

    def do_startup(self) -> None:
        Gio.Application.do_startup(self)

        logging.info("Starting up Application")

        # Keep running without any window
        self.hold()

        self.idle = create_adapter()
        self.session = SessionMonitor(self.config.get("lock_screen_command"))
        self.session.start(self.on_screen_locked, self.on_screen_unlocked)

        self.start_scheduler()

    def do_shutdown(self) -> None:
        logging.info("Shutting down Application")
        if self.scheduler is not None:
            self.scheduler.stop()
        if self.idle is not None:
            self.idle.stop()
        if self.session is not None:
            self.session.stop()

        Gio.Application.do_shutdown(self)

    def start_scheduler(self) -> None:
        """Create a scheduler for the current configuration and start it."""
        if self.idle is None or self.session is None:
            return

        try:
            policy = self.config.policy()
        except InvalidPolicy as e:
            logging.error("Invalid configuration: %s", e)
            self.show_error(_("The break settings are invalid: %s") % e)
            self.quit()
            return

        self.scheduler = BreakScheduler(
            policy, self.idle, self.overlay, self.session, self.timer
        )
        self.scheduler.on_phase_changed += self.on_phase_changed
        self.scheduler.on_halted += self.on_halted

        try:
            self.scheduler.start()
        except AdapterUnavailable as e:
            logging.error("Unable to get idle time: %s", e)
            self.show_error(_("Cannot detect idle time, breaks are not scheduled."))

    def show_error(self, message: str) -> None:
        notification = Gio.Notification.new("restbreak")
        notification.set_body(message)
        notification.set_priority(Gio.NotificationPriority.HIGH)
        self.send_notification("error", notification)

    def status(self) -> str:
        if self.scheduler is None:
            return _("Breaks are not scheduled")
        return self.scheduler.status()

    def on_phase_changed(self, old_phase: Phase, new_phase: Phase) -> None:
        if new_phase == Phase.WORKING and self.scheduler is not None:
            logging.info(self.scheduler.status())

    def on_halted(self, error: AdapterUnavailable) -> None:
        self.show_error(_("Cannot detect idle time, breaks are not scheduled."))

    def on_skip(self, break_type: BreakType) -> None:
        if self.scheduler is not None:
            self.scheduler.skip(break_type)

    def on_postpone(self, break_type: BreakType) -> None:
        if self.scheduler is not None:
            self.scheduler.postpone(break_type)

    def on_lock(self, break_type: BreakType) -> None:
        if self.scheduler is not None:
            self.scheduler.lock(break_type)

    def on_screen_locked(self) -> None:
        if self.scheduler is not None:
            self.scheduler.session_locked()

    def on_screen_unlocked(self) -> None:
        if self.scheduler is not None:
            self.scheduler.session_unlocked()

    def take_break(self) -> None:
        if self.scheduler is not None:
            self.scheduler.take_break()

    def disable(self) -> None:
        """Suspend the breaks until enabled again."""
        if self.scheduler is not None:
            self.scheduler.suspend("user")

    def enable(self) -> None:
        if self.scheduler is not None:
            self.scheduler.resume()

    def reload(self) -> None:
        """Restart the scheduler with the configuration on disk."""
        logging.info("Reload the configuration")
        try:
            config = Config.load()
            config.policy()
        except RestBreakError as e:
            logging.error("Invalid configuration: %s", e)
            self.show_error(_("The break settings are invalid: %s") % e)
            return
        self.config = config
        if self.scheduler is not None:
            self.scheduler.on_phase_changed -= self.on_phase_changed
            self.scheduler.on_halted -= self.on_halted
            self.scheduler.stop()
            self.scheduler = None
        self.start_scheduler()
