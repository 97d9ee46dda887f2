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
"""This module contains utility functions for restbreak."""

import errno
import json
import locale
import logging
import os
import re
import shutil
import subprocess
from logging.handlers import RotatingFileHandler

import babel.core
import babel.dates

BIN_DIRECTORY = os.path.dirname(os.path.realpath(__file__))
HOME_DIRECTORY = os.environ.get("HOME") or os.path.expanduser("~")
CONFIG_DIRECTORY = os.path.join(
    os.environ.get("XDG_CONFIG_HOME") or os.path.join(HOME_DIRECTORY, ".config"),
    "restbreak",
)
CONFIG_FILE_PATH = os.path.join(CONFIG_DIRECTORY, "restbreak.json")
SYSTEM_CONFIG_FILE_PATH = os.path.join(BIN_DIRECTORY, "config/restbreak.json")
LOG_FILE_PATH = os.path.join(HOME_DIRECTORY, "restbreak.log")
LOCALE_PATH = os.path.join(BIN_DIRECTORY, "config/locale")
DESKTOP_ENVIRONMENT = None
IS_WAYLAND = False


def system_locale(category=locale.LC_MESSAGES):
    """Return the system locale.

    If not available, return en_US.UTF-8.
    """
    try:
        locale.setlocale(locale.LC_ALL, "")
        sys_locale = locale.getlocale(category)[0]
        if not sys_locale:
            sys_locale = "en_US.UTF-8"
        return sys_locale
    except (locale.Error, ValueError):
        # Some systems does not return proper locale
        return "en_US.UTF-8"


def format_time(time):
    """Format time based on the system time."""
    sys_locale = system_locale(locale.LC_TIME)
    try:
        return babel.dates.format_time(time, format="short", locale=sys_locale)
    except (babel.core.UnknownLocaleError, ValueError):
        # Some locale types are not supported by the babel library.
        # Use 'en' locale format if the system locale is not supported.
        return babel.dates.format_time(time, format="short", locale="en")


def mkdir(path):
    """Create directory if not exists."""
    try:
        os.makedirs(path)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(path):
            pass
        else:
            logging.error("Error while creating " + str(path))
            raise


def load_json(json_path):
    """Load the JSON file from the given path, None if it is missing or broken."""
    json_obj = None
    if os.path.isfile(json_path):
        try:
            with open(json_path) as config_file:
                json_obj = json.load(config_file)
        except (OSError, ValueError) as e:
            logging.warning("Unable to read %s: %s", json_path, e)
    return json_obj


def write_json(json_path, json_obj):
    """Write the JSON object at the given path."""
    try:
        with open(json_path, "w") as json_file:
            json.dump(json_obj, json_file, indent=4, sort_keys=True)
    except OSError as e:
        logging.warning("Unable to write %s: %s", json_path, e)


def initialize_config():
    """Create the config file in XDG_CONFIG_HOME(or ~/.config)/restbreak."""
    logging.info("Copy the config file to XDG_CONFIG_HOME(or ~/.config)/restbreak")
    mkdir(CONFIG_DIRECTORY)
    shutil.copy2(SYSTEM_CONFIG_FILE_PATH, CONFIG_FILE_PATH)


def desktop_environment():
    """Detect the desktop environment."""
    global DESKTOP_ENVIRONMENT
    desktop_session = os.environ.get("DESKTOP_SESSION")
    current_desktop = os.environ.get("XDG_CURRENT_DESKTOP")
    env = "unknown"
    if desktop_session is not None:
        desktop_session = desktop_session.lower()
        if desktop_session in [
            "gnome",
            "unity",
            "budgie-desktop",
            "cinnamon",
            "mate",
            "xfce4",
            "lxde",
            "pantheon",
            "kde",
        ]:
            env = desktop_session
        elif desktop_session.startswith("xubuntu") or (
            current_desktop is not None and "xfce" in current_desktop.lower()
        ):
            env = "xfce"
        elif desktop_session.startswith("lubuntu"):
            env = "lxde"
        elif (
            "plasma" in desktop_session
            or desktop_session.startswith("kubuntu")
            or os.environ.get("KDE_FULL_SESSION") == "true"
        ):
            env = "kde"
        elif os.environ.get("GNOME_DESKTOP_SESSION_ID") or desktop_session.startswith(
            "gnome"
        ):
            env = "gnome"
        elif desktop_session.startswith("ubuntu"):
            env = "unity"
    elif current_desktop is not None:
        if current_desktop.lower().startswith("sway"):
            env = "sway"
        elif "gnome" in current_desktop.lower():
            env = "gnome"
    DESKTOP_ENVIRONMENT = env
    return env


def is_wayland():
    """Determine if Wayland is running.

    https://unix.stackexchange.com/a/325972/222290
    """
    global IS_WAYLAND

    if "WAYLAND_DISPLAY" in os.environ:
        IS_WAYLAND = True
        return IS_WAYLAND

    try:
        session_id = subprocess.check_output(["loginctl"]).split(b"\n")[1].split()[0]
        output = subprocess.check_output(
            ["loginctl", "show-session", session_id, "-p", "Type"]
        )
    except (OSError, IndexError, subprocess.CalledProcessError):
        logging.warning("Unable to determine if wayland is running. Assuming no.")
        IS_WAYLAND = False
    else:
        IS_WAYLAND = bool(re.search(b"wayland", output, re.IGNORECASE))
    return IS_WAYLAND


def execute_command(command, args=[]):
    """Execute the shell command without waiting for its response."""
    if command:
        command_to_execute = []
        if isinstance(command, str):
            command_to_execute.append(command)
        else:
            command_to_execute.extend(command)
        if args:
            command_to_execute.extend(args)
        try:
            subprocess.Popen(command_to_execute)
        except OSError:
            logging.error("Error in executing the command " + str(command))


def command_exist(command):
    """Check whether the given command exist in the system or not."""
    if shutil.which(command):
        return True
    return False


def initialize_logging(debug):
    """Initialize the logging framework using the restbreak specific
    configurations.
    """
    # Configure logging.
    root_logger = logging.getLogger()
    log_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s]:[%(threadName)s] %(message)s"
    )

    # Append the logs and overwrite once reached 1MB
    if debug:
        # Log to file
        file_handler = RotatingFileHandler(
            LOG_FILE_PATH, maxBytes=1024 * 1024, backupCount=5, encoding=None, delay=0
        )
        file_handler.setFormatter(log_formatter)
        # Log to console
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(log_formatter)

        root_logger.setLevel(logging.DEBUG)
        root_logger.addHandler(console_handler)
        root_logger.addHandler(file_handler)
    else:
        root_logger.propagate = False
