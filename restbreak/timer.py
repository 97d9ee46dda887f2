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
"""One-shot timers on the GLib main loop.

Everything the scheduler reacts to is delivered as a callback on the main
loop, so only one event is ever processed at a time.
"""

import threading
import time
import typing

import gi

gi.require_version("GLib", "2.0")
from gi.repository import GLib


class Timer:
    """Arms and cancels one-shot events on the GLib main loop."""

    def __init__(self, monotonic: typing.Callable[[], float] = time.monotonic):
        self.__monotonic = monotonic
        self.__sources: dict[int, typing.Callable[[int], None]] = {}

    def now(self) -> float:
        """Monotonic time in seconds."""
        return self.__monotonic()

    def schedule(self, seconds: float, callback: typing.Callable[[int], None]) -> int:
        """Call callback(timer_id) once after the given number of seconds."""
        timer_id: int = 0

        def on_timeout() -> bool:
            if self.__sources.pop(timer_id, None) is not None:
                callback(timer_id)
            # This signals that the callback should only be called once
            return GLib.SOURCE_REMOVE

        timer_id = GLib.timeout_add(max(0, round(seconds * 1000)), on_timeout)
        self.__sources[timer_id] = callback
        return timer_id

    def cancel(self, timer_id: int) -> None:
        if self.__sources.pop(timer_id, None) is not None:
            GLib.source_remove(timer_id)

    def pending(self) -> int:
        """Number of armed timers."""
        return len(self.__sources)


def start_thread(target_function, name="WorkThread", **args) -> threading.Thread:
    """Execute the function in a separate thread."""
    thread = threading.Thread(
        target=target_function, name=name, daemon=True, kwargs=args
    )
    thread.start()
    return thread


def execute_main_thread(target_function, *args, **kwargs) -> None:
    """Execute the given function in main thread."""
    GLib.idle_add(lambda: target_function(*args, **kwargs))
