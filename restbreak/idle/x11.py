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
import subprocess
import threading
import typing

from restbreak import utility
from restbreak.model import AdapterUnavailable
from restbreak.timer import execute_main_thread, start_thread

from .interface import IdleSignalAdapter

# seconds between two xprintidle calls
POLL_INTERVAL = 1


class IdleMonitorX11(IdleSignalAdapter):
    """IdleSignalAdapter implementation for X11.

    Note that this is quite inefficient. It polls xprintidle every second,
    keeping the CPU active a lot.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.poll_condition = threading.Condition()
        self.watches: dict[int, int] = {}
        self.resume_requested = False
        self.running = False
        self.failure: typing.Optional[str] = None
        self._next_id = 1
        self._generation = 0
        self._on_timeout: typing.Optional[typing.Callable[[int], None]] = None
        self._on_resumed: typing.Optional[typing.Callable[[], None]] = None

    def init(
        self,
        on_timeout: typing.Callable[[int], None],
        on_resumed: typing.Callable[[], None],
    ) -> None:
        if not utility.command_exist("xprintidle"):
            raise AdapterUnavailable("xprintidle is not installed")

        self._on_timeout = on_timeout
        self._on_resumed = on_resumed

        # Fail early if there is no X display to ask
        self._read_idle_time()

        with self.lock:
            if self.running:
                return
            self.running = True
        start_thread(self._poll, name="IdleMonitorX11")

    def arm_idle_watch(self, msec: int) -> int:
        with self.lock:
            if self.failure is not None:
                raise AdapterUnavailable(self.failure)
            watch_id = self._next_id
            self._next_id += 1
            self.watches[watch_id] = msec
        return watch_id

    def cancel_all_watches(self) -> None:
        with self.lock:
            self.watches.clear()
            self.resume_requested = False
            self._generation += 1

    def watch_for_resume(self) -> None:
        with self.lock:
            self.resume_requested = True

    def stop(self) -> None:
        with self.lock:
            self.running = False
            self.watches.clear()
            self.resume_requested = False
            self._generation += 1
        with self.poll_condition:
            self.poll_condition.notify_all()

    def _is_running(self) -> bool:
        with self.lock:
            return self.running

    def _read_idle_time(self) -> int:
        """Return the system idle time in milliseconds."""
        try:
            output = subprocess.check_output(["xprintidle"])
            return int(output.decode("utf-8"))
        except (OSError, ValueError, subprocess.CalledProcessError) as e:
            raise AdapterUnavailable(f"xprintidle failed: {e}") from e

    def _poll(self) -> None:
        """Continuously check the system idle time and fire the due watches."""
        previous_idle_time = 0

        while self._is_running():
            with self.poll_condition:
                self.poll_condition.wait(POLL_INTERVAL)

            if not self._is_running():
                break

            try:
                idle_time = self._read_idle_time()
            except AdapterUnavailable as e:
                logging.error("Unable to get idle time: %s", e)
                with self.lock:
                    self.failure = str(e)
                    self.running = False
                break

            with self.lock:
                generation = self._generation
                fired = [
                    watch_id
                    for watch_id, msec in sorted(self.watches.items())
                    if msec <= idle_time
                ]
                for watch_id in fired:
                    del self.watches[watch_id]

                resumed = self.resume_requested and idle_time < previous_idle_time
                if resumed:
                    self.resume_requested = False

            for watch_id in fired:
                execute_main_thread(self._deliver_timeout, generation, watch_id)
            if resumed:
                execute_main_thread(self._deliver_resumed, generation)

            previous_idle_time = idle_time

    def _deliver_timeout(self, generation: int, watch_id: int) -> None:
        with self.lock:
            if generation != self._generation:
                return
        if self._on_timeout:
            self._on_timeout(watch_id)

    def _deliver_resumed(self, generation: int) -> None:
        with self.lock:
            if generation != self._generation:
                return
        if self._on_resumed:
            self._on_resumed()
