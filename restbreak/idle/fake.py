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

from restbreak.model import AdapterUnavailable

from .interface import IdleSignalAdapter


class FakeIdleAdapter(IdleSignalAdapter):
    """Deterministic IdleSignalAdapter driven by the caller.

    Nothing is fired on its own, the simulate_* methods deliver the events.
    """

    def __init__(self, unavailable: bool = False):
        self.unavailable = unavailable
        self.watches: dict[int, int] = {}
        self.resume_requested = False
        self.cancel_count = 0
        self._next_id = 1
        self._on_timeout: typing.Optional[typing.Callable[[int], None]] = None
        self._on_resumed: typing.Optional[typing.Callable[[], None]] = None

    def init(
        self,
        on_timeout: typing.Callable[[int], None],
        on_resumed: typing.Callable[[], None],
    ) -> None:
        if self.unavailable:
            raise AdapterUnavailable("fake idle time service is unavailable")
        self._on_timeout = on_timeout
        self._on_resumed = on_resumed

    def arm_idle_watch(self, msec: int) -> int:
        if self.unavailable:
            raise AdapterUnavailable("fake idle time service is unavailable")
        watch_id = self._next_id
        self._next_id += 1
        self.watches[watch_id] = msec
        return watch_id

    def cancel_all_watches(self) -> None:
        self.cancel_count += 1
        self.watches.clear()
        self.resume_requested = False

    def watch_for_resume(self) -> None:
        self.resume_requested = True

    def stop(self) -> None:
        self.watches.clear()
        self.resume_requested = False
        self._on_timeout = None
        self._on_resumed = None

    def armed(self, msec: int) -> list[int]:
        """Ids of the armed watches waiting for msec of idle time."""
        return [watch_id for watch_id, value in self.watches.items() if value == msec]

    def simulate_idle_timeout(self, msec: int) -> list[int]:
        """Pretend the user was idle for msec, firing every watch that is due.

        Returns the ids of the fired watches.
        """
        fired = [
            watch_id for watch_id, value in sorted(self.watches.items()) if value <= msec
        ]
        for watch_id in fired:
            # A callback may cancel the remaining watches
            if self.watches.pop(watch_id, None) is not None:
                self.emit_timeout(watch_id)
        return fired

    def emit_timeout(self, watch_id: int) -> None:
        """Deliver a timeout for the given id, even if it is no longer armed.

        This mimics a notification that was already on its way when the
        watch was cancelled.
        """
        if self._on_timeout is None:
            logging.debug("Fake idle adapter is not initialized")
            return
        self._on_timeout(watch_id)

    def simulate_resume(self) -> bool:
        """Pretend the user became active. Returns whether on_resumed fired."""
        if not self.resume_requested or self._on_resumed is None:
            return False
        self.resume_requested = False
        self._on_resumed()
        return True
