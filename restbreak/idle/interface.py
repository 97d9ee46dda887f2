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

from abc import ABC, abstractmethod
from typing import Callable


class IdleSignalAdapter(ABC):
    """Platform-specific source of idle time notifications.

    on_timeout(watch_id) is fired once for every armed idle watch, when the
    user has been idle for the requested time. on_resumed() is fired once
    after every call to watch_for_resume(), when the user becomes active again.
    Both must be fired from the main thread, never from inside the call that
    armed them.
    """

    @abstractmethod
    def init(
        self,
        on_timeout: Callable[[int], None],
        on_resumed: Callable[[], None],
    ) -> None:
        """Connect to the idle time service.

        This is called every time a scheduler starts. It raises
        AdapterUnavailable if the service cannot be reached.
        """
        pass

    @abstractmethod
    def arm_idle_watch(self, msec: int) -> int:
        """Register a watch firing after msec milliseconds of idle time.

        Returns the id of the watch, which is passed to on_timeout.
        Raises AdapterUnavailable if the service is gone.
        """
        pass

    @abstractmethod
    def cancel_all_watches(self) -> None:
        """Forget all idle watches and the pending resume request.

        No notification is delivered for them afterwards. Calling this
        repeatedly is harmless.
        """
        pass

    @abstractmethod
    def watch_for_resume(self) -> None:
        """Fire on_resumed once, the next time the user becomes active."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Disconnect from the idle time service.

        This is called once before the adapter is destroyed.
        """
        pass
