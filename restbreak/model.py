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
"""This module contains the entity classes used by the break scheduler and its
collaborators.
"""

import dataclasses
import typing
from dataclasses import dataclass
from enum import Enum


class RestBreakError(Exception):
    """Base class of the errors raised by restbreak."""


class InvalidPolicy(RestBreakError):
    """The break policy cannot be scheduled."""


class AdapterUnavailable(RestBreakError):
    """The platform idle time service cannot be reached."""


class BreakType(Enum):
    """Type of restbreak breaks."""

    TINY = "tiny"
    BIG = "big"


class TinyMode(Enum):
    """How much control the user has over a tiny break.

    A simple tiny break can only run to its end, an interactive one can be
    skipped, postponed or ended by locking the screen.
    """

    SIMPLE = "simple"
    INTERACTIVE = "interactive"


class Phase(Enum):
    """Phases of the break scheduler."""

    WORKING = 0  # User is working (waiting for next break)
    TINY_PENDING = 1  # Tiny break shown, user still active
    TINY_ACTIVE = 2  # Tiny break shown, user resting
    TINY_POSTPONED = 3
    BIG_PENDING = 4
    BIG_ACTIVE = 5
    BIG_POSTPONED = 6
    SUSPENDED = 7

    @property
    def break_type(self) -> typing.Optional[BreakType]:
        """The break this phase belongs to, None outside of breaks."""
        if self in (Phase.TINY_PENDING, Phase.TINY_ACTIVE, Phase.TINY_POSTPONED):
            return BreakType.TINY
        if self in (Phase.BIG_PENDING, Phase.BIG_ACTIVE, Phase.BIG_POSTPONED):
            return BreakType.BIG
        return None

    def is_on_screen(self) -> bool:
        """Check whether the break overlay is shown in this phase."""
        return self in (
            Phase.TINY_PENDING,
            Phase.TINY_ACTIVE,
            Phase.BIG_PENDING,
            Phase.BIG_ACTIVE,
        )

    def is_postponed(self) -> bool:
        return self in (Phase.TINY_POSTPONED, Phase.BIG_POSTPONED)

    @staticmethod
    def pending(break_type: BreakType) -> "Phase":
        if break_type == BreakType.TINY:
            return Phase.TINY_PENDING
        return Phase.BIG_PENDING

    @staticmethod
    def active(break_type: BreakType) -> "Phase":
        if break_type == BreakType.TINY:
            return Phase.TINY_ACTIVE
        return Phase.BIG_ACTIVE

    @staticmethod
    def postponed(break_type: BreakType) -> "Phase":
        if break_type == BreakType.TINY:
            return Phase.TINY_POSTPONED
        return Phase.BIG_POSTPONED


@dataclass(frozen=True)
class BreakPolicy:
    """Immutable scheduling configuration. All times are in seconds."""

    tiny_interval: float = 20 * 60
    tiny_duration: float = 30
    big_interval: float = 60 * 60
    big_duration: float = 5 * 60
    max_tiny_postponements: int = 2
    max_big_postponements: int = 2
    postpone_length: float = 5 * 60
    idle_reset_threshold: float = 5 * 60
    tiny_mode: TinyMode = TinyMode.INTERACTIVE
    tiny_enabled: bool = True
    big_enabled: bool = True
    suspend_on_lock: bool = True

    def validate(self) -> "BreakPolicy":
        """Raise InvalidPolicy if nothing could be scheduled with this policy."""
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if value < 0:
                raise InvalidPolicy(f"{field.name} must not be negative: {value}")

        if not self.tiny_enabled and not self.big_enabled:
            raise InvalidPolicy("both tiny and big breaks are disabled")
        if self.tiny_enabled and self.tiny_interval == 0:
            raise InvalidPolicy("tiny breaks are enabled with a zero interval")
        if self.big_enabled and self.big_interval == 0:
            raise InvalidPolicy("big breaks are enabled with a zero interval")

        return self

    def interval(self, break_type: BreakType) -> float:
        if break_type == BreakType.TINY:
            return self.tiny_interval
        return self.big_interval

    def duration(self, break_type: BreakType) -> float:
        if break_type == BreakType.TINY:
            return self.tiny_duration
        return self.big_duration

    def max_postponements(self, break_type: BreakType) -> int:
        if break_type == BreakType.TINY:
            return self.max_tiny_postponements
        return self.max_big_postponements

    def enabled(self, break_type: BreakType) -> bool:
        if break_type == BreakType.TINY:
            return self.tiny_enabled
        return self.big_enabled

    def is_interactive(self, break_type: BreakType) -> bool:
        """Check whether the user may skip, postpone or lock during the break."""
        if break_type == BreakType.TINY:
            return self.tiny_mode == TinyMode.INTERACTIVE
        return True


@dataclass
class SchedulerState:
    """The mutable state of one break scheduler.

    Accumulated times are active seconds since the last completed break of
    each type.
    """

    phase: Phase = Phase.WORKING
    tiny_since_last: float = 0
    big_since_last: float = 0
    tiny_postponements: int = 0
    big_postponements: int = 0
    # tiny_since_last at the end of the last big break, which counts as a
    # tiny break too
    tiny_covered: float = 0
    suspended_reason: typing.Optional[str] = None
    interrupted_phase: typing.Optional[Phase] = None
    idle: bool = False
    last_transition: float = 0

    def since_last(self, break_type: BreakType) -> float:
        if break_type == BreakType.TINY:
            return self.tiny_since_last
        return self.big_since_last

    def postponements(self, break_type: BreakType) -> int:
        if break_type == BreakType.TINY:
            return self.tiny_postponements
        return self.big_postponements

    def reset(self, break_type: BreakType) -> None:
        """Forget the progress towards the given break."""
        if break_type == BreakType.TINY:
            self.tiny_since_last = 0
            self.tiny_postponements = 0
            self.tiny_covered = 0
        else:
            self.big_since_last = 0
            self.big_postponements = 0

    def copy(self) -> "SchedulerState":
        return dataclasses.replace(self)


class EventHook:
    """Hook to attach and detach listeners to scheduler events."""

    def __init__(self):
        self.__handlers = []

    def __iadd__(self, handler):
        self.__handlers.append(handler)
        return self

    def __isub__(self, handler):
        self.__handlers.remove(handler)
        return self

    def fire(self, *args, **keywargs) -> None:
        """Fire all listeners attached with."""
        for handler in self.__handlers:
            handler(*args, **keywargs)
