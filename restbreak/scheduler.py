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
"""BreakScheduler decides when tiny and big breaks start and end.

The scheduler counts the active time of the user towards the next tiny and
big break, shows the break overlay when one is due and reacts to the skip,
postpone and lock commands of the overlay and to the suspend and resume
commands of the session. It runs on the GLib main loop: timer events, idle
notifications and commands are all handled one at a time.
"""

import datetime
import functools
import logging
import typing
from enum import Enum

from restbreak import utility
from restbreak.idle.interface import IdleSignalAdapter
from restbreak.model import (
    AdapterUnavailable,
    BreakPolicy,
    BreakType,
    EventHook,
    Phase,
    SchedulerState,
)
from restbreak.translations import translate as _

if typing.TYPE_CHECKING:
    from restbreak.overlay import BreakOverlay
    from restbreak.session import SessionMonitor
    from restbreak.timer import Timer

# seconds without input after which a shown break counts as taken
BREAK_IDLE_TIME = 2

# breaks due within this many seconds of each other are due together
DUE_TOLERANCE = 1


class Watch(Enum):
    """The events the scheduler may be waiting for."""

    TINY_DUE = 1
    BIG_DUE = 2
    USER_IDLE = 3
    BREAK_IDLE = 4
    DURATION = 5
    POSTPONE = 6


IDLE_WATCHES = (Watch.USER_IDLE, Watch.BREAK_IDLE)


def halt_on_unavailable(method):
    """Stop scheduling for good if the idle time source is gone."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except AdapterUnavailable as e:
            self._halt(e)

    return wrapper


class BreakScheduler:
    """The break scheduling state machine of one user session."""

    policy: BreakPolicy
    state: SchedulerState
    running: bool = False

    def __init__(
        self,
        policy: BreakPolicy,
        idle: IdleSignalAdapter,
        overlay: "BreakOverlay",
        session: "SessionMonitor",
        timer: "Timer",
    ) -> None:
        self.policy = policy.validate()
        self.__idle = idle
        self.__overlay = overlay
        self.__session = session
        self.__timer = timer
        self.state = SchedulerState(last_transition=timer.now())
        self.__watches: dict[Watch, int] = {}
        # start of the active time not yet added to the accumulators
        self.__accrual_mark: typing.Optional[float] = None

        # This event is fired after every phase change
        self.on_phase_changed = EventHook()
        # This event is fired when scheduling stops due to an error
        self.on_halted = EventHook()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def start(self) -> None:
        """Start counting towards the first breaks.

        Raises AdapterUnavailable if the idle time cannot be detected.
        """
        if self.running:
            return

        logging.info("Start the break scheduler")
        self.__idle.init(self.__on_idle_timeout, self.__on_resumed)

        now = self.__timer.now()
        self.running = True
        self.state = SchedulerState(last_transition=now)
        self.__accrual_mark = now
        try:
            self.__arm_working_watches()
        except AdapterUnavailable as e:
            self._halt(e)
            raise

    def stop(self) -> None:
        """Stop scheduling. The idle adapter stays initialized."""
        if not self.running:
            return

        logging.info("Stop the break scheduler")
        self.__settle()
        self.__cancel_all()
        if self.phase.is_on_screen():
            self.__overlay.deactivate()
        self.running = False
        self.__accrual_mark = None

    @halt_on_unavailable
    def skip(self, break_type: typing.Optional[BreakType] = None) -> None:
        """User skipped the break using the Skip button."""
        current = self.__current_break("skip", break_type)
        if current is None:
            return
        if not self.phase.is_on_screen() or not self.policy.is_interactive(current):
            self.__reject("skip")
            return

        logging.info("Skip the %s break", current.value)
        self.__complete(current)

    @halt_on_unavailable
    def postpone(self, break_type: typing.Optional[BreakType] = None) -> None:
        """User postponed the break using the Postpone button."""
        current = self.__current_break("postpone", break_type)
        if current is None:
            return
        if not self.phase.is_on_screen() or not self.policy.is_interactive(current):
            self.__reject("postpone")
            return

        postponements = self.state.postponements(current)
        if postponements >= self.policy.max_postponements(current):
            logging.info(
                "The %s break was postponed %d times already, keep it",
                current.value,
                postponements,
            )
            return

        logging.info(
            "Postpone the %s break for %d seconds",
            current.value,
            self.policy.postpone_length,
        )
        if current == BreakType.TINY:
            self.state.tiny_postponements += 1
        else:
            self.state.big_postponements += 1

        self.__transition(Phase.postponed(current))
        self.__overlay.deactivate()
        self.__arm_timer(Watch.POSTPONE, self.policy.postpone_length)
        self.__arm_big_due_during(current)

    @halt_on_unavailable
    def lock(self, break_type: typing.Optional[BreakType] = None) -> None:
        """User asked to lock the screen instead of watching the break."""
        current = self.__current_break("lock", break_type)
        if current is None:
            return
        if not self.policy.is_interactive(current):
            self.__reject("lock")
            return

        logging.info("Lock the screen to take the %s break", current.value)
        self.__complete(current)
        self.__session.request_lock()

    def suspend(self, reason: str) -> None:
        """Pause scheduling, forgetting the break in progress."""
        if not self.running or self.phase == Phase.SUSPENDED:
            self.__reject("suspend")
            return

        logging.info("Suspend the break scheduler: %s", reason)
        interrupted = self.phase
        self.state.suspended_reason = reason
        self.state.interrupted_phase = interrupted
        self.__transition(Phase.SUSPENDED)
        if interrupted.is_on_screen():
            self.__overlay.deactivate()

    @halt_on_unavailable
    def resume(self) -> None:
        """Leave the suspension and count both breaks from zero."""
        if not self.running or self.phase != Phase.SUSPENDED:
            self.__reject("resume")
            return

        logging.info("Resume the break scheduler")
        self.__transition(Phase.WORKING, reset=(BreakType.TINY, BreakType.BIG))
        self.__arm_working_watches()

    def session_locked(self) -> None:
        """The screen got locked."""
        if not self.policy.suspend_on_lock:
            logging.debug("Screen locked, suspend on lock is disabled")
            return
        self.suspend("lock")

    def session_unlocked(self) -> None:
        """The screen got unlocked."""
        if not self.policy.suspend_on_lock:
            logging.debug("Screen unlocked, suspend on lock is disabled")
            return
        if self.phase != Phase.SUSPENDED or self.state.suspended_reason != "lock":
            self.__reject("unlock")
            return
        self.resume()

    @halt_on_unavailable
    def take_break(self, break_type: typing.Optional[BreakType] = None) -> None:
        """Start the given break, or the next one due, right now."""
        if not self.running or self.phase != Phase.WORKING:
            self.__reject("take_break")
            return

        if break_type is None:
            next_break = self.next_break()
            if next_break is None:
                self.__reject("take_break")
                return
            break_type = next_break[0]
        elif not self.policy.enabled(break_type):
            self.__reject("take_break")
            return

        logging.info("Take a %s break due to external request", break_type.value)
        self.__enter_pending(break_type)

    def snapshot(self) -> SchedulerState:
        """Copy of the state with the active time counted up to now."""
        state = self.state.copy()
        if self.__accrual_mark is not None:
            elapsed = max(0.0, self.__timer.now() - self.__accrual_mark)
            if self.__accrues(BreakType.TINY):
                state.tiny_since_last += elapsed
            if self.__accrues(BreakType.BIG):
                state.big_since_last += elapsed
        return state

    def next_break(self) -> typing.Optional[tuple[BreakType, float]]:
        """The next break and the active seconds until it is due.

        None unless the user is working.
        """
        if not self.running or self.phase != Phase.WORKING or self.state.idle:
            return None

        state = self.snapshot()
        tiny = big = None
        if self.policy.tiny_enabled:
            tiny = self.__remaining(BreakType.TINY, state)
        if self.policy.big_enabled:
            big = self.__remaining(BreakType.BIG, state)

        if big is not None and (tiny is None or big <= tiny + DUE_TOLERANCE):
            return BreakType.BIG, big
        if tiny is not None:
            return BreakType.TINY, tiny
        return None

    def status(self) -> str:
        """Human readable description of what the scheduler is doing."""
        if not self.running:
            return _("Breaks are not scheduled")
        if self.phase == Phase.SUSPENDED:
            return _("Paused: %s") % self.state.suspended_reason
        if self.phase.break_type == BreakType.TINY:
            return _("Taking a tiny break")
        if self.phase.break_type == BreakType.BIG:
            return _("Taking a big break")
        if self.state.idle:
            return _("Paused while you are away")

        next_break = self.next_break()
        if next_break is None:
            return _("Breaks are not scheduled")
        break_type, seconds = next_break
        time = datetime.datetime.now() + datetime.timedelta(seconds=seconds)
        if break_type == BreakType.TINY:
            return _("Next tiny break at %s") % utility.format_time(time)
        return _("Next big break at %s") % utility.format_time(time)

    def _halt(self, error: AdapterUnavailable) -> None:
        logging.error("Cannot detect idle time, stop scheduling breaks: %s", error)
        self.__cancel_all()
        if self.phase.is_on_screen():
            self.__overlay.deactivate()
        self.running = False
        self.__accrual_mark = None
        self.on_halted.fire(error)

    def __on_idle_timeout(self, watch_id: int) -> None:
        for watch in IDLE_WATCHES:
            if self.__watches.get(watch) == watch_id:
                self.__on_watch(watch, watch_id)
                return
        logging.debug("Ignore the stale idle watch %d", watch_id)

    @halt_on_unavailable
    def __on_watch(self, watch: Watch, watch_id: int) -> None:
        if not self.running or self.__watches.get(watch) != watch_id:
            logging.debug("Ignore the stale %s watch %d", watch.name, watch_id)
            return
        del self.__watches[watch]

        if watch == Watch.TINY_DUE:
            self.__on_tiny_due()
        elif watch == Watch.BIG_DUE:
            self.__on_big_due()
        elif watch == Watch.USER_IDLE:
            self.__on_user_idle()
        elif watch == Watch.BREAK_IDLE:
            self.__on_break_idle()
        elif watch == Watch.DURATION:
            self.__on_duration_elapsed()
        elif watch == Watch.POSTPONE:
            self.__on_postpone_elapsed()

    @halt_on_unavailable
    def __on_resumed(self) -> None:
        if not self.running:
            return

        if self.phase == Phase.WORKING and self.state.idle:
            logging.info("User is back, continue counting")
            self.state.idle = False
            self.__accrual_mark = self.__timer.now()
            self.__cancel_all()
            self.__arm_working_watches()
        elif self.phase in (Phase.TINY_ACTIVE, Phase.BIG_ACTIVE):
            current = typing.cast(BreakType, self.phase.break_type)
            logging.debug("User is active during the %s break", current.value)
            self.__transition(Phase.pending(current), cancel=False)
            self.__arm_idle(Watch.BREAK_IDLE, BREAK_IDLE_TIME)
        else:
            logging.debug("Ignore resume in %s", self.phase.name)

    def __on_tiny_due(self) -> None:
        self.__settle()
        if self.__is_due(BreakType.BIG):
            logging.info("Tiny and big break are due together, take the big one")
            self.__enter_pending(BreakType.BIG)
        else:
            self.__enter_pending(BreakType.TINY)

    def __on_big_due(self) -> None:
        if self.phase.break_type == BreakType.TINY:
            logging.info("The big break supersedes the tiny break")
        self.__enter_pending(BreakType.BIG)

    def __on_user_idle(self) -> None:
        threshold = self.policy.idle_reset_threshold
        logging.info("User is idle for %d seconds, pause counting", threshold)
        # The user left when the idle time started
        self.__settle(self.__timer.now() - threshold)
        self.__cancel_all()
        self.state.idle = True
        self.__accrual_mark = None
        self.__idle.watch_for_resume()

    def __on_break_idle(self) -> None:
        current = typing.cast(BreakType, self.phase.break_type)
        logging.debug("User is resting during the %s break", current.value)
        self.__transition(Phase.active(current), cancel=False)
        self.__idle.watch_for_resume()

    def __on_duration_elapsed(self) -> None:
        current = typing.cast(BreakType, self.phase.break_type)
        logging.info("The %s break is over", current.value)
        self.__complete(current)

    def __on_postpone_elapsed(self) -> None:
        current = typing.cast(BreakType, self.phase.break_type)
        logging.info("Postponement is over, show the %s break again", current.value)
        self.__enter_pending(current)

    def __enter_pending(self, break_type: BreakType) -> None:
        """Show the break and wait for it to end."""
        superseded = self.phase.is_on_screen()
        self.__transition(Phase.pending(break_type))
        if superseded:
            self.__overlay.deactivate()

        duration = self.policy.duration(break_type)
        self.__arm_timer(Watch.DURATION, duration)
        self.__arm_idle(Watch.BREAK_IDLE, BREAK_IDLE_TIME)
        self.__arm_big_due_during(break_type)

        interactive = self.policy.is_interactive(break_type)
        can_postpone = interactive and self.state.postponements(
            break_type
        ) < self.policy.max_postponements(break_type)
        self.__overlay.activate(
            break_type,
            round(duration),
            can_skip=interactive,
            can_postpone=can_postpone,
            can_lock=interactive,
        )

    def __complete(self, break_type: BreakType) -> None:
        """The break was taken, start counting towards the next one."""
        was_on_screen = self.phase.is_on_screen()
        self.__transition(Phase.WORKING, reset=(break_type,))
        if break_type == BreakType.BIG:
            # The next tiny break is a full interval away
            self.state.tiny_covered = self.state.tiny_since_last
        if was_on_screen:
            self.__overlay.deactivate()
        self.__arm_working_watches()

    def __transition(
        self,
        phase: Phase,
        cancel: bool = True,
        reset: typing.Iterable[BreakType] = (),
    ) -> None:
        now = self.__timer.now()
        self.__settle(now)
        if cancel:
            self.__cancel_all()

        old_phase = self.state.phase
        for break_type in reset:
            self.state.reset(break_type)
        if phase != Phase.SUSPENDED:
            self.state.suspended_reason = None
            self.state.interrupted_phase = None
        self.state.phase = phase
        self.state.idle = False
        self.state.last_transition = now
        self.__accrual_mark = None if phase == Phase.SUSPENDED else now

        if old_phase != phase:
            logging.debug("Phase %s -> %s", old_phase.name, phase.name)
            self.on_phase_changed.fire(old_phase, phase)

    def __accrues(self, break_type: BreakType) -> bool:
        """Check whether active time counts towards the break in this phase."""
        if self.phase == Phase.SUSPENDED or self.state.idle:
            return False
        return self.phase.break_type != break_type or self.phase.is_postponed()

    def __settle(self, until: typing.Optional[float] = None) -> None:
        """Add the active time up to until to the accumulators."""
        if self.__accrual_mark is None:
            return
        if until is None:
            until = self.__timer.now()
        until = max(self.__accrual_mark, until)

        elapsed = until - self.__accrual_mark
        if self.__accrues(BreakType.TINY):
            self.state.tiny_since_last += elapsed
        if self.__accrues(BreakType.BIG):
            self.state.big_since_last += elapsed
        self.__accrual_mark = until

    def __remaining(
        self, break_type: BreakType, state: typing.Optional[SchedulerState] = None
    ) -> float:
        """Active seconds until the given break is due."""
        if state is None:
            state = self.state
        progress = state.since_last(break_type)
        if break_type == BreakType.TINY:
            progress -= state.tiny_covered
        return max(0.0, self.policy.interval(break_type) - progress)

    def __is_due(self, break_type: BreakType) -> bool:
        if not self.policy.enabled(break_type):
            return False
        since_last = self.state.since_last(break_type)
        return self.policy.interval(break_type) - since_last <= DUE_TOLERANCE

    def __arm_working_watches(self) -> None:
        if self.policy.tiny_enabled:
            self.__arm_timer(Watch.TINY_DUE, self.__remaining(BreakType.TINY))
        if self.policy.big_enabled:
            self.__arm_timer(Watch.BIG_DUE, self.__remaining(BreakType.BIG))
        if self.policy.idle_reset_threshold > 0:
            self.__arm_idle(Watch.USER_IDLE, self.policy.idle_reset_threshold)

    def __arm_big_due_during(self, break_type: BreakType) -> None:
        """A big break becoming due takes over a tiny break."""
        if break_type == BreakType.TINY and self.policy.big_enabled:
            self.__arm_timer(Watch.BIG_DUE, self.__remaining(BreakType.BIG))

    def __arm_timer(self, watch: Watch, seconds: float) -> None:
        self.__watches[watch] = self.__timer.schedule(
            seconds, functools.partial(self.__on_watch, watch)
        )

    def __arm_idle(self, watch: Watch, seconds: float) -> None:
        self.__watches[watch] = self.__idle.arm_idle_watch(round(seconds * 1000))

    def __cancel_all(self) -> None:
        for watch, watch_id in self.__watches.items():
            if watch not in IDLE_WATCHES:
                self.__timer.cancel(watch_id)
        self.__watches.clear()
        self.__idle.cancel_all_watches()

    def __current_break(
        self, command: str, break_type: typing.Optional[BreakType]
    ) -> typing.Optional[BreakType]:
        """The break a command applies to, None if there is none."""
        current = self.phase.break_type
        if not self.running or current is None:
            self.__reject(command)
            return None
        if break_type is not None and break_type != current:
            self.__reject(command)
            return None
        return current

    def __reject(self, command: str) -> None:
        logging.debug("Ignore %s in %s", command, self.phase.name)
