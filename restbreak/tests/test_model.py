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

from unittest import mock

import pytest

from restbreak.model import (
    BreakPolicy,
    BreakType,
    EventHook,
    InvalidPolicy,
    Phase,
    SchedulerState,
    TinyMode,
)


class TestBreakPolicy:
    def test_defaults(self):
        policy = BreakPolicy().validate()

        assert policy.tiny_interval == 1200
        assert policy.big_interval == 3600
        assert policy.tiny_mode == TinyMode.INTERACTIVE

    @pytest.mark.parametrize(
        "field",
        [
            "tiny_interval",
            "tiny_duration",
            "big_interval",
            "big_duration",
            "max_tiny_postponements",
            "max_big_postponements",
            "postpone_length",
            "idle_reset_threshold",
        ],
    )
    def test_negative_value(self, field):
        with pytest.raises(InvalidPolicy):
            BreakPolicy(**{field: -1}).validate()

    def test_both_breaks_disabled(self):
        with pytest.raises(InvalidPolicy):
            BreakPolicy(tiny_enabled=False, big_enabled=False).validate()

    def test_zero_interval(self):
        with pytest.raises(InvalidPolicy):
            BreakPolicy(tiny_interval=0).validate()

        # A disabled break may have any interval
        BreakPolicy(big_interval=0, big_enabled=False).validate()

    def test_zero_postponements(self):
        policy = BreakPolicy(max_tiny_postponements=0, max_big_postponements=0)

        assert policy.validate() is policy

    def test_interactive(self):
        policy = BreakPolicy(tiny_mode=TinyMode.SIMPLE)

        assert not policy.is_interactive(BreakType.TINY)
        assert policy.is_interactive(BreakType.BIG)


class TestPhase:
    def test_break_type(self):
        assert Phase.WORKING.break_type is None
        assert Phase.SUSPENDED.break_type is None
        assert Phase.TINY_POSTPONED.break_type == BreakType.TINY
        assert Phase.BIG_ACTIVE.break_type == BreakType.BIG

    def test_on_screen(self):
        on_screen = [phase for phase in Phase if phase.is_on_screen()]

        assert on_screen == [
            Phase.TINY_PENDING,
            Phase.TINY_ACTIVE,
            Phase.BIG_PENDING,
            Phase.BIG_ACTIVE,
        ]

    def test_phase_of_break(self):
        assert Phase.pending(BreakType.BIG) == Phase.BIG_PENDING
        assert Phase.active(BreakType.TINY) == Phase.TINY_ACTIVE
        assert Phase.postponed(BreakType.BIG) == Phase.BIG_POSTPONED


class TestSchedulerState:
    def test_reset_keeps_other_break(self):
        state = SchedulerState(
            tiny_since_last=600,
            big_since_last=900,
            tiny_postponements=1,
            big_postponements=2,
            tiny_covered=300,
        )

        state.reset(BreakType.TINY)

        assert state.tiny_since_last == 0
        assert state.tiny_postponements == 0
        assert state.tiny_covered == 0
        assert state.big_since_last == 900
        assert state.big_postponements == 2

    def test_copy(self):
        state = SchedulerState(tiny_since_last=10)

        copy = state.copy()
        copy.tiny_since_last = 20

        assert state.tiny_since_last == 10


class TestEventHook:
    def test_fire(self):
        first = mock.Mock()
        second = mock.Mock()
        hook = EventHook()
        hook += first
        hook += second

        hook.fire(Phase.WORKING, Phase.SUSPENDED)

        first.assert_called_once_with(Phase.WORKING, Phase.SUSPENDED)
        second.assert_called_once_with(Phase.WORKING, Phase.SUSPENDED)

    def test_remove(self):
        handler = mock.Mock()
        hook = EventHook()
        hook += handler
        hook -= handler

        hook.fire()

        handler.assert_not_called()
