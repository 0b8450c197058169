"""
Unit tests for the Axis motion state machine.

All times are milliseconds.
"""

import pytest

from core.axis import Axis
from core.config import AxisConfig
from core.types import AxisId, AxisState, MoveKind, PARAM_MAX, VALUE_MAX


@pytest.fixture
def axis() -> Axis:
    return Axis(AxisId.L0)


class TestInitialState:
    """A fresh axis sits at zero."""

    def test_starts_at_zero(self, axis):
        assert axis.get_resolved_position(0) == 0
        assert axis.target == 0

    def test_starts_idle(self, axis):
        assert axis.state(0) is AxisState.IDLE
        assert not axis.is_moving(1000)


class TestImmediateMove:
    """Plain commands snap to the target."""

    def test_snaps(self, axis):
        axis.set(5000, now=10)
        assert axis.get_resolved_position(10) == 5000
        assert axis.state(10) is AxisState.IDLE

    def test_repeated_reads_identical(self, axis):
        """Reads never change state."""
        axis.set(1234, now=0)
        reads = [axis.get_resolved_position(t) for t in (0, 0, 50, 1e6)]
        assert reads == [1234] * 4

    def test_clamps_target(self, axis):
        axis.set(12000, now=0)
        assert axis.get_resolved_position(0) == VALUE_MAX
        axis.set(-5, now=0)
        assert axis.get_resolved_position(0) == 0


class TestTimedMove:
    """I extension: linear interpolation over a duration."""

    def test_interpolates_linearly(self, axis):
        axis.set(1000, MoveKind.INTERPOLATE, 1000, now=0)
        assert axis.get_resolved_position(0) == 0
        assert axis.get_resolved_position(250) == 250
        assert axis.get_resolved_position(500) == 500

    def test_reaches_target_at_duration(self, axis):
        axis.set(1000, MoveKind.INTERPOLATE, 1000, now=0)
        assert axis.get_resolved_position(1000) == 1000
        assert axis.get_resolved_position(5000) == 1000

    def test_moving_then_idle(self, axis):
        axis.set(1000, MoveKind.INTERPOLATE, 1000, now=0)
        assert axis.state(999) is AxisState.MOVING
        assert axis.state(1000) is AxisState.IDLE

    def test_downward_move(self, axis):
        axis.set(8000, now=0)
        axis.set(4000, MoveKind.INTERPOLATE, 400, now=100)
        assert axis.get_resolved_position(200) == 7000
        assert axis.get_resolved_position(500) == 4000

    def test_read_before_command_time(self, axis):
        """A clock reading earlier than the command resolves to the start."""
        axis.set(1000, MoveKind.INTERPOLATE, 1000, now=500)
        assert axis.get_resolved_position(100) == 0

    def test_zero_duration_is_immediate(self, axis):
        axis.set(3000, MoveKind.INTERPOLATE, 0, now=0)
        assert axis.get_resolved_position(0) == 3000
        assert axis.mode is MoveKind.IMMEDIATE


class TestSpeedMove:
    """S extension: constant rate, units per 100 ms by default."""

    def test_advances_at_rate(self, axis):
        axis.set(1000, MoveKind.SPEED, 50, now=0)
        assert axis.get_resolved_position(1000) == 500

    def test_arrives_and_stops(self, axis):
        axis.set(1000, MoveKind.SPEED, 50, now=0)
        assert axis.get_resolved_position(2000) == 1000
        assert axis.get_resolved_position(10_000) == 1000

    def test_arrival_time(self, axis):
        axis.set(1000, MoveKind.SPEED, 50, now=0)
        assert axis.arrival_time() == pytest.approx(2000)
        assert axis.is_moving(1999)
        assert not axis.is_moving(2000)

    def test_downward(self, axis):
        axis.set(9000, now=0)
        axis.set(1000, MoveKind.SPEED, 100, now=0)
        assert axis.get_resolved_position(1000) == 8000

    def test_zero_speed_is_immediate(self, axis):
        axis.set(3000, MoveKind.SPEED, 0, now=0)
        assert axis.get_resolved_position(0) == 3000
        assert axis.state(0) is AxisState.IDLE

    def test_custom_speed_period(self):
        axis = Axis(AxisId.R0, AxisConfig(speed_period_ms=1.0))
        axis.set(1000, MoveKind.SPEED, 10, now=0)
        assert axis.get_resolved_position(50) == 500

    def test_invalid_speed_period(self):
        with pytest.raises(ValueError):
            AxisConfig(speed_period_ms=0)


class TestOverride:
    """A new command replaces the move in flight."""

    def test_starts_from_resolved_position(self, axis):
        axis.set(1000, MoveKind.INTERPOLATE, 1000, now=0)
        axis.set(0, MoveKind.INTERPOLATE, 1000, now=500)
        assert axis.start == 500
        assert axis.get_resolved_position(500) == 500
        assert axis.get_resolved_position(1000) == 250
        assert axis.get_resolved_position(1500) == 0

    def test_immediate_cancels_move(self, axis):
        axis.set(9000, MoveKind.SPEED, 10, now=0)
        axis.set(2000, now=100)
        assert axis.get_resolved_position(100) == 2000
        assert axis.get_resolved_position(100_000) == 2000

    def test_speed_after_timed(self, axis):
        axis.set(2000, MoveKind.INTERPOLATE, 200, now=0)
        axis.set(0, MoveKind.SPEED, 100, now=100)
        # resolved 1000 at t=100, then 100 units per 100 ms downward
        assert axis.get_resolved_position(600) == 500


class TestCommandArguments:
    """Argument handling on set()."""

    def test_now_is_required(self, axis):
        """Omitting the command time is an error, not t=0."""
        with pytest.raises(TypeError):
            axis.set(5000)  # type: ignore[call-arg]

    @pytest.mark.parametrize("kind", [MoveKind.INTERPOLATE, MoveKind.SPEED])
    def test_param_saturates(self, axis, kind):
        axis.set(9999, kind, 10 ** 400, now=0)
        assert axis.param == PARAM_MAX
        assert axis.arrival_time() >= 0
        assert 0 <= axis.get_resolved_position(1e12) <= 9999
