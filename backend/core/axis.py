"""
Axis - motion state machine for a single channel.

An axis is Idle (resolved position == target) or Moving toward its target.
The resolved position is computed lazily from the last command and the
caller-supplied time, so reading never changes state and the same
(state, now) pair always gives the same answer.

Time is in milliseconds throughout.
"""

from __future__ import annotations

import math
from typing import Optional

from .config import AxisConfig
from .types import AxisId, AxisState, MoveKind, PARAM_MAX, VALUE_MAX, clamp_value


class Axis:
    """
    One motion channel.

    Supports three move kinds:
    - IMMEDIATE: snap to the target
    - INTERPOLATE: linear travel that arrives after `param` ms
    - SPEED: linear travel at `param` units per speed period

    A new set() always overrides the move in flight, starting from
    wherever the axis resolves to at that moment.
    """

    def __init__(self, axis_id: AxisId, config: Optional[AxisConfig] = None):
        self._id = axis_id
        self._config = config or AxisConfig()
        self._start: int = 0
        self._target: int = 0
        self._mode: MoveKind = MoveKind.IMMEDIATE
        self._param: int = 0
        self._commanded_at: float = 0.0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def axis_id(self) -> AxisId:
        return self._id

    @property
    def target(self) -> int:
        """Destination of the current move."""
        return self._target

    @property
    def start(self) -> int:
        """Position the current move started from."""
        return self._start

    @property
    def mode(self) -> MoveKind:
        return self._mode

    @property
    def param(self) -> int:
        """Duration (ms) or speed of the current move, 0 when immediate."""
        return self._param

    @property
    def commanded_at(self) -> float:
        return self._commanded_at

    # =========================================================================
    # Commands
    # =========================================================================

    def set(
        self,
        value: int,
        kind: MoveKind = MoveKind.IMMEDIATE,
        param: int = 0,
        *,
        now: float,
    ) -> None:
        """
        Start a new move toward `value` at time `now`.

        A zero duration or speed is treated as an immediate move. Parameters
        above PARAM_MAX saturate.
        """
        value = clamp_value(value)
        param = min(param, PARAM_MAX)
        origin = self.get_resolved_position(now)

        if kind is MoveKind.IMMEDIATE or param <= 0:
            kind = MoveKind.IMMEDIATE
            param = 0
            origin = value

        self._start = origin
        self._target = value
        self._mode = kind
        self._param = param
        self._commanded_at = now

    # =========================================================================
    # Queries
    # =========================================================================

    def get_resolved_position(self, now: float) -> int:
        """
        Position at time `now`, in the 0..9999 domain.

        Never reports a value outside [min(start, target), max(start, target)].
        """
        if self._mode is MoveKind.IMMEDIATE:
            return self._target

        elapsed = max(0.0, now - self._commanded_at)
        delta = self._target - self._start

        if self._mode is MoveKind.INTERPOLATE:
            if elapsed >= self._param:
                return self._target
            value = self._start + delta * (elapsed / self._param)
        else:
            travel = self._param * elapsed / self._config.speed_period_ms
            if travel >= abs(delta):
                return self._target
            value = self._start + math.copysign(travel, delta)

        low, high = sorted((self._start, self._target))
        return max(low, min(high, clamp_value(value)))

    def arrival_time(self) -> float:
        """Time at which the current move reaches its target."""
        if self._mode is MoveKind.INTERPOLATE:
            return self._commanded_at + self._param
        if self._mode is MoveKind.SPEED:
            distance = abs(self._target - self._start)
            return self._commanded_at + distance * self._config.speed_period_ms / self._param
        return self._commanded_at

    def is_moving(self, now: float) -> bool:
        return now < self.arrival_time()

    def state(self, now: float) -> AxisState:
        return AxisState.MOVING if self.is_moving(now) else AxisState.IDLE

    def normalized(self, now: float) -> float:
        """Resolved position as a fraction of full range."""
        return self.get_resolved_position(now) / VALUE_MAX

    def __repr__(self) -> str:
        return (
            f"Axis({self._id.value}, start={self._start}, target={self._target}, "
            f"mode={self._mode.name}, param={self._param})"
        )
