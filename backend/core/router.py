"""
Command Router - reassembles streamed text into lines and dispatches them.

Text arrives in arbitrary fragments. Characters accumulate until a line
feed, then the whole line is parsed token by token and each valid command
is applied to its axis. Bad tokens are dropped without affecting the
rest of the line.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

from .axis import Axis
from .config import AxisConfig
from .logger import log_cmd
from .protocol import parse_line
from .types import ALL_AXES, AxisId, VALUE_MAX


LINE_DELIMITER = "\n"


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000.0


class CommandRouter:
    """
    Owns the six axes of one device and the line buffer feeding them.

    The buffer is unbounded: a stream that never sends a line feed keeps
    growing it.
    """

    def __init__(
        self,
        config: Optional[AxisConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        log_commands: bool = False,
    ):
        self._clock = clock or monotonic_ms
        self._log_commands = log_commands
        self._buffer: str = ""
        self._axes: Dict[AxisId, Axis] = {
            axis_id: Axis(axis_id, config) for axis_id in ALL_AXES
        }

    @property
    def pending(self) -> str:
        """Text received since the last line feed."""
        return self._buffer

    def axis(self, axis_id: AxisId) -> Axis:
        return self._axes[axis_id]

    def write(self, fragment: str, now: Optional[float] = None) -> None:
        """
        Feed a text fragment from the transport.

        Each completed line is executed at `now` (defaults to the clock).
        Non-string input is ignored.
        """
        if not isinstance(fragment, str):
            return

        for char in fragment:
            self._buffer += char
            if char == LINE_DELIMITER:
                line = self._buffer
                self._buffer = ""
                self._execute_line(line, self._clock() if now is None else now)

    def _execute_line(self, line: str, now: float) -> None:
        """Parse a line and apply every valid command on it."""
        commands = parse_line(line)
        if self._log_commands and commands:
            log_cmd(" ".join(cmd.to_wire() for cmd in commands))

        for command in commands:
            axis = self._axes.get(command.axis)
            if axis is None:
                continue
            axis.set(command.raw_value, command.kind, command.param, now=now)

    def read_axes(self, now: Optional[float] = None) -> Dict[AxisId, float]:
        """Normalized [0.0, 1.0] position of every axis at `now`."""
        if now is None:
            now = self._clock()
        return {
            axis_id: axis.get_resolved_position(now) / VALUE_MAX
            for axis_id, axis in self._axes.items()
        }

    @property
    def axes(self) -> Dict[AxisId, float]:
        """Normalized position of every axis right now."""
        return self.read_axes()
