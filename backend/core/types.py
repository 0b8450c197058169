"""
Core immutable types for the SR6 emulator.

Axis identifiers, move kinds and parsed protocol commands.
All command types are frozen dataclasses so a parsed line can be
inspected and replayed without risk of mutation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Value Domain
# =============================================================================

# Fixed-point axis values are 4 ASCII digits: 0000..9999
VALUE_DIGITS = 4
VALUE_MIN = 0
VALUE_MAX = 9999


# I/S parameters saturate at 9 significant digits (~11.5 days in ms)
PARAM_DIGITS = 9
PARAM_MAX = 10 ** PARAM_DIGITS - 1


def clamp_value(value: float) -> int:
    """Round and clamp a value into the 0..9999 axis domain."""
    return max(VALUE_MIN, min(VALUE_MAX, int(round(value))))


# =============================================================================
# Axis Identifiers
# =============================================================================


class AxisGroup(Enum):
    """Semantic channel group of an axis."""
    LINEAR = "L"
    ROTARY = "R"


class AxisId(Enum):
    """
    The six fixed SR6 motion channels.

    - L0: stroke (up/down)
    - L1: surge (forward/back)
    - L2: sway (left/right)
    - R0: twist
    - R1: roll
    - R2: pitch
    """
    L0 = "L0"
    L1 = "L1"
    L2 = "L2"
    R0 = "R0"
    R1 = "R1"
    R2 = "R2"

    @property
    def group(self) -> AxisGroup:
        return AxisGroup(self.value[0])

    @property
    def index(self) -> int:
        return int(self.value[1])

    @property
    def label(self) -> str:
        """Human readable channel name."""
        return AXIS_LABELS[self]

    @classmethod
    def parse(cls, name: str) -> Optional[AxisId]:
        """Look up an axis by its exact two-character name, None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


AXIS_LABELS = {
    AxisId.L0: "stroke",
    AxisId.L1: "surge",
    AxisId.L2: "sway",
    AxisId.R0: "twist",
    AxisId.R1: "roll",
    AxisId.R2: "pitch",
}

ALL_AXES = tuple(AxisId)


# =============================================================================
# Move Types
# =============================================================================


class MoveKind(Enum):
    """How an axis travels to a new target."""
    IMMEDIATE = ""
    INTERPOLATE = "I"  # reach target after a duration (ms)
    SPEED = "S"        # advance toward target at a fixed rate

    @classmethod
    def from_letter(cls, letter: str) -> Optional[MoveKind]:
        """Map an extension letter ('I' or 'S') to a move kind."""
        if letter == cls.INTERPOLATE.value:
            return cls.INTERPOLATE
        if letter == cls.SPEED.value:
            return cls.SPEED
        return None


class AxisState(Enum):
    IDLE = "idle"
    MOVING = "moving"


@dataclass(frozen=True)
class Extension:
    """Motion extension attached to a command: I<duration> or S<speed>."""
    kind: MoveKind
    param: int

    def __post_init__(self):
        if self.kind is MoveKind.IMMEDIATE:
            raise ValueError("Extension kind must be INTERPOLATE or SPEED")
        if self.param < 0:
            raise ValueError(f"Extension param must be non-negative, got {self.param}")
        if self.param > PARAM_MAX:
            raise ValueError(f"Extension param must be at most {PARAM_MAX}, got {self.param}")

    def to_wire(self) -> str:
        return f"{self.kind.value}{self.param}"


@dataclass(frozen=True)
class ParsedCommand:
    """
    One decoded protocol token.

    raw_value is always in [0, 9999], already zero-padded on the right
    (token "5" decodes to 5000).
    """
    axis: AxisId
    raw_value: int
    extension: Optional[Extension] = None

    def __post_init__(self):
        if not (VALUE_MIN <= self.raw_value <= VALUE_MAX):
            raise ValueError(
                f"raw_value={self.raw_value} out of range [{VALUE_MIN}, {VALUE_MAX}]"
            )

    @property
    def kind(self) -> MoveKind:
        return self.extension.kind if self.extension else MoveKind.IMMEDIATE

    @property
    def param(self) -> int:
        return self.extension.param if self.extension else 0

    @property
    def normalized(self) -> float:
        """Target as a fraction of full range."""
        return self.raw_value / VALUE_MAX

    def to_wire(self) -> str:
        """Encode back into a full-precision protocol token."""
        token = f"{self.axis.value}{self.raw_value:0{VALUE_DIGITS}d}"
        if self.extension:
            token += self.extension.to_wire()
        return token
