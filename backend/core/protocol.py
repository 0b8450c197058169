"""
Protocol parser - Single responsibility: turning text tokens into commands.

Wire format (one line per command batch, delimiter = line feed):

    <AxisId><value>[<I|S><param>] [<next token> ...]\\n

Values are fixed-point: at most the first 4 digits are used and missing
low-order digits are zero, so "5" means 5000 and "73005" means 7300.
I/S parameters are plain integers, saturated at PARAM_MAX.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .types import (
    AxisId,
    Extension,
    MoveKind,
    PARAM_DIGITS,
    PARAM_MAX,
    ParsedCommand,
    VALUE_DIGITS,
    clamp_value,
)


AXIS_PATTERN = "|".join(axis.value for axis in AxisId)

COMMAND_REGEX = re.compile(rf"^({AXIS_PATTERN})([0-9]+)$")
COMMAND_EXTENSION_REGEX = re.compile(rf"^({AXIS_PATTERN})([0-9]+)(I|S)([0-9]+)$")


def decode_value(digits: str) -> int:
    """
    Decode a fixed-point digit run.

    Uses the first 4 characters, right-padded with '0'.
    """
    return clamp_value(int(digits[:VALUE_DIGITS].ljust(VALUE_DIGITS, "0")))


def decode_param(digits: str) -> int:
    """
    Decode an I/S parameter as a plain integer.

    Runs longer than PARAM_DIGITS significant digits saturate at PARAM_MAX.
    """
    significant = digits.lstrip("0")
    if len(significant) > PARAM_DIGITS:
        return PARAM_MAX
    return int(significant or "0")


def parse_token(token: str) -> Optional[ParsedCommand]:
    """
    Parse a single whitespace-free token.

    Returns None for anything that is not a valid command; never raises.
    """
    match = COMMAND_REGEX.fullmatch(token)
    if match:
        axis = AxisId.parse(match.group(1))
        if axis is None:
            return None
        return ParsedCommand(axis, decode_value(match.group(2)))

    match = COMMAND_EXTENSION_REGEX.fullmatch(token)
    if match:
        axis = AxisId.parse(match.group(1))
        kind = MoveKind.from_letter(match.group(3))
        if axis is None or kind is None:
            return None
        extension = Extension(kind, decode_param(match.group(4)))
        return ParsedCommand(axis, decode_value(match.group(2)), extension)

    return None


def parse_line(line: str) -> List[ParsedCommand]:
    """Parse every token on a line, dropping the malformed ones."""
    commands = []
    for token in line.strip().split():
        command = parse_token(token)
        if command is not None:
            commands.append(command)
    return commands
