"""
Structured logging for the SR6 emulator.

Prefixes:
  ⚡ CRITICAL - Errors, failures
  ⚠️  WARN     - Warnings, unexpected behavior
  ✓  OK       - Success confirmations
  ℹ  INFO     - General information
  ⬡  SERIAL   - Raw serial I/O
  →  CMD      - Dispatched command lines
  📍 AXIS     - Axis snapshots
"""

from enum import Enum
from typing import Optional
from datetime import datetime


class LogLevel(Enum):
    CRITICAL = "⚡ CRITICAL"
    WARN = "⚠️  WARN    "
    OK = "✓  OK      "
    INFO = "ℹ  INFO    "
    SERIAL = "⬡  SERIAL  "
    CMD = "→  CMD     "
    AXIS = "📍 AXIS    "


def log(level: LogLevel, message: str, data: Optional[dict] = None):
    """Log a message with structured prefix."""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    prefix = level.value

    line = f"[{timestamp}] {prefix} | {message}"
    if data:
        line += f" | {data}"

    print(line)


# Convenience functions
def log_critical(msg: str, data: Optional[dict] = None):
    log(LogLevel.CRITICAL, msg, data)

def log_warn(msg: str, data: Optional[dict] = None):
    log(LogLevel.WARN, msg, data)

def log_ok(msg: str, data: Optional[dict] = None):
    log(LogLevel.OK, msg, data)

def log_info(msg: str, data: Optional[dict] = None):
    log(LogLevel.INFO, msg, data)

def log_serial(direction: str, data: str):
    """Log serial I/O. direction is '>>>' (send) or '<<<' (recv)"""
    log(LogLevel.SERIAL, f"{direction} {data!r}")

def log_cmd(msg: str, data: Optional[dict] = None):
    log(LogLevel.CMD, msg, data)

def log_axis(msg: str, data: Optional[dict] = None):
    log(LogLevel.AXIS, msg, data)
