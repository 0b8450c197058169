"""
Emulator settings - defaults plus optional overrides from the environment.

Environment variables (a .env file next to backend/ is loaded once):
  SR6_DEVICE_COUNT     number of emulated devices (default 2)
  SR6_FRAME_RATE       renderer polls per second (default 60)
  SR6_BAUD_RATE        serial baud rate (default 115200)
  SR6_LOG_COMMANDS     log every dispatched command line (default off)
  SR6_SPEED_PERIOD_MS  time window of the S extension (default 100)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_DEVICE_COUNT = 2
DEFAULT_FRAME_RATE = 60.0
DEFAULT_BAUD_RATE = 115200

# TCode convention: S<n> means n units per 100 ms
DEFAULT_SPEED_PERIOD_MS = 100.0

_ENV_LOADED = False


def ensure_env_loaded(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once."""
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    if dotenv_path is None:
        dotenv_path = Path(__file__).resolve().parent.parent / ".env"

    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path, override=False)
    _ENV_LOADED = True


def env_bool(name: str, default: bool) -> bool:
    """Return an environment variable interpreted as boolean."""
    ensure_env_loaded()
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def env_float(name: str, default: float) -> float:
    """Return an environment variable as float, default if unset or invalid."""
    ensure_env_loaded()
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_int(name: str, default: int) -> int:
    ensure_env_loaded()
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class AxisConfig:
    """Axis motion settings"""
    speed_period_ms: float = DEFAULT_SPEED_PERIOD_MS

    def __post_init__(self):
        if self.speed_period_ms <= 0:
            raise ValueError(f"speed_period_ms must be positive, got {self.speed_period_ms}")


@dataclass
class EmulatorSettings:
    """Top-level emulator settings"""
    device_count: int = DEFAULT_DEVICE_COUNT
    frame_rate: float = DEFAULT_FRAME_RATE
    baud_rate: int = DEFAULT_BAUD_RATE
    log_commands: bool = False
    axis: AxisConfig = field(default_factory=AxisConfig)

    def __post_init__(self):
        if self.device_count < 1:
            raise ValueError(f"device_count must be at least 1, got {self.device_count}")
        if self.frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {self.frame_rate}")

    @property
    def frame_interval(self) -> float:
        """Seconds between renderer polls."""
        return 1.0 / self.frame_rate

    @classmethod
    def from_env(cls) -> EmulatorSettings:
        """Build settings from SR6_* environment variables."""
        return cls(
            device_count=env_int("SR6_DEVICE_COUNT", DEFAULT_DEVICE_COUNT),
            frame_rate=env_float("SR6_FRAME_RATE", DEFAULT_FRAME_RATE),
            baud_rate=env_int("SR6_BAUD_RATE", DEFAULT_BAUD_RATE),
            log_commands=env_bool("SR6_LOG_COMMANDS", False),
            axis=AxisConfig(
                speed_period_ms=env_float("SR6_SPEED_PERIOD_MS", DEFAULT_SPEED_PERIOD_MS),
            ),
        )
