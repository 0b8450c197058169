"""
SR6 Emulator - Main Entry Point

Connects each emulated device to a serial port and polls the axes at the
configured frame rate, logging snapshots in place of a 3D view.

Run with: python main.py /dev/ttyUSB0 [/dev/ttyUSB1]
          python main.py mock        (built-in demo stream)
"""

import sys
import argparse
import asyncio
from pathlib import Path

# Add backend to path for imports
backend_path = Path(__file__).parent
sys.path.insert(0, str(backend_path))

from controller import EmulatorApp, LoggingRenderer
from core.config import EmulatorSettings
from core.logger import log_warn
from core.transport import MockTransport


MOCK_PORT = "mock"

# Stroke sweep with a slow twist, then a speed-limited return
DEMO_STREAM = [
    "L00000 R05000\n",
    "L09999I1000 R07500I2000\n",
    "L00000S400 R0",
    "2500I2000\n",
    "L05000I500 L19999I500 L20000I500\n",
]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="SR6 motion emulator")
    parser.add_argument("ports", nargs="+", help="serial port or URL per device ('mock' for a demo stream)")
    parser.add_argument("--frames", type=int, default=None, help="stop after this many frames")
    parser.add_argument("--fps", type=float, default=None, help="frame rate (default from SR6_FRAME_RATE)")
    parser.add_argument("--baud", type=int, default=None, help="serial baud rate")
    parser.add_argument("--log-commands", action="store_true", help="log every dispatched command line")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> EmulatorSettings:
    settings = EmulatorSettings.from_env()
    settings.device_count = max(settings.device_count, len(args.ports))
    if args.fps is not None:
        settings.frame_rate = args.fps
    if args.baud is not None:
        settings.baud_rate = args.baud
    if args.log_commands:
        settings.log_commands = True
    return settings


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = build_settings(args)

    print("=" * 50)
    print("  SR6 Motion Emulator")
    print("=" * 50)
    print(f"  Devices: {settings.device_count}")
    print(f"  Frame rate: {settings.frame_rate:.0f} fps")
    print()

    app = EmulatorApp(settings, renderer=LoggingRenderer(every=int(settings.frame_rate)))

    for index, port in enumerate(args.ports):
        if port == MOCK_PORT:
            app.device(index).attach(MockTransport(DEMO_STREAM, interval=1.0))
            continue
        try:
            app.connect_device(index, port)
        except ConnectionError as e:
            log_warn(f"device{index}: {e}")

    try:
        asyncio.run(app.serve(frames=args.frames))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
