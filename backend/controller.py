"""
Emulator Controller - Main facade for the system.

DeviceController wires one emulated SR6 together: a transport feeding
text into the command router, and a renderer reading the axes back out.
EmulatorApp owns several devices and drives the per-frame polling.

Everything runs on a single asyncio event loop: read loops and the frame
loop interleave at await points, so no locking is needed.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional, Protocol, TYPE_CHECKING

from core.config import EmulatorSettings
from core.logger import log_axis, log_critical, log_info, log_ok
from core.router import CommandRouter
from core.serial_transport import SerialConfig, SerialTransport
from core.transport import ChunkSource, iter_chunks
from core.types import ALL_AXES, AxisId

if TYPE_CHECKING:
    from core.transport import Transport


class Renderer(Protocol):
    """Presentation collaborator polled once per frame."""

    def pre_render(self, device: str, axes: Dict[AxisId, float], scale: Dict[AxisId, float]) -> None:
        ...


class LoggingRenderer:
    """Stand-in renderer that logs every Nth frame of each device."""

    def __init__(self, every: int = 60):
        self.every = max(1, every)
        self._frames: Dict[str, int] = {}

    def pre_render(self, device: str, axes: Dict[AxisId, float], scale: Dict[AxisId, float]) -> None:
        count = self._frames.get(device, 0)
        self._frames[device] = count + 1
        if count % self.every:
            return
        log_axis(device, {axis.value: round(axes[axis] * scale[axis], 4) for axis in ALL_AXES})


class DeviceController:
    """
    One emulated device.

    Provides:
    - write(): feed protocol text directly
    - connect()/attach(): bind a transport
    - run_read_loop(): drain the transport into the router
    - update(): hand the current axes to a renderer
    """

    def __init__(
        self,
        settings: Optional[EmulatorSettings] = None,
        clock: Optional[Callable[[], float]] = None,
        name: str = "device",
    ):
        self._settings = settings or EmulatorSettings()
        self._router = CommandRouter(
            config=self._settings.axis,
            clock=clock,
            log_commands=self._settings.log_commands,
        )
        self._scale: Dict[AxisId, float] = {axis: 1.0 for axis in ALL_AXES}
        self._transport: Optional["Transport"] = None
        self.name = name

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def router(self) -> CommandRouter:
        return self._router

    @property
    def axes(self) -> Dict[AxisId, float]:
        """Normalized position of every axis."""
        return self._router.axes

    @property
    def scale(self) -> Dict[AxisId, float]:
        """Per-axis presentation multiplier."""
        return dict(self._scale)

    def set_scale(self, axis: AxisId, value: float) -> None:
        self._scale[axis] = value

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and self._transport.is_connected

    # =========================================================================
    # Input
    # =========================================================================

    def write(self, text: str) -> None:
        """Feed protocol text, as if it arrived from the transport."""
        self._router.write(text)

    def attach(self, transport: "Transport") -> None:
        """Use an already-open transport as this device's input."""
        self._transport = transport

    def connect(self, port: str) -> bool:
        """Open a serial port and use it as this device's input."""
        transport = SerialTransport(SerialConfig(baud_rate=self._settings.baud_rate))
        transport.connect(port)
        self.attach(transport)
        return True

    def disconnect(self) -> None:
        if self._transport is not None:
            self._transport.disconnect()
        self._transport = None

    async def run_read_loop(self, source: Optional[ChunkSource] = None) -> None:
        """
        Feed chunks into the router until end-of-stream.

        Uses the attached transport when no source is given. A transport
        failure is logged once and ends the loop; there is no reconnect.
        """
        owned = source is None
        if owned:
            source = self._transport
        if source is None:
            raise RuntimeError(f"{self.name}: no transport attached")

        try:
            async for chunk in iter_chunks(source):
                self.write(chunk)
        except (ConnectionError, OSError) as e:
            log_critical(f"{self.name}: transport failed, read loop stopped", {"error": str(e)})
        else:
            log_info(f"{self.name}: end of stream")
        finally:
            if owned:
                self.disconnect()

    # =========================================================================
    # Output
    # =========================================================================

    def update(self, renderer: Renderer) -> None:
        """Hand the current axes and scale to the renderer."""
        renderer.pre_render(self.name, self.axes, self.scale)


class EmulatorApp:
    """
    Multi-device emulator.

    Owns `settings.device_count` devices (two by default) and polls each of
    them once per frame.
    """

    def __init__(
        self,
        settings: Optional[EmulatorSettings] = None,
        renderer: Optional[Renderer] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._settings = settings or EmulatorSettings()
        self._renderer = renderer or LoggingRenderer(every=int(self._settings.frame_rate))
        self._devices: List[DeviceController] = [
            DeviceController(self._settings, clock, name=f"device{i}")
            for i in range(self._settings.device_count)
        ]
        self._frame_count = 0

    @property
    def devices(self) -> List[DeviceController]:
        return list(self._devices)

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def device(self, index: int) -> DeviceController:
        if not 0 <= index < len(self._devices):
            raise IndexError(f"No device {index} (have {len(self._devices)})")
        return self._devices[index]

    def connect_device(self, index: int, port: str) -> bool:
        """Open `port` for device `index`."""
        device = self.device(index)
        device.connect(port)
        log_ok(f"{device.name} connected", {"port": port})
        return True

    def frame(self) -> None:
        """Poll every device once."""
        for device in self._devices:
            device.update(self._renderer)
        self._frame_count += 1

    async def run(self, frames: Optional[int] = None) -> None:
        """Frame loop; runs forever unless `frames` is given."""
        rendered = 0
        while frames is None or rendered < frames:
            self.frame()
            rendered += 1
            await asyncio.sleep(self._settings.frame_interval)

    async def serve(self, frames: Optional[int] = None) -> None:
        """
        Run read loops for all connected devices alongside the frame loop.

        Stops when every read loop has ended or after `frames` frames.
        """
        tasks = [
            asyncio.create_task(device.run_read_loop())
            for device in self._devices
            if device.is_connected
        ]
        rendered = 0
        try:
            while any(not task.done() for task in tasks):
                if frames is not None and rendered >= frames:
                    break
                self.frame()
                rendered += 1
                await asyncio.sleep(self._settings.frame_interval)
            else:
                # final frame shows the state left by the last command
                self.frame()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
