"""
Serial Transport - Single responsibility: serial communication

Reads raw bytes from a (virtual) serial port and decodes them
incrementally, so a multibyte character split across two reads is
delivered intact. Blocking reads run on a worker thread; chunks are
handed back to the event loop that owns the emulator.
"""

import asyncio
import codecs
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import serial

from .config import DEFAULT_BAUD_RATE
from .logger import log_serial, log_ok, log_info


DEFAULT_TIMEOUT = 0.05
DEFAULT_READ_SIZE = 256


@dataclass
class SerialConfig:
    baud_rate: int = DEFAULT_BAUD_RATE
    timeout: float = DEFAULT_TIMEOUT
    read_size: int = DEFAULT_READ_SIZE
    encoding: str = "utf-8"
    log_io: bool = False


class SerialTransport:
    """
    Handles raw serial communication with the device.

    connect() accepts device paths as well as pyserial URLs
    (e.g. "loop://", "socket://host:port").
    """

    def __init__(self, config: Optional[SerialConfig] = None):
        self.config = config or SerialConfig()
        self._serial: Optional[serial.SerialBase] = None
        self._connected = False
        self._port: Optional[str] = None
        self._decoder = codecs.getincrementaldecoder(self.config.encoding)(errors="replace")

    @property
    def port(self) -> Optional[str]:
        return self._port

    def connect(self, port: str) -> bool:
        """Open the serial port"""
        try:
            self._serial = serial.serial_for_url(
                port,
                baudrate=self.config.baud_rate,
                timeout=self.config.timeout,
            )
        except (serial.SerialException, ValueError) as e:
            self._connected = False
            raise ConnectionError(f"Failed to open {port}: {e}") from e

        self._port = port
        self._decoder.reset()
        self._connected = True
        log_ok(f"Opened {port}", {"baud": self.config.baud_rate})
        return True

    def disconnect(self) -> None:
        """Close the serial port"""
        port, self._serial = self._serial, None
        self._connected = False
        if port:
            port.close()
            log_info(f"Closed {self._port}")

    def read_chunk(self) -> str:
        """
        Read whatever bytes are available (blocks up to the timeout).

        Returns an empty string when nothing arrived.
        """
        port = self._serial
        if not port or not self._connected:
            raise ConnectionError("Not connected")

        try:
            waiting = port.in_waiting
            data = port.read(max(1, min(waiting, self.config.read_size)))
        except serial.SerialException as e:
            if self._serial is None:
                # closed by disconnect() while this read was blocked
                return ""
            self._connected = False
            raise ConnectionError(f"Serial read failed on {self._port}: {e}") from e

        text = self._decoder.decode(data)
        if text and self.config.log_io:
            log_serial("<<<", text)
        return text

    def write(self, text: str) -> None:
        """Write text to the port (loopback and echo use)."""
        if not self._serial or not self._connected:
            raise ConnectionError("Not connected")
        if self.config.log_io:
            log_serial(">>>", text)
        self._serial.write(text.encode(self.config.encoding))

    def write_raw(self, data: bytes) -> None:
        """Write raw bytes"""
        if not self._serial:
            raise ConnectionError("Not connected")
        self._serial.write(data)

    async def chunks(self) -> AsyncIterator[str]:
        """
        Yield decoded chunks until the port is closed.

        Reads happen on a worker thread so the event loop keeps running.
        """
        while self._connected:
            text = await asyncio.to_thread(self.read_chunk)
            if text:
                yield text

    @property
    def is_connected(self) -> bool:
        return self._connected
