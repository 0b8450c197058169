"""
Transport layer - delivers text chunks from a device to the emulator.

Provides:
- Transport protocol (interface)
- MockTransport for testing
- iter_chunks() to read any chunk source the same way
- (SerialTransport in separate file for production)
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterable, List, Optional, Protocol, Union


class Transport(Protocol):
    """Protocol for a text chunk source."""

    def chunks(self) -> AsyncIterator[str]:
        """
        Yield decoded text chunks until end-of-stream.

        Raises ConnectionError if the link fails.
        """
        ...

    @property
    def is_connected(self) -> bool:
        """Check if transport is connected."""
        ...

    def disconnect(self) -> None:
        ...


ChunkSource = Union[Transport, Iterable[str], AsyncIterator[str]]


class MockTransport:
    """
    Mock transport for testing without hardware.

    Delivers a scripted list of chunks, `interval` seconds apart, optionally
    failing part way through to simulate a dropped connection.
    """

    def __init__(
        self,
        chunks: Optional[Iterable[str]] = None,
        fail_after: Optional[int] = None,
        interval: float = 0.0,
    ):
        self.scripted: List[str] = list(chunks or [])
        self.delivered: List[str] = []
        self._fail_after = fail_after
        self.interval = interval
        self._connected: bool = True

    @property
    def chunk_count(self) -> int:
        """Number of chunks delivered."""
        return len(self.delivered)

    def feed(self, chunk: str) -> None:
        """Queue another chunk for delivery."""
        self.scripted.append(chunk)

    async def chunks(self) -> AsyncIterator[str]:
        """Deliver scripted chunks, yielding to the event loop between them."""
        while self.scripted and self._connected:
            if self._fail_after is not None and self.chunk_count >= self._fail_after:
                self._connected = False
                raise ConnectionError("Mock transport dropped")
            chunk = self.scripted.pop(0)
            self.delivered.append(chunk)
            yield chunk
            await asyncio.sleep(self.interval)

    @property
    def is_connected(self) -> bool:
        return self._connected

    def disconnect(self) -> None:
        """Simulate disconnection (ends the chunk stream)."""
        self._connected = False


async def iter_chunks(source: ChunkSource) -> AsyncIterator[str]:
    """Iterate a transport, an async iterator or a plain iterable of chunks."""
    if hasattr(source, "chunks"):
        async for chunk in source.chunks():
            yield chunk
    elif hasattr(source, "__aiter__"):
        async for chunk in source:
            yield chunk
    else:
        for chunk in source:
            yield chunk
            await asyncio.sleep(0)
