"""Abstract byte port with read and write loops built on top."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .status import A113Error, Status


class Port(ABC):
    """A bidirectional byte stream."""

    @abstractmethod
    def read(self, size: int, fail_if_not_all: bool = False) -> bytes:
        """Read up to ``size`` bytes."""

    @abstractmethod
    def write(self, data: bytes, fail_if_not_all: bool = False) -> int:
        """Write ``data`` and return the number of bytes written."""

    def read_exactly(self, size: int) -> bytes:
        """Read until ``size`` bytes arrived; raise if the port stalls."""
        if size < 0:
            raise ValueError("size must not be negative")
        received = bytearray()
        while len(received) < size:
            chunk = self.read(size - len(received))
            if not chunk:
                raise A113Error(
                    Status.FLOW, f"read stalled after {len(received)} of {size} bytes"
                )
            received += chunk
        return bytes(received)

    def write_all(self, data: bytes) -> int:
        """Write every byte of ``data``; raise if the port stalls."""
        payload = bytes(data)
        sent = 0
        while sent < len(payload):
            count = self.write(payload[sent:])
            if count <= 0:
                raise A113Error(
                    Status.FLOW, f"write stalled after {sent} of {len(payload)} bytes"
                )
            sent += count
        return sent