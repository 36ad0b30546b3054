"""IPv4 TCP socket port with an explicit peer binding."""

from __future__ import annotations

import socket
import threading
from typing import Optional, Union

from .addresses import ipv4_from_str, ipv4_to_str
from .core import LogComponent, get_logger
from .port import Port
from .status import A113Error, Status

_log = get_logger(LogComponent.IO)
_MSG_WAITALL = getattr(socket, "MSG_WAITALL", 0)


class IPv4TcpSocket(Port):
    """A TCP connection to one peer, made by uplinking or by listening."""

    def __init__(self) -> None:
        self._alive = threading.Event()
        self._sock: Optional[socket.socket] = None
        self._addr = 0
        self._addr_str = ""
        self._port = 0

    @property
    def alive(self) -> bool:
        return self._alive.is_set()

    @property
    def addr(self) -> int:
        return self._addr

    @property
    def addr_str(self) -> str:
        return self._addr_str

    @property
    def port(self) -> int:
        return self._port

    def _peer(self) -> str:
        return f"[{self._addr_str}:{self._port}]"

    def bind_peer(self, addr: Union[int, str], port: int) -> None:
        """Set the peer address and port; refused while a connection is alive."""
        addr_value = ipv4_from_str(addr) if isinstance(addr, str) else int(addr) & 0xFFFFFFFF
        if not 0 <= int(port) <= 0xFFFF:
            raise ValueError(f"port {port!r} out of range")
        if self.alive:
            message = (
                f"Binding another peer whilst alive. {self._peer()} -> "
                f"[{ipv4_to_str(addr_value)}:{port}]"
            )
            _log.error("%s", message)
            raise A113Error(Status.WOULD_OVRWR, message)
        self._sock = None
        self._addr = addr_value
        self._addr_str = ipv4_to_str(addr_value)
        self._port = int(port)
        _log.info("Peer bound. %s", self._peer())

    def uplink(self) -> None:
        """Connect to the bound peer."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError as exc:
            _log.error("Bad socket descriptor on %s: %s", self._peer(), exc)
            raise A113Error(Status.SYSCALL, f"bad socket descriptor on {self._peer()}") from exc
        _log.debug("Uplinking to %s...", self._peer())
        try:
            sock.connect((ipv4_to_str(self._addr), self._port))
        except OSError as exc:
            sock.close()
            _log.error("Bad uplink to %s: %s", self._peer(), exc)
            raise A113Error(Status.SYSCALL, f"bad uplink to {self._peer()}") from exc
        self._sock = sock
        self._alive.set()
        _log.info("Uplinked to %s.", self._peer())

    def downlink(self) -> None:
        """Close the connection and forget the peer."""
        self._alive.clear()
        sock, self._sock = self._sock, None
        if sock is not None:
            try:
                sock.close()
            except OSError as exc:
                _log.error("Bad socket closure on %s: %s", self._peer(), exc)
        self._addr = 0
        self._addr_str = ""
        self._port = 0

    def listen(self) -> None:
        """Wait on the bound port for one peer and accept it."""
        if self._addr != 0:
            message = f"Listening with peer address different from 0.0.0.0 -> {self._peer()}."
            _log.error("%s", message)
            raise A113Error(Status.LOGIC, message)
        try:
            listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError as exc:
            _log.error("Bad socket descriptor on %s: %s", self._peer(), exc)
            raise A113Error(Status.SYSCALL, f"bad socket descriptor on {self._peer()}") from exc
        with listener:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            try:
                listener.bind(("0.0.0.0", self._port))
            except OSError as exc:
                _log.error("Bad socket bind on %s: %s", self._peer(), exc)
                raise A113Error(Status.SYSCALL, f"bad socket bind on {self._peer()}") from exc
            _log.info("Listening on %s...", self._peer())
            try:
                listener.listen(1)
                conn, (host, port) = listener.accept()
            except OSError as exc:
                _log.error("Bad socket acceptance on %s: %s", self._peer(), exc)
                raise A113Error(Status.SYSCALL, f"bad socket acceptance on {self._peer()}") from exc
        self._sock = conn
        self._addr = ipv4_from_str(host)
        self._addr_str = ipv4_to_str(self._addr)
        self._port = port
        self._alive.set()
        _log.info("Accepted %s.", self._peer())

    def _require_sock(self) -> socket.socket:
        if self._sock is None:
            raise A113Error(Status.OPEN, "socket is not connected")
        return self._sock

    def read(self, size: int, fail_if_not_all: bool = False) -> bytes:
        """Receive up to ``size`` bytes, waiting for all of them unless the peer closes."""
        sock = self._require_sock()
        try:
            if _MSG_WAITALL:
                data = sock.recv(size, _MSG_WAITALL)
            else:
                chunks = bytearray()
                while len(chunks) < size:
                    chunk = sock.recv(size - len(chunks))
                    if not chunk:
                        break
                    chunks += chunk
                data = bytes(chunks)
        except OSError as exc:
            raise A113Error(Status.SYSCALL, f"bad receive on {self._peer()}") from exc
        if fail_if_not_all and len(data) != size:
            raise A113Error(Status.FLOW, f"received {len(data)} of {size} bytes")
        return data

    def write(self, data: bytes, fail_if_not_all: bool = False) -> int:
        """Send ``data`` and return how many bytes went out."""
        sock = self._require_sock()
        payload = bytes(data)
        try:
            count = sock.send(payload)
        except OSError as exc:
            raise A113Error(Status.SYSCALL, f"bad send on {self._peer()}") from exc
        if fail_if_not_all and count != len(payload):
            raise A113Error(Status.FLOW, f"sent {count} of {len(payload)} bytes")
        return count

    def __enter__(self) -> "IPv4TcpSocket":
        return self

    def __exit__(self, *args: object) -> None:
        self.downlink()