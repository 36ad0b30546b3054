"""Serial port opened and configured in one step."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import serial

from .core import LogComponent, get_logger
from .port import Port
from .status import A113Error, Status

_log = get_logger(LogComponent.IO)


class Parity(Enum):
    NONE = serial.PARITY_NONE
    ODD = serial.PARITY_ODD
    EVEN = serial.PARITY_EVEN
    MARK = serial.PARITY_MARK
    SPACE = serial.PARITY_SPACE


class StopBits(Enum):
    ONE = serial.STOPBITS_ONE
    ONE_HALF = serial.STOPBITS_ONE_POINT_FIVE
    TWO = serial.STOPBITS_TWO


@dataclass
class SerialConfig:
    """Line settings; timeouts are in milliseconds."""

    baud_rate: int = 0
    rx_fb_timeout: int = 1000
    rx_ib_timeout: int = 10
    tx_timeout: int = 1000
    byte_size: int = 8
    parity: Parity = Parity.NONE
    stopbit: StopBits = StopBits.ONE
    purge_on_open: bool = True
    purge_on_close: bool = False


class Serial(Port):
    """A serial device usable as a byte port."""

    def __init__(self, device: Optional[str] = None, config: Optional[SerialConfig] = None) -> None:
        self._port: Optional[Any] = None
        self._device = ""
        self._config = SerialConfig()
        if device is not None:
            self.open(device, config)

    @property
    def native_handle(self) -> Optional[Any]:
        return self._port

    @property
    def device(self) -> str:
        return self._device

    @property
    def config(self) -> SerialConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._port is not None

    def open(self, device: str, config: Optional[SerialConfig] = None) -> None:
        """Open ``device`` with ``config``, closing any port already open."""
        config = config if config is not None else SerialConfig()
        if self._port is not None:
            self.close()

        try:
            port = serial.serial_for_url(device, do_not_open=True)
            port.baudrate = int(config.baud_rate)
            port.bytesize = config.byte_size
            port.parity = Parity(config.parity).value
            port.stopbits = StopBits(config.stopbit).value
            port.timeout = config.rx_fb_timeout / 1000.0
            port.inter_byte_timeout = config.rx_ib_timeout / 1000.0
            port.write_timeout = config.tx_timeout / 1000.0
            port.xonxoff = False
            port.rtscts = False
            port.dsrdtr = False
        except ValueError as exc:
            _log.error("Could not configure the serial port \"%s\": %s", device, exc)
            raise A113Error(Status.GENERAL, f"could not configure serial port {device!r}") from exc
        except (serial.SerialException, OSError) as exc:
            _log.error("Could not open serial port \"%s\": %s", device, exc)
            raise A113Error(Status.SYSCALL, f"could not open serial port {device!r}") from exc

        try:
            port.open()
        except ValueError as exc:
            port.close()
            _log.error("Could not configure the serial port \"%s\": %s", device, exc)
            raise A113Error(Status.GENERAL, f"could not configure serial port {device!r}") from exc
        except (serial.SerialException, OSError) as exc:
            port.close()
            _log.error("Could not open serial port \"%s\": %s", device, exc)
            raise A113Error(Status.SYSCALL, f"could not open serial port {device!r}") from exc

        self._port = port
        self._device = device
        self._config = config
        if config.purge_on_open:
            try:
                self.purge()
            except A113Error:
                pass
        _log.info(
            "Opened and configured serial port \"%s\" successfully @%sbauds.",
            self._device,
            self._config.baud_rate,
        )

    def close(self) -> None:
        """Close the port if it is open."""
        if self._port is None:
            return
        if self._config.purge_on_close:
            try:
                self.purge()
            except A113Error:
                pass
        port, self._port = self._port, None
        port.close()
        _log.info("Closed serial port \"%s\".", self._device)
        self._device = ""
        self._config = SerialConfig()

    def _require_open(self) -> Any:
        if self._port is None:
            raise A113Error(Status.OPEN, "serial port is not open")
        return self._port

    def read(self, size: int, fail_if_not_all: bool = False) -> bytes:
        """Read up to ``size`` bytes within the configured timeouts."""
        port = self._require_open()
        try:
            data = port.read(size)
        except (serial.SerialException, OSError) as exc:
            raise A113Error(Status.SYSCALL, f"read failed on {self._device!r}") from exc
        if fail_if_not_all and len(data) != size:
            raise A113Error(Status.FLOW, f"read {len(data)} of {size} bytes")
        return bytes(data)

    def write(self, data: bytes, fail_if_not_all: bool = False) -> int:
        """Write ``data`` and return how many bytes went out."""
        port = self._require_open()
        payload = bytes(data)
        try:
            count = port.write(payload) or 0
        except serial.SerialTimeoutException:
            count = 0
        except (serial.SerialException, OSError) as exc:
            raise A113Error(Status.SYSCALL, f"write failed on {self._device!r}") from exc
        if fail_if_not_all and count != len(payload):
            raise A113Error(Status.GENERAL, f"wrote {count} of {len(payload)} bytes")
        return count

    def rx_available(self) -> int:
        """Number of bytes waiting to be read."""
        port = self._require_open()
        try:
            return int(port.in_waiting)
        except (serial.SerialException, OSError) as exc:
            raise A113Error(Status.SYSCALL, f"could not query {self._device!r}") from exc

    def purge(self) -> None:
        """Discard everything pending in both directions."""
        port = self._require_open()
        try:
            port.reset_input_buffer()
            port.reset_output_buffer()
        except (serial.SerialException, OSError) as exc:
            _log.warning("Could not purge serial port \"%s\": %s", self._device, exc)
            raise A113Error(Status.GENERAL, f"could not purge {self._device!r}") from exc

    def __enter__(self) -> "Serial":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()