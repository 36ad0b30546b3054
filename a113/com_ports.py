"""Dispensed list of the serial ports present on the system."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from serial.tools import list_ports

from .core import LogComponent, get_logger
from .dispenser import Dispenser, DispenserMode
from .status import A113Error, Status

_log = get_logger(LogComponent.IO)
_COM_NUMBER = re.compile(r"COM(\d*)")


@dataclass
class ComPort:
    id: str
    friendly: str


@dataclass
class ComPortsConfig:
    allow_refresh_callback_overwrite: bool = False
    clear_container_on_failed_refresh: bool = True


RefreshCallback = Callable[[List[ComPort]], None]
Enumerator = Callable[[], Iterable[ComPort]]


def _com_id(friendly: str) -> Optional[str]:
    """Take the id from the last "COM<digits>" in a friendly name."""
    numbers = _COM_NUMBER.findall(friendly)
    if not numbers:
        return None
    return "COM" + numbers[-1]


def _system_ports() -> List[ComPort]:
    found = []
    for info in list_ports.comports():
        friendly = info.description or info.device
        found.append(ComPort(id=_com_id(friendly) or info.device, friendly=friendly))
    return found


class ComPorts(Dispenser[List[ComPort]]):
    """Keeps the list of present serial ports and tells listeners when it changes."""

    def __init__(
        self,
        mode: DispenserMode = DispenserMode.LOCK,
        config: Optional[ComPortsConfig] = None,
        refresh: bool = True,
        enumerator: Optional[Enumerator] = None,
    ) -> None:
        super().__init__(list, mode)
        self.port_config = config if config is not None else ComPortsConfig()
        self._enumerator: Enumerator = enumerator if enumerator is not None else _system_ports
        self._callbacks: Dict[str, RefreshCallback] = {}
        self._callbacks_lock = threading.RLock()
        if refresh:
            self.refresh()

    def refresh(self) -> "ComPorts":
        """Enumerate the ports again, run the callbacks, and publish the list."""
        ctl = self.control()
        try:
            ports = ctl.get()
            try:
                found = list(self._enumerator())
            except (OSError, A113Error) as exc:
                if not self.port_config.clear_container_on_failed_refresh:
                    ctl.drop()
                    _log.error("Bad COM ports refresh: %s [%s]", exc, Status.SYSCALL.name)
                    return self
                ports.clear()
                found = []
            else:
                ports[:] = found
            with self._callbacks_lock:
                for key in sorted(self._callbacks):
                    self._callbacks[key](ports)
        finally:
            ctl.release()

        if found:
            _log.info("COM ports refreshed, found [%d] port(s).", len(found))
        else:
            _log.info("COM ports refreshed, no ports found.")
        return self

    def register_refresh_callback(self, key: str, callback: RefreshCallback) -> None:
        """Run ``callback`` on the port list at every refresh."""
        with self._callbacks_lock:
            if key in self._callbacks and not self.port_config.allow_refresh_callback_overwrite:
                raise A113Error(Status.WOULD_OVRWR, f"refresh callback {key!r} already registered")
            self._callbacks[key] = callback

    def unregister_refresh_callback(self, key: str) -> None:
        """Forget the callback registered under ``key``, if any."""
        with self._callbacks_lock:
            self._callbacks.pop(key, None)