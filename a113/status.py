"""Status codes shared across the library and the exception that carries them."""

from __future__ import annotations

from enum import IntEnum


class Status(IntEnum):
    """Library status codes; zero is success, failures are negative."""

    OK = 0
    GENERAL = -1
    SYSCALL = -2
    WOULD_OVRWR = -3
    OPEN = -4
    EXCOMCALL = -5
    LOGIC = -6
    USERCALL = -7
    PLATFORMCALL = -8
    BADARG = -9
    FLOW = -10


def status_message(status: int) -> str:
    """Return the short message for a status code."""
    try:
        return Status(status).name
    except ValueError:
        raise ValueError(f"unknown status code {status!r}") from None


class A113Error(Exception):
    """Raised where an operation fails with a library status code."""

    def __init__(self, status: int, message: str = "") -> None:
        self.status = Status(status)
        self.message = message
        text = f"{message} [{self.status.name}]" if message else f"[{self.status.name}]"
        super().__init__(text)