import contextlib
import logging
from unittest import mock

from a113.core import (
    VERSION_STRING,
    InitFlags,
    LogComponent,
    get_logger,
    init,
    set_log_level,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@contextlib.contextmanager
def captured(component):
    logger = get_logger(component)
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)


def test_logger_names():
    assert get_logger(LogComponent.GENERAL).name == VERSION_STRING
    assert get_logger(LogComponent.IO).name == VERSION_STRING + "--I/O"
    assert get_logger(LogComponent.SCT).name == VERSION_STRING + "--SCT"


def test_logger_is_shared():
    assert get_logger(LogComponent.IMM) is get_logger(LogComponent.IMM)
    assert len(get_logger(LogComponent.IMM).handlers) == 1


def test_formatter_uses_lower_level_names():
    logger = get_logger(LogComponent.IO)
    record = logger.makeRecord(logger.name, logging.INFO, __file__, 1, "hi", (), None)
    text = logger.handlers[0].formatter.format(record)
    assert text.startswith("[info] [")
    assert text.endswith(f"[{VERSION_STRING}--I/O] - hi")
    assert record.levelname == "INFO"


def test_set_log_level():
    set_log_level(LogComponent.SCT, logging.DEBUG)
    assert get_logger(LogComponent.SCT).level == logging.DEBUG
    set_log_level(LogComponent.SCT, logging.INFO)
    assert get_logger(LogComponent.SCT).level == logging.INFO


def test_init_without_flags():
    with captured(LogComponent.GENERAL) as records:
        assert init([], InitFlags.NONE) == 0
    messages = [r.getMessage() for r in records]
    assert messages[0].startswith("Hello there from AUTO-A113, version 1.0.3.")
    assert messages[-1] == "Initialization of the operating system plate completed flawlessly."


def test_init_with_sockets():
    with mock.patch("a113.core.socket.socket") as fake_socket:
        with captured(LogComponent.GENERAL) as records:
            assert init(["prog"], InitFlags.SOCKETS) == 0
    fake_socket.return_value.close.assert_called_once()
    messages = [r.getMessage() for r in records]
    assert "Initialization of input/output sockets completed." in messages


def test_init_with_failing_sockets_warns():
    with mock.patch("a113.core.socket.socket", side_effect=OSError("no sockets")):
        with captured(LogComponent.GENERAL) as records:
            assert init(None, InitFlags.SOCKETS) == 1
    warnings = [r.getMessage() for r in records if r.levelno == logging.WARNING]
    assert "Flawed initialization of input/output sockets." in warnings
    assert warnings[-1] == "Initialization of the operating system plate completed with 1 warnings."