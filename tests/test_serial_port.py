import pytest

from a113.serial_port import Parity, Serial, SerialConfig, StopBits
from a113.status import A113Error, Status


def _config(**kwargs):
    kwargs.setdefault("baud_rate", 9600)
    return SerialConfig(**kwargs)


def test_config_defaults_follow_source():
    config = SerialConfig()
    assert (config.rx_fb_timeout, config.rx_ib_timeout, config.tx_timeout) == (1000, 10, 1000)
    assert config.byte_size == 8
    assert config.parity is Parity.NONE and config.stopbit is StopBits.ONE
    assert config.purge_on_open is True and config.purge_on_close is False


def test_loopback_round_trip():
    with Serial("loop://", _config()) as port:
        assert port.is_connected
        assert port.device == "loop://"
        assert port.write(b"abc") == 3
        assert port.read(3) == b"abc"


def test_rx_available_counts_pending_bytes():
    with Serial("loop://", _config()) as port:
        port.write(b"hello")
        assert port.rx_available() == 5


def test_purge_discards_pending_bytes():
    with Serial("loop://", _config()) as port:
        port.write(b"hello")
        port.purge()
        assert port.rx_available() == 0


def test_short_read_with_fail_if_not_all_is_flow_error():
    with Serial("loop://", _config(rx_fb_timeout=50)) as port:
        port.write(b"ab")
        with pytest.raises(A113Error) as info:
            port.read(5, fail_if_not_all=True)
        assert info.value.status is Status.FLOW


def test_close_resets_state():
    port = Serial("loop://", _config(baud_rate=19200))
    assert port.config.baud_rate == 19200
    port.close()
    assert port.is_connected is False
    assert port.device == ""
    assert port.config == SerialConfig()


def test_reopen_replaces_previous_port():
    port = Serial("loop://", _config())
    first = port.native_handle
    port.open("loop://", _config(baud_rate=4800))
    try:
        assert port.native_handle is not first
        assert port.config.baud_rate == 4800
    finally:
        port.close()


def test_zero_baud_rate_fails_configuration():
    with pytest.raises(A113Error) as info:
        Serial("loop://", SerialConfig())
    assert info.value.status is Status.GENERAL


def test_missing_device_is_syscall_error():
    with pytest.raises(A113Error) as info:
        Serial("/nonexistent/a113-tty", _config())
    assert info.value.status is Status.SYSCALL


def test_read_on_closed_port_is_open_error():
    with pytest.raises(A113Error) as info:
        Serial().read(1)
    assert info.value.status is Status.OPEN