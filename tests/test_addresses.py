import pytest

from a113.addresses import bt_from_str, bt_to_str, ipv4_from_str, ipv4_to_str


@pytest.mark.parametrize("addr", [0, 0xFFFFFFFF, 0x0100007F, 0x12345678, 0xC0A80114])
def test_ipv4_binary_round_trip(addr):
    assert ipv4_from_str(ipv4_to_str(addr)) == addr


@pytest.mark.parametrize("text", ["127.0.0.1", "192.168.1.20", "0.0.0.0", "255.255.255.255"])
def test_ipv4_text_round_trip(text):
    assert ipv4_to_str(ipv4_from_str(text)) == text


def test_ipv4_loopback_text():
    assert ipv4_to_str(0x0100007F) == "127.0.0.1"


def test_ipv4_zero_text():
    assert ipv4_to_str(0) == "0.0.0.0"


@pytest.mark.parametrize("text", ["", "1", "1.2", "1.2.3"])
def test_ipv4_too_few_parts_is_zero(text):
    assert ipv4_from_str(text) == 0


def test_ipv4_parts_truncate_to_a_byte():
    assert ipv4_from_str("256.0.0.0") == ipv4_from_str("0.0.0.0")


def test_ipv4_extra_parts_ignored():
    assert ipv4_from_str("10.0.0.1.99") == ipv4_from_str("10.0.0.1")


def test_ipv4_first_octet_in_low_byte():
    assert ipv4_from_str("7.0.0.0") == 7


def test_ipv4_out_of_range_raises():
    with pytest.raises(OverflowError):
        ipv4_to_str(1 << 32)


def test_bt_zero_text():
    assert bt_to_str(bytes(6)) == "00:00:00:00:00:00"


def test_bt_upper_and_lower():
    addr = bytes([0xDE, 0xAD, 0xBE, 0xEF, 0x00, 0x01])
    assert bt_to_str(addr) == "DE:AD:BE:EF:00:01"
    assert bt_to_str(addr, upper=False) == bt_to_str(addr).lower()


def test_bt_wrong_length_raises():
    with pytest.raises(ValueError):
        bt_to_str(bytes(5))


def test_bt_from_decimal_fields():
    assert bt_from_str("1:2:3:4:5:6") == bytes([1, 2, 3, 4, 5, 6])


def test_bt_digit_only_round_trip():
    addr = bytes([1, 2, 3, 4, 5, 9])
    assert bt_from_str(bt_to_str(addr)) == addr


def test_bt_bad_text_is_zero():
    assert bt_from_str("zz") == bytes(6)
    assert bt_from_str("1:2:3:4:5") == bytes(6)


def test_bt_fields_truncate_to_a_byte():
    assert bt_from_str("256:1:1:1:1:1") == bt_from_str("0:1:1:1:1:1")