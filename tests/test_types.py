import pytest

from emvpan.core.smartcard import APDU, ProtocolError, parse_response


def test_select_with_data_and_le():
    apdu = APDU(cla=0x00, ins=0xA4, p1=0x04, p2=0x00, data=b"2PAY.SYS.DDF01", le=0x00)
    assert apdu.to_bytes().hex() == "00a404000e325041592e5359532e444446303100"


def test_header_only_with_le():
    apdu = APDU(cla=0x00, ins=0xB2, p1=0x01, p2=0x0C, le=0x00)
    assert apdu.to_bytes() == bytes.fromhex("00B2010C00")


def test_no_data_no_le():
    assert APDU(0x00, 0xA4, 0x04, 0x0C).to_bytes() == bytes.fromhex("00A4040C")


def test_le_256_encodes_as_zero():
    assert APDU(0x00, 0xB0, 0x00, 0x00, le=256).to_bytes()[-1] == 0x00


def test_extended_length_data():
    data = bytes(300)
    raw = APDU(0x80, 0xE8, 0x00, 0x00, data=data, le=0x00).to_bytes()
    assert raw[:7] == bytes.fromhex("80E80000" "00012C")
    assert raw[7:-2] == data
    assert raw[-2:] == b"\x00\x00"


def test_parse_response_splits_status_word():
    resp = parse_response(bytes.fromhex("6F0084009000"))
    assert resp.data == bytes.fromhex("6F008400")
    assert resp.sw == 0x9000
    assert resp.success


def test_parse_response_status_only():
    resp = parse_response(b"\x6A\x82")
    assert resp.data == b""
    assert resp.sw1 == 0x6A
    assert resp.sw2 == 0x82
    assert not resp.success


@pytest.mark.parametrize("sw", [b"\x61\x10", b"\x62\x83", b"\x90\x01"])
def test_only_9000_is_success(sw):
    assert not parse_response(sw).success


@pytest.mark.parametrize("raw", [b"", b"\x90"])
def test_parse_response_too_short(raw):
    with pytest.raises(ProtocolError):
        parse_response(raw)


def test_repr():
    assert repr(APDU(0x00, 0xB2, 0x01, 0x0C, le=0)) == "00 B2 01 0C 00"
    assert repr(parse_response(b"\x01\x02\x90\x00")) == "01 02 SW=9000"
