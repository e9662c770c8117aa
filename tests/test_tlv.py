import pytest

from emvpan.core.smartcard import NotFound, ProtocolError
from emvpan.core.smartcard.tlv import (
    MAX_DEPTH,
    TLV,
    decode_all,
    encode,
    encode_length,
    find,
    parse,
    parse_dol,
    read_length,
    read_tag,
)

from conftest import tlv


def test_parse_primitive():
    nodes = parse(bytes.fromhex("5A084111111111111111"))
    assert len(nodes) == 1
    assert nodes[0].tag == 0x5A
    assert nodes[0].length == 8
    assert nodes[0].value == bytes.fromhex("4111111111111111")
    assert not nodes[0].constructed


def test_parse_constructed_decodes_children():
    data = tlv(0x6F, tlv(0x84, b"2PAY.SYS.DDF01"), tlv(0xA5, tlv(0x88, b"\x01"), tlv(0x50, b"PAY ")))
    (fci,) = parse(data)
    assert fci.constructed
    assert [c.tag for c in fci.children] == [0x84, 0xA5]
    assert [c.tag for c in fci.children[1].children] == [0x88, 0x50]
    assert fci.children[1].children[1].value == b"PAY "


@pytest.mark.parametrize(
    "raw, tag, offset",
    [
        ("5A", 0x5A, 1),
        ("9F38", 0x9F38, 2),
        ("5F24", 0x5F24, 2),
        ("DF8101", 0xDF8101, 3),
    ],
)
def test_read_tag(raw, tag, offset):
    assert read_tag(bytes.fromhex(raw), 0) == (tag, offset)


@pytest.mark.parametrize(
    "raw, length, offset",
    [
        ("05", 5, 1),
        ("7F", 127, 1),
        ("8180", 128, 2),
        ("820100", 256, 3),
    ],
)
def test_read_length(raw, length, offset):
    assert read_length(bytes.fromhex(raw), 0) == (length, offset)


def test_encode_length_is_minimal():
    assert encode_length(0x7F) == b"\x7F"
    assert encode_length(0x80) == b"\x81\x80"
    assert encode_length(0x1234) == b"\x82\x12\x34"


def test_canonical_encoding_round_trips():
    data = (
        tlv(0x6F, tlv(0x84, b"2PAY.SYS.DDF01"), tlv(0xA5, tlv(0xBF0C, tlv(0x61, tlv(0x4F, b"\xA0" * 7)))))
        + tlv(0x9F38, bytes(200))
        + tlv(0x83, b"")
    )
    assert b"".join(encode(node) for node in decode_all(data)) == data


def test_decode_all_is_flat():
    deep = b"\x5A\x01\x01"
    for _ in range(MAX_DEPTH + 4):
        deep = tlv(0x70, deep)
    nodes = decode_all(deep + tlv(0x9F08, b"\x00\x02"))
    assert [n.tag for n in nodes] == [0x70, 0x9F08]
    assert nodes[0].children == []
    with pytest.raises(ProtocolError):
        parse(deep)


def test_encode_from_children():
    node = TLV(tag=0x70, children=[TLV(0x5A, b"\x41\x11"), TLV(0x5F24, b"\x25\x12\x31")])
    assert node.to_bytes().hex() == "700a5a0241115f2403251231"


def test_constructed_flag_uses_first_tag_byte():
    assert TLV(0xBF0C).constructed
    assert TLV(0x70).constructed
    assert not TLV(0x9F38).constructed
    assert not TLV(0x5F24).constructed


def test_find_nested_two_levels():
    data = tlv(0x70, tlv(0xA5, tlv(0x5A, b"\x41\x11")))
    assert find(0x5A, data).value == b"\x41\x11"


def test_find_searches_children_before_next_sibling():
    data = tlv(0x70, tlv(0x5A, b"\x01")) + tlv(0x5A, b"\x02")
    assert find(0x5A, data).value == b"\x01"


def test_find_returns_first_match_in_order():
    data = tlv(0x5A, b"\x03") + tlv(0x70, tlv(0x5A, b"\x04"))
    assert find(0x5A, data).value == b"\x03"


def test_find_missing_tag():
    with pytest.raises(NotFound) as exc_info:
        find(0x5A, tlv(0x70, tlv(0x57, b"\x41")))
    assert exc_info.value.tag == 0x5A


def test_find_rejects_excessive_nesting():
    data = tlv(0x5A, b"\x41")
    for _ in range(MAX_DEPTH + 4):
        data = tlv(0x70, data)
    with pytest.raises(ProtocolError):
        find(0x5A, data)
    with pytest.raises(ProtocolError):
        parse(data)


def test_find_allows_nesting_within_bound():
    data = tlv(0x5A, b"\x41")
    for _ in range(MAX_DEPTH):
        data = tlv(0x70, data)
    assert find(0x5A, data).value == b"\x41"


@pytest.mark.parametrize(
    "raw",
    [
        "5A08411111",  # value shorter than length
        "9F",  # truncated multi-byte tag
        "5A",  # missing length
        "5A8201",  # truncated long-form length
        "5A80",  # indefinite length
    ],
)
def test_malformed_input(raw):
    with pytest.raises(ProtocolError):
        parse(bytes.fromhex(raw))


def test_padding_between_records_is_skipped():
    nodes = parse(bytes.fromhex("00005A0141FFFF500141"))
    assert [n.tag for n in nodes] == [0x5A, 0x50]


def test_parse_dol():
    pdol = bytes.fromhex("9F66049F02069F37045F2A029F1A02")
    assert parse_dol(pdol) == [
        (0x9F66, 4),
        (0x9F02, 6),
        (0x9F37, 4),
        (0x5F2A, 2),
        (0x9F1A, 2),
    ]


def test_format_tree():
    (node,) = parse(tlv(0x70, tlv(0x5A, b"\x41\x11")))
    assert node.format({0x5A: "PAN"}) == "70\n  5A PAN: 41 11"
