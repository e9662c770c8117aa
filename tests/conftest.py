from __future__ import annotations

import pytest

from emvpan.core.base import Agent
from emvpan.core.smartcard.tlv import encode_length, encode_tag

AID = bytes.fromhex("A0000000031010")
PDOL = bytes.fromhex("9F6604" "9F0206" "9F3704" "5F2A02" "9F1A02")
OK = b"\x90\x00"


def tlv(tag: int, *parts: bytes) -> bytes:
    value = b"".join(parts)
    return encode_tag(tag) + encode_length(len(value)) + value


def ppse_response(aid: bytes = AID) -> bytes:
    entry = tlv(0x61, tlv(0x4F, aid), tlv(0x50, b"VISA"), tlv(0x87, b"\x01"))
    return tlv(0x6F, tlv(0x84, b"2PAY.SYS.DDF01"), tlv(0xA5, tlv(0xBF0C, entry))) + OK


def select_response(label: bytes = b"VISA DEBIT", pdol: bytes | None = PDOL) -> bytes:
    prop = tlv(0x50, label)
    if pdol is not None:
        prop += tlv(0x9F38, pdol)
    return tlv(0x6F, tlv(0x84, AID), tlv(0xA5, prop)) + OK


def gpo_response(afl: bytes = bytes.fromhex("08010100" "10010200")) -> bytes:
    return tlv(0x77, tlv(0x82, b"\x20\x00"), tlv(0x94, afl)) + OK


def record(*parts: bytes) -> bytes:
    return tlv(0x70, *parts) + OK


PAN_RECORD = record(
    tlv(0x5A, bytes.fromhex("4111111111111111")),
    tlv(0x5F24, bytes.fromhex("251231")),
)


def visa_script(**overrides: bytes) -> list[tuple[str, bytes]]:
    """Responses for a card whose PAN sits in SFI 2 record 1."""
    script = {
        "ppse": ("00a404000e325041592e5359532e4444463031", ppse_response()),
        "select": ("00a4040007a0000000031010", select_response()),
        "gpo": ("80a8", gpo_response()),
        "sfi1rec1": ("00b2010c", record(tlv(0x9F08, b"\x00\x02"))),
        "sfi2rec1": ("00b20114", PAN_RECORD),
        "sfi2rec2": ("00b20214", record(
            tlv(0x5A, bytes.fromhex("5500000000000004")),
            tlv(0x5F24, bytes.fromhex("300101")),
        )),
    }
    for key, response in overrides.items():
        script[key] = (script[key][0], response)
    return list(script.values())


class FakeTransceiver:
    """Scripted card: answers each command by the first matching hex prefix.

    *events* drives wait_for_card: False is a poll timeout, an exception is
    raised, and a script presents a new card answering with that script.
    """

    def __init__(
        self,
        script: list[tuple[str, bytes | Exception]] | None = None,
        events: list | None = None,
        uid: bytes | None = bytes.fromhex("04A1B2C3"),
    ) -> None:
        self.script = list(script or [])
        self.events = list(events or [])
        self.uid = uid
        self.sent: list[bytes] = []
        self.connects = 0
        self.disconnects = 0

    def wait_for_card(self, timeout: float | None = None) -> bool:
        event = self.events.pop(0)
        if isinstance(event, Exception):
            raise event
        if event is False:
            return False
        self.script = list(event)
        return True

    def connect(self) -> None:
        self.connects += 1

    def disconnect(self) -> None:
        self.disconnects += 1

    def get_uid(self) -> bytes | None:
        return self.uid

    def transceive(self, data: bytes) -> bytes:
        self.sent.append(data)
        for prefix, response in self.script:
            if data.hex().startswith(prefix):
                if isinstance(response, Exception):
                    raise response
                return response
        return b"\x6A\x82"

    @property
    def sent_hex(self) -> list[str]:
        return [d.hex() for d in self.sent]


@pytest.fixture
def card_transceiver() -> FakeTransceiver:
    return FakeTransceiver(visa_script())


@pytest.fixture
def agent(card_transceiver: FakeTransceiver) -> Agent:
    return Agent(card_transceiver)
