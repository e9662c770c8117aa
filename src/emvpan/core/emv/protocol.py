"""EMV contactless protocol operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import NamedTuple

from emvpan.core.emv import tags
from emvpan.core.emv.bcd import encode_bcd
from emvpan.core.emv.config import TerminalConfig
from emvpan.core.smartcard import APDU, Response, ValidationError
from emvpan.core.smartcard.logging import PROTOCOL
from emvpan.core.smartcard.tlv import TLV, encode, parse_dol

lg = logging.getLogger(__name__)

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"

PPSE = b"2PAY.SYS.DDF01"


class AFLEntry(NamedTuple):
    """One 4-byte Application File Locator group."""

    sfi: int
    first: int
    last: int
    offline: int


def parse_afl(data: bytes) -> list[AFLEntry]:
    """Split an AFL into entries; SFI is kept as the READ RECORD P2 byte."""
    if len(data) % 4 != 0:
        raise ValidationError(f"AFL length {len(data)} is not a multiple of 4")
    return [
        AFLEntry(sfi=(data[i] & 0xF8) | 0x04, first=data[i + 1],
                 last=data[i + 2], offline=data[i + 3])
        for i in range(0, len(data), 4)
    ]


def build_gpo_data(
    pdol: bytes | None,
    config: TerminalConfig,
    unpredictable_number: Callable[[], int],
) -> bytes:
    """Build the GPO data field: command template 83 over the PDOL values.

    Each PDOL entry yields exactly the requested number of bytes, in PDOL
    order. Tags the terminal does not know are zero-filled.
    """
    if not pdol:
        return encode(TLV(tag=tags.COMMAND_TEMPLATE))

    buf = bytearray()
    for tag, length in parse_dol(pdol):
        try:
            buf.extend(_pdol_value(tag, length, config, unpredictable_number))
        except (ValueError, OverflowError) as exc:
            raise ValidationError(f"PDOL {tag:02X}: {exc}") from exc
    return encode(TLV(tag=tags.COMMAND_TEMPLATE, value=bytes(buf)))


def _pdol_value(
    tag: int,
    length: int,
    config: TerminalConfig,
    unpredictable_number: Callable[[], int],
) -> bytes:
    if tag == tags.TTQ:
        return config.ttq.to_bytes(4, "big")[:length].ljust(length, b"\x00")
    if tag == tags.AMOUNT_AUTHORIZED:
        return encode_bcd(config.amount, length)
    if tag == tags.UNPREDICTABLE_NUMBER:
        return encode_bcd(unpredictable_number() % 100**length, length)
    if tag == tags.TRANSACTION_CURRENCY_CODE:
        return encode_bcd(config.currency_code, length)
    if tag == tags.TERMINAL_COUNTRY_CODE:
        return encode_bcd(config.country_code, length)
    return bytes(length)


class EMV:
    """EMV payment application protocol operations."""

    def __init__(self, transmit: Callable[[APDU], Response]) -> None:
        self._transmit = transmit

    def _send(self, label: str, apdu: APDU) -> Response:
        resp = self._transmit(apdu)
        color = _GREEN if resp.sw1 in (0x90, 0x61) else _RED
        lg.log(PROTOCOL, "%s %s%04X%s", label, color, resp.sw, _RESET)
        return resp

    # -- commands --

    def send_get_processing_options(self, data: bytes) -> Response:
        """GET PROCESSING OPTIONS (80 A8)."""
        apdu = APDU(cla=0x80, ins=0xA8, p1=0x00, p2=0x00, data=data, le=0x00)
        return self._send("GET PROCESSING OPTIONS", apdu)
