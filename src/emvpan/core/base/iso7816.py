from __future__ import annotations

import logging
from collections.abc import Callable

from emvpan.core.smartcard import APDU, Response
from emvpan.core.smartcard.logging import PROTOCOL

lg = logging.getLogger(__name__)

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"


class ISO7816:
    """ISO 7816-4 protocol operations."""

    def __init__(self, transmit: Callable[[APDU], Response]) -> None:
        self._transmit = transmit

    def _send(self, label: str, apdu: APDU) -> Response:
        resp = self._transmit(apdu)
        color = _GREEN if resp.sw1 in (0x90, 0x61) else _RED
        lg.log(PROTOCOL, "%s %s%04X%s", label, color, resp.sw, _RESET)
        return resp

    # -- commands --

    def send_select(
        self, data: bytes, p1: int = 0x04, p2: int = 0x00,
    ) -> Response:
        """SELECT (00 A4). P1=selection method, P2=response control."""
        le: int | None = None if (p2 & 0x0C) == 0x0C else 0x00
        apdu = APDU(cla=0x00, ins=0xA4, p1=p1, p2=p2, data=data, le=le)
        return self._send(f"SELECT {data.hex().upper()}", apdu)

    def send_read_record(self, record: int, sfi: int) -> Response:
        """READ RECORD (00 B2). P1=record number, P2=SFI reference byte."""
        apdu = APDU(cla=0x00, ins=0xB2, p1=record, p2=sfi, le=0x00)
        return self._send(f"READ RECORD rec={record:02X} p2={sfi:02X}", apdu)
