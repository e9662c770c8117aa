from __future__ import annotations

import logging
from typing import Protocol

from emvpan.core.smartcard import APDU, Response, parse_response

lg = logging.getLogger(__name__)


class Transceiver(Protocol):
    """Single-shot duplex byte exchange with the card."""

    def wait_for_card(self, timeout: float | None = None) -> bool: ...
    def connect(self) -> None: ...
    def disconnect(self) -> None: ...
    def get_uid(self) -> bytes | None: ...
    def transceive(self, data: bytes) -> bytes: ...


class Agent:
    """Agent that manages card connectivity and APDU transmission.

    Protocol-specific operations live in standalone protocol classes
    (ISO7816, EMV) that receive agent.transmit as a callable. Terminals
    construct the protocol objects they need.
    """

    def __init__(self, transceiver: Transceiver) -> None:
        self._transceiver = transceiver

    def wait_for_card(self, timeout: float | None = None) -> bool:
        """Block until a new card is presented; False on timeout."""
        return self._transceiver.wait_for_card(timeout)

    def connect(self) -> None:
        """Connect to the presented card."""
        self._transceiver.connect()
        lg.info("connected")

    def disconnect(self) -> None:
        """Disconnect from the card."""
        self._transceiver.disconnect()

    def get_uid(self) -> bytes | None:
        """Return the UID of a contactless card, or None if not available."""
        return self._transceiver.get_uid()

    def transmit(self, apdu: APDU) -> Response:
        """Send an APDU and split the reply into payload and status word."""
        return parse_response(self._transceiver.transceive(apdu.to_bytes()))
