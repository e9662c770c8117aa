from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartcard.CardConnection import CardConnection
from smartcard.CardRequest import CardRequest
from smartcard.CardType import AnyCardType
from smartcard.Exceptions import CardRequestTimeoutException, SmartcardException
from smartcard.System import readers

from emvpan.core.smartcard.errors import TransportError
from emvpan.core.smartcard.observer import LoggingCardObserver

if TYPE_CHECKING:
    from smartcard.reader.Reader import Reader

lg = logging.getLogger(__name__)


class PcscTransceiver:
    """Duplex byte exchange with a contactless card through a PC/SC reader.

    Owns the reader side of the card lifecycle: waiting for a new card,
    connecting, exchanging raw bytes, and releasing the card. Every pyscard
    failure is reported as TransportError.
    """

    def __init__(self, reader_name: str | None = None) -> None:
        self._reader_name = reader_name
        self._connection: CardConnection | None = None
        self._observer = LoggingCardObserver()

    @staticmethod
    def list_readers() -> list[Reader]:
        return readers()

    def _readers(self) -> list[Reader]:
        try:
            available = self.list_readers()
        except SmartcardException as exc:
            raise TransportError(f"failed to list readers: {exc}") from exc
        if self._reader_name is not None:
            available = [r for r in available if self._reader_name in str(r)]
        if not available:
            raise TransportError("no readers found")
        return available

    def wait_for_card(self, timeout: float | None = None) -> bool:
        """Block until a new card is presented. False if *timeout* expires."""
        request = CardRequest(
            timeout=timeout,
            cardType=AnyCardType(),
            readers=self._readers(),
            newcardonly=True,
        )
        try:
            service = request.waitforcard()
        except CardRequestTimeoutException:
            return False
        except SmartcardException as exc:
            raise TransportError(f"waiting for card failed: {exc}") from exc
        self._connection = service.connection
        lg.debug("card presented on %s", self._connection.getReader())
        return True

    def connect(self) -> None:
        if self._connection is None:
            raise TransportError("no card presented")
        self._connection.addObserver(self._observer)
        try:
            self._connection.connect()
        except SmartcardException as exc:
            self.disconnect()
            raise TransportError(f"failed to connect: {exc}") from exc

    def disconnect(self) -> None:
        if self._connection is not None:
            try:
                self._connection.disconnect()
            except SmartcardException as exc:
                lg.debug("disconnect failed: %s", exc)
            self._connection.deleteObserver(self._observer)
            self._connection = None

    def get_uid(self) -> bytes | None:
        """Get the UID of a contactless card via PC/SC pseudo-APDU FF CA 00 00."""
        raw = self.transceive(bytes([0xFF, 0xCA, 0x00, 0x00, 0x00]))
        if raw[-2:] == b"\x90\x00":
            return raw[:-2]
        return None

    def transceive(self, data: bytes) -> bytes:
        """Send *data* and return the full response, status word included."""
        if self._connection is None:
            raise TransportError("not connected to a card")
        try:
            resp, sw1, sw2 = self._connection.transmit(list(data))
        except SmartcardException as exc:
            raise TransportError(f"transmit failed: {exc}") from exc
        return bytes(resp) + bytes([sw1, sw2])
