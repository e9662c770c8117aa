"""EMV card read sequence.

A Transaction drives one card through PPSE discovery, application
selection, GET PROCESSING OPTIONS and the AFL record scan, and returns the
first PAN/expiry pair found. It keeps no state beyond one run: create a new
Transaction for every card.
"""

from __future__ import annotations

import enum
import logging
import secrets
from collections.abc import Callable

from emvpan.core.base.iso7816 import ISO7816
from emvpan.core.emv import tags
from emvpan.core.emv.bcd import decode_bcd
from emvpan.core.emv.card import Card
from emvpan.core.emv.config import TerminalConfig
from emvpan.core.emv.protocol import EMV, PPSE, AFLEntry, build_gpo_data, parse_afl
from emvpan.core.smartcard import (
    APDU,
    NoPANFound,
    NotFound,
    ProtocolError,
    Response,
    TransportError,
    ValidationError,
)
from emvpan.core.smartcard.tlv import TLV, find, parse

lg = logging.getLogger(__name__)


class State(enum.Enum):
    INIT = "init"
    APP_LIST_SELECTED = "app list selected"
    APP_SELECTED = "app selected"
    PROCESSING_OPTIONS_OBTAINED = "processing options obtained"
    SCANNING_RECORDS = "scanning records"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def random_u32() -> int:
    return secrets.randbits(32)


def parse_record(record: bytes, label: str) -> Card:
    """Build a Card from a record holding PAN (5A) and expiry (5F24).

    Raises NotFound for the PAN tag when the record has none; a PAN
    without an expiry date is a NotFound for 5F24.
    """
    pan = find(tags.PAN, record)
    try:
        exp = find(tags.EXPIRATION_DATE, record)
    except NotFound:
        raise NotFound(tags.EXPIRATION_DATE) from None
    year, month = decode_expiry(exp.value)
    return Card(label=label, pan=pan.value.hex(), exp_month=month, exp_year=year)


def decode_expiry(value: bytes) -> tuple[int, int]:
    """Decode YYMM[DD] BCD into (year, month)."""
    if len(value) < 2:
        raise ProtocolError(f"expiration date too short: {value.hex().upper()}")
    year = decode_bcd(value[0:1])
    month = decode_bcd(value[1:2])
    if not 1 <= month <= 12:
        raise ValidationError(f"expiration month {month} out of range")
    return year, month


def _log_tree(step: str, data: bytes) -> None:
    try:
        nodes = parse(data)
    except ProtocolError as exc:
        lg.debug("%s: undecodable response: %s", step, exc)
        return
    for node in nodes:
        lg.debug("%s:\n%s", step, node.format(tags.EMV_TAG_NAMES))


class Transaction:
    """One run of the card read sequence."""

    def __init__(
        self,
        transmit: Callable[[APDU], Response],
        config: TerminalConfig | None = None,
        unpredictable_number: Callable[[], int] = random_u32,
    ) -> None:
        self._iso = ISO7816(transmit)
        self._emv = EMV(transmit)
        self._config = config or TerminalConfig()
        self._unpredictable_number = unpredictable_number
        self.state = State.INIT

    def run(self) -> Card:
        """Run the whole sequence. Any failure leaves state FAILED."""
        try:
            card = self._run()
        except Exception:
            self.state = State.FAILED
            raise
        self.state = State.SUCCEEDED
        return card

    def _run(self) -> Card:
        data = self._exchange("select PPSE", self._iso.send_select, PPSE)
        aid = self._require(tags.APPLICATION_ID, data, "select PPSE")
        self.state = State.APP_LIST_SELECTED

        data = self._exchange("select application", self._iso.send_select, aid.value)
        label = self._require(tags.APPLICATION_LABEL, data, "select application")
        pdol = self._optional(tags.PDOL, data, "select application")
        self.state = State.APP_SELECTED
        lg.info("application %s (%s)", label.value.decode("ascii", "replace"),
                aid.value.hex().upper())

        gpo = build_gpo_data(
            pdol.value if pdol is not None else None,
            self._config,
            self._unpredictable_number,
        )
        data = self._exchange(
            "get processing options", self._emv.send_get_processing_options, gpo,
        )
        afl = self._require(tags.AFL, data, "get processing options")
        entries = parse_afl(afl.value)
        self.state = State.PROCESSING_OPTIONS_OBTAINED

        return self.read_records(entries, label.value.decode("ascii", "replace"))

    def read_records(self, entries: list[AFLEntry], label: str) -> Card:
        """READ RECORD through the AFL until a record carries a PAN."""
        self.state = State.SCANNING_RECORDS
        for entry in entries:
            for record in range(entry.first, entry.last + 1):
                step = f"read record {record} sfi {entry.sfi >> 3}"
                data = self._exchange(step, self._iso.send_read_record, record, entry.sfi)
                try:
                    return parse_record(data, label)
                except NotFound as exc:
                    if exc.tag == tags.PAN:
                        continue
                    raise NotFound(exc.tag, step) from None
                except (ProtocolError, ValidationError) as exc:
                    raise type(exc)(f"{step}: {exc}") from exc
        raise NoPANFound("no record in the AFL holds a PAN")

    # -- helpers --

    @staticmethod
    def _exchange(step: str, send: Callable[..., Response], *args: object) -> bytes:
        """Send one command; every failure names the step."""
        try:
            resp = send(*args)
        except (TransportError, ProtocolError) as exc:
            raise type(exc)(f"{step}: {exc}") from exc
        if not resp.success:
            raise ProtocolError(f"{step}: SW={resp.sw:04X}")
        if lg.isEnabledFor(logging.DEBUG) and resp.data:
            _log_tree(step, resp.data)
        return resp.data

    @staticmethod
    def _require(tag: int, data: bytes, step: str) -> TLV:
        try:
            return find(tag, data)
        except NotFound:
            raise NotFound(tag, step) from None
        except ProtocolError as exc:
            raise ProtocolError(f"{step}: {exc}") from exc

    @classmethod
    def _optional(cls, tag: int, data: bytes, step: str) -> TLV | None:
        try:
            return cls._require(tag, data, step)
        except NotFound:
            return None
