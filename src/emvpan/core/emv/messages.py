"""EMV card messages and results."""

from __future__ import annotations

from dataclasses import dataclass

from emvpan.core.base import Message, Result
from emvpan.core.emv.card import Card


@dataclass
class ReadCardMessage(Message):
    """Run the full read sequence against the connected card."""


@dataclass
class ReadCardResult(Result):
    card: Card
    uid: bytes | None = None
