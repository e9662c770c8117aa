"""Failure taxonomy shared by the codecs and the EMV engine."""

from __future__ import annotations


class EMVError(Exception):
    """Base class for every failure raised while talking to a card."""


class TransportError(EMVError):
    """The exchange with the card failed (no response, link lost)."""


class ProtocolError(EMVError):
    """Short response, malformed TLV, bad BCD, or unexpected status word."""


class ValidationError(EMVError):
    """Structurally invalid data, e.g. an AFL not made of 4-byte entries."""


class NotFound(EMVError):
    """A tag is absent from a response."""

    def __init__(self, tag: int, step: str | None = None) -> None:
        self.tag = tag
        self.step = step
        msg = f"tag {tag:02X} not found"
        if step:
            msg = f"{step}: {msg}"
        super().__init__(msg)


class NoPANFound(EMVError):
    """Every record named by the AFL was read and none carried a PAN."""
