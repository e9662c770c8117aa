from emvpan.core.smartcard.errors import (
    EMVError,
    NoPANFound,
    NotFound,
    ProtocolError,
    TransportError,
    ValidationError,
)
from emvpan.core.smartcard.logging import PROTOCOL, TRACE
from emvpan.core.smartcard.types import APDU, Response, parse_response

__all__ = [
    "APDU",
    "EMVError",
    "NoPANFound",
    "NotFound",
    "PROTOCOL",
    "ProtocolError",
    "Response",
    "TRACE",
    "TransportError",
    "ValidationError",
    "parse_response",
]
