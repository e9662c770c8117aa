from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TerminalConfig:
    """Terminal data supplied to the card in GET PROCESSING OPTIONS."""

    ttq: int = 0xB620C000
    currency_code: int = 933
    country_code: int = 112
    amount: int = 1000
