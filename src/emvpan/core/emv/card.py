from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Card:
    """Payment card details read from the card's records."""

    label: str
    pan: str
    exp_month: int
    exp_year: int

    @property
    def masked_pan(self) -> str:
        return f"****{self.pan[-4:]}"

    @property
    def expiry(self) -> str:
        return f"{self.exp_month:02d}/{self.exp_year:02d}"
