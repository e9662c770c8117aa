"""Output formatting for cards read by the session."""

from __future__ import annotations

import json

from emvpan.core.emv import Card


def format_card(card: Card, mask: bool = False) -> str:
    """One line per card: label, PAN, MM/YY."""
    pan = card.masked_pan if mask else card.pan
    return f"{card.label} {pan} {card.expiry}"


def format_card_json(card: Card, mask: bool = False) -> str:
    return json.dumps({
        "label": card.label,
        "pan": card.masked_pan if mask else card.pan,
        "exp_month": card.exp_month,
        "exp_year": card.exp_year,
    })
