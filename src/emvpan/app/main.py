# filename : main.py
# created  : 10/19/2026


import logging

import click

from emvpan.app.config import Settings
from emvpan.app.emv import format_card, format_card_json, session

lg = logging.getLogger(__name__)


def main(
    settings: Settings,
    reader: str | None = None,
    count: int | None = None,
    mask: bool = False,
    as_json: bool = False,
) -> int:
    lg.debug("emvpan v1")
    formatter = format_card_json if as_json else format_card
    return session(
        settings,
        emit=lambda card: click.echo(formatter(card, mask)),
        reader=reader,
        count=count,
    )
