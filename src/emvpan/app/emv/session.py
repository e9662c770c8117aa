"""EMV reader session.

Constructs the full stack (Transceiver -> Agent -> Terminal -> Listener)
and emits every card read until the count is reached or the user stops it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from emvpan.app.emv.listener import Listener
from emvpan.core.base import Agent, Transceiver
from emvpan.core.emv import Card, EMVTerminal

if TYPE_CHECKING:
    from emvpan.app.config import Settings

lg = logging.getLogger(__name__)


def session(
    settings: Settings,
    emit: Callable[[Card], None],
    reader: str | None = None,
    count: int | None = None,
    transceiver: Transceiver | None = None,
) -> int:
    """Read cards until *count* is reached. Returns the number of cards read.

    TransportError propagates once the retry policy is exhausted.
    """
    if transceiver is None:
        # pyscard loads the PC/SC library on import.
        from emvpan.core.smartcard.transceiver import PcscTransceiver

        transceiver = PcscTransceiver(reader)
    agent = Agent(transceiver)
    terminal = EMVTerminal(agent, settings.terminal)
    listener = Listener(terminal, settings.policy, settings.poll_timeout)

    read = 0
    try:
        for card in listener.cards(limit=count):
            emit(card)
            read += 1
    except KeyboardInterrupt:
        lg.info("stopped")
    finally:
        terminal.disconnect()
    return read
