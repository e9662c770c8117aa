from __future__ import annotations

from collections.abc import Callable

from emvpan.core.base import Agent, Terminal
from emvpan.core.base.terminal import handles
from emvpan.core.emv.config import TerminalConfig
from emvpan.core.emv.messages import ReadCardMessage, ReadCardResult
from emvpan.core.emv.transaction import Transaction, random_u32


class EMVTerminal(Terminal):
    """Terminal that reads PAN and expiry from contactless payment cards."""

    def __init__(
        self,
        agent: Agent,
        config: TerminalConfig | None = None,
        unpredictable_number: Callable[[], int] = random_u32,
    ) -> None:
        super().__init__(agent)
        self._config = config or TerminalConfig()
        self._unpredictable_number = unpredictable_number

    @handles(ReadCardMessage)
    def _read_card(self, message: ReadCardMessage) -> ReadCardResult:
        uid = self._agent.get_uid()
        transaction = Transaction(
            self._agent.transmit, self._config, self._unpredictable_number,
        )
        return ReadCardResult(card=transaction.run(), uid=uid)
