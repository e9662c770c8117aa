from emvpan.core.emv.card import Card
from emvpan.core.emv.config import TerminalConfig
from emvpan.core.emv.messages import ReadCardMessage, ReadCardResult
from emvpan.core.emv.terminal import EMVTerminal
from emvpan.core.emv.transaction import State, Transaction

__all__ = [
    "Card",
    "EMVTerminal",
    "ReadCardMessage",
    "ReadCardResult",
    "State",
    "TerminalConfig",
    "Transaction",
]
