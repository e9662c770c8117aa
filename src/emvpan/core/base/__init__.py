from emvpan.core.base.agent import Agent, Transceiver
from emvpan.core.base.iso7816 import ISO7816
from emvpan.core.base.message import Message, Result
from emvpan.core.base.terminal import Terminal

__all__ = ["Agent", "ISO7816", "Message", "Result", "Terminal", "Transceiver"]
