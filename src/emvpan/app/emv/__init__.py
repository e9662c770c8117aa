from emvpan.app.emv.display import format_card, format_card_json
from emvpan.app.emv.listener import Listener, RetryPolicy
from emvpan.app.emv.session import session

__all__ = [
    "Listener",
    "RetryPolicy",
    "format_card",
    "format_card_json",
    "session",
]
