"""Card discovery loop.

Waits for cards on the reader, runs one read per card, and yields the
results. Transport failures back off per RetryPolicy and give up after
too many in a row; any other read failure is logged and the loop moves on
to the next card.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from emvpan.core.emv import Card, EMVTerminal, ReadCardMessage
from emvpan.core.smartcard import EMVError, TransportError

lg = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """Bounded retry with geometric back-off for transport failures."""

    max_failures: int = 5
    initial_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 10.0

    def delay(self, failures: int) -> float:
        """Seconds to wait after *failures* consecutive failures (1-based)."""
        return min(self.initial_delay * self.multiplier ** (failures - 1), self.max_delay)


class Listener:
    """Discovers cards one at a time and reads each through the terminal."""

    def __init__(
        self,
        terminal: EMVTerminal,
        policy: RetryPolicy | None = None,
        poll_timeout: float | None = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._terminal = terminal
        self._policy = policy or RetryPolicy()
        self._poll_timeout = poll_timeout
        self._sleep = sleep

    def cards(self, limit: int | None = None) -> Iterator[Card]:
        """Yield cards as they are read; stop after *limit* cards if given.

        Raises the last TransportError once max_failures consecutive
        transport failures have occurred.
        """
        failures = 0
        count = 0
        while limit is None or count < limit:
            try:
                if not self._terminal.wait_for_card(self._poll_timeout):
                    continue
                card = self._read()
            except TransportError as exc:
                failures += 1
                if failures >= self._policy.max_failures:
                    lg.error("giving up after %d consecutive transport failures", failures)
                    raise
                delay = self._policy.delay(failures)
                lg.warning("transport error: %s (retry in %.1fs)", exc, delay)
                self._sleep(delay)
                continue
            failures = 0
            if card is None:
                continue
            count += 1
            yield card

    def _read(self) -> Card | None:
        """Read the presented card. None if the card could not be read."""
        try:
            self._terminal.connect()
            result = self._terminal.send(ReadCardMessage())
        except TransportError:
            raise
        except EMVError as exc:
            self._terminal.on_error(exc)
            return None
        finally:
            self._terminal.disconnect()

        uid = result.uid.hex().upper() if result.uid else "-"
        card = result.card
        lg.info("%s card detected %s %s (uid %s)", card.label, card.masked_pan, card.expiry, uid)
        return card
