from collections.abc import Iterator
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from hartree.parsers.gaussian.tokens import Token
from hartree.parsers.gaussian.typing.events import SectionEvent

TokenIterator = Iterator[Token]  # Type alias for token iterators


@dataclass
class RecognizerState:
    """Scratch state for one pass of the recognizer over a token stream."""

    # Duration from the last 'Job cpu time' line, waiting for its termination line
    pending_cpu_time: timedelta | None = None
    # Token read ahead by a parser that must be re-dispatched by the main loop
    buffered_token: Token | None = None
    n_unrecognized: int = 0


class SectionParser(Protocol):
    """Protocol for Gaussian section parsers."""

    name: str

    def matches(self, token: Token, state: RecognizerState) -> bool:
        """Check if the token starts this parser's section."""
        ...

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        """Consume the section from the iterator and return the events it yields."""
        ...
