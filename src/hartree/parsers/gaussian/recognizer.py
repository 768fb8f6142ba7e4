from collections.abc import Iterable, Iterator, Sequence

from hartree.exceptions import ParsingError
from hartree.parsers.gaussian.blocks import (
    DipoleParser,
    FrequencyParser,
    GeometryParser,
    MetadataParser,
    RouteParser,
    ScfEnergyParser,
    TerminationParser,
    ThermochemistryParser,
)
from hartree.parsers.gaussian.tokens import Token
from hartree.parsers.gaussian.typing import (
    Malformed,
    RecognizerState,
    SectionEvent,
    SectionParser,
    Unrecognized,
)
from hartree.utils import logger

# --- Parser Registry --- #
# Order matters only where triggers could overlap; the first match wins.
PARSER_REGISTRY: Sequence[SectionParser] = [
    RouteParser(),
    GeometryParser(),
    ScfEnergyParser(),
    FrequencyParser(),
    ThermochemistryParser(),
    DipoleParser(),
    TerminationParser(),
    MetadataParser(),
]


class SectionRecognizer:
    """Groups a token stream into section events.

    The recognizer is stateless between runs; every call to ``events`` starts a
    fresh RecognizerState, so one instance can serve any number of transcripts.
    """

    def __init__(self, parser_registry: Sequence[SectionParser] = PARSER_REGISTRY) -> None:
        self.parser_registry = parser_registry

    def _match(self, token: Token, state: RecognizerState) -> SectionParser | None:
        for parser in self.parser_registry:
            if parser.matches(token, state):
                return parser
        return None

    def events(self, tokens: Iterable[Token]) -> Iterator[SectionEvent]:
        """Lazily yield section events in source order.

        Runs of tokens that start no known section are folded into a single
        Unrecognized event carrying the first line of the run and its length.
        Content problems are yielded as Malformed events; only internal errors
        in a parser are raised (as ParsingError).
        """
        state = RecognizerState()
        iterator = iter(tokens)
        run_start: Token | None = None
        run_length = 0

        while True:
            if state.buffered_token is not None:
                token = state.buffered_token
                state.buffered_token = None  # Consume the buffered token
            else:
                next_token = next(iterator, None)
                if next_token is None:
                    logger.debug("Recognizer: reached end of token stream.")
                    break
                token = next_token

            parser = self._match(token, state)
            if parser is None:
                if run_start is None:
                    run_start = token
                run_length += 1
                continue

            if run_start is not None:
                yield self._fold(run_start, run_length, state)
                run_start, run_length = None, 0

            logger.info(f"Recognizer: line {token.line_number} ('{token.text.strip()}') matched by {parser.name}.")
            try:
                section_events = parser.parse(iterator, token, state)
            except ParsingError as e:
                logger.warning(f"Malformed {parser.name} section near line {e.line_number or token.line_number}: {e}")
                yield Malformed(
                    section=parser.name,
                    text=e.text if e.text is not None else token.text,
                    line_number=e.line_number if e.line_number is not None else token.line_number,
                    reason=str(e),
                )
                continue
            except Exception as e:
                logger.error(
                    f"Unexpected error in {type(parser).__name__} near line {token.line_number}: {e}", exc_info=True
                )
                raise ParsingError(
                    f"Unexpected error in {type(parser).__name__} near line {token.line_number}: {e}",
                    text=token.text,
                    line_number=token.line_number,
                ) from e
            yield from section_events

        if run_start is not None:
            yield self._fold(run_start, run_length, state)
        logger.debug(f"Recognizer: {state.n_unrecognized} unrecognized lines skipped.")

    @staticmethod
    def _fold(first: Token, n_tokens: int, state: RecognizerState) -> Unrecognized:
        state.n_unrecognized += n_tokens
        return Unrecognized(text=first.text, line_number=first.line_number, n_tokens=n_tokens)
