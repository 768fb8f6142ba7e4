import re

from hartree.exceptions import ParsingError
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import (
    FrequencyBlock,
    Malformed,
    RecognizerState,
    SectionEvent,
    SectionParser,
    TokenIterator,
)
from hartree.utils import logger

# --- Regex Patterns --- #
FREQ_START_PAT = re.compile(r"^\s*Harmonic frequencies \(cm\*\*-1\)")
# Two dashes only; the hpmodes listing uses 'Frequencies ---'
FREQ_ROW_PAT = re.compile(r"^\s*Frequencies --(?!-)\s*(.*)$")


def parse_frequency_row(token: Token) -> list[float]:
    match = FREQ_ROW_PAT.match(token.text)
    if not match:
        raise ParsingError("Not a frequency row.", text=token.text, line_number=token.line_number)
    fields = match.group(1).split()
    if not fields:
        raise ParsingError("Frequency row has no values.", text=token.text, line_number=token.line_number)
    try:
        return [float(value) for value in fields]
    except ValueError as e:
        raise ParsingError(
            f"Non-numeric frequency value: {e}", text=token.text, line_number=token.line_number
        ) from e


class FrequencyParser(SectionParser):
    """Parses the harmonic frequency listing.

    Every 'Frequencies --' row up to the first blank line or rule belongs to
    the block. Mode tables (reduced masses, displacements) in between are
    skipped. A single unreadable row invalidates the whole block.
    """

    name = "frequencies"

    def matches(self, token: Token, state: RecognizerState) -> bool:
        return token.kind is TokenKind.TEXT and FREQ_START_PAT.search(token.text) is not None

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        logger.debug(f"Starting frequency block parsing at line {current.line_number}.")
        values: list[float] = []
        problem: ParsingError | None = None

        for token in iterator:
            if token.kind is TokenKind.BLANK and not values and problem is None:
                continue  # spacing between the header and the first mode group
            if token.kind is not TokenKind.TEXT:
                # The terminating blank/rule may open the next section
                state.buffered_token = token
                break
            if problem is not None or not FREQ_ROW_PAT.match(token.text):
                continue
            try:
                values.extend(parse_frequency_row(token))
            except ParsingError as e:
                logger.warning(f"Malformed frequency row near line {token.line_number}: {token.text.strip()}")
                problem = e
        else:
            logger.debug("Transcript ended inside frequency block; keeping rows read so far.")

        if problem is not None:
            return [
                Malformed(
                    section=self.name,
                    text=problem.text or current.text,
                    line_number=problem.line_number or current.line_number,
                    reason=str(problem),
                )
            ]
        if not values:
            return [Malformed(self.name, current.text, current.line_number, "frequency block has no values")]

        logger.info(f"Parsed {len(values)} harmonic frequencies.")
        return [FrequencyBlock(values=tuple(values), line_number=current.line_number)]
