import re

from hartree.exceptions import ParsingError
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import DipoleLine, RecognizerState, SectionEvent, SectionParser, TokenIterator
from hartree.utils import logger

# --- Regex Patterns --- #
DIPOLE_START_PAT = re.compile(r"^\s*Dipole moment \(field-independent basis, Debye\):")
DIPOLE_TOTAL_PAT = re.compile(r"Tot=\s*(\S+)")


class DipoleParser(SectionParser):
    """Parses the total dipole moment from the line after the dipole header."""

    name = "dipole"

    def matches(self, token: Token, state: RecognizerState) -> bool:
        return token.kind is TokenKind.TEXT and DIPOLE_START_PAT.search(token.text) is not None

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        components = next(iterator, None)
        if components is None:
            raise ParsingError(
                "Transcript ended after dipole moment header.", text=current.text, line_number=current.line_number
            )
        match = DIPOLE_TOTAL_PAT.search(components.text)
        if not match:
            state.buffered_token = components
            raise ParsingError(
                "Dipole moment line has no total.", text=components.text, line_number=components.line_number
            )
        try:
            total = float(match.group(1))
        except ValueError as e:
            raise ParsingError(
                f"Could not parse dipole total: {e}", text=components.text, line_number=components.line_number
            ) from e
        logger.debug(f"Found dipole moment total {total} Debye.")
        return [DipoleLine(total=total, line_number=components.line_number)]
