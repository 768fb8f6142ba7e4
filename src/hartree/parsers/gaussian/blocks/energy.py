import re

from hartree.exceptions import ParsingError
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import EnergyLine, RecognizerState, SectionEvent, SectionParser, TokenIterator
from hartree.utils import logger

# --- Regex Patterns --- #
# SCF Done:  E(RM062X) =  -849.236562278     A.U. after    1 cycles
SCF_DONE_TRIGGER_PAT = re.compile(r"^\s*SCF Done:")
SCF_DONE_PAT = re.compile(r"^\s*SCF Done:\s+E\((\S+?)\)\s*=\s*(\S+)")


class ScfEnergyParser(SectionParser):
    """Parses the converged SCF energy line printed after every SCF cycle."""

    name = "scf_energy"

    def matches(self, token: Token, state: RecognizerState) -> bool:
        return token.kind is TokenKind.TEXT and SCF_DONE_TRIGGER_PAT.search(token.text) is not None

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        match = SCF_DONE_PAT.search(current.text)
        if not match:
            raise ParsingError("SCF Done line has no energy.", text=current.text, line_number=current.line_number)
        try:
            energy = float(match.group(2))
        except ValueError as e:
            raise ParsingError(
                f"Could not parse SCF energy: {e}", text=current.text, line_number=current.line_number
            ) from e
        logger.debug(f"Found SCF energy {energy} ({match.group(1)}) at line {current.line_number}.")
        return [EnergyLine(energy=energy, line_number=current.line_number)]
