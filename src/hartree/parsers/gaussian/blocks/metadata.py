import re
from collections.abc import Callable

from hartree.exceptions import InternalCodeError, ParsingError
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import (
    AtomCountLine,
    ChargeMultiplicityLine,
    RecognizerState,
    SectionEvent,
    SectionParser,
    SolventLine,
    StoichiometryLine,
    SymmetryLine,
    TokenIterator,
)
from hartree.utils import logger

# --- Regex Patterns --- #
# Triggers also match damaged lines; parse() turns those into ParsingError.
CHARGE_MULT_TRIGGER_PAT = re.compile(r"^\s*Charge\s*=\s*-?\d+(?![.\d])")  # not the "Charge= 0.0000 electrons" line
CHARGE_MULT_PAT = re.compile(r"^\s*Charge\s*=\s*(-?\d+)\s+Multiplicity\s*=\s*(\d+)")
SYMMETRY_TRIGGER_PAT = re.compile(r"^\s*This molecule is an? .*\btop\b")
SYMMETRY_PAT = re.compile(r"^\s*This molecule is an?\s+(.+?)\s+top\.")
PCM_SOLVENT_TRIGGER_PAT = re.compile(r"^\s*Solvent\s+:")
PCM_SOLVENT_PAT = re.compile(r"^\s*Solvent\s+:\s*([^,]+?)\s*,\s*Eps=")
STOICHIOMETRY_PAT = re.compile(r"^\s*Stoichiometry\s+(\S+)")
NATOMS_TRIGGER_PAT = re.compile(r"^\s*NAtoms=")
NATOMS_PAT = re.compile(r"^\s*NAtoms=\s*(\d+)")


def _parsing_error(token: Token, message: str) -> ParsingError:
    return ParsingError(message, text=token.text, line_number=token.line_number)


def parse_charge_multiplicity(token: Token) -> ChargeMultiplicityLine:
    match = CHARGE_MULT_PAT.search(token.text)
    if not match:
        raise _parsing_error(token, "Charge/multiplicity line is incomplete.")
    return ChargeMultiplicityLine(
        charge=int(match.group(1)), multiplicity=int(match.group(2)), line_number=token.line_number
    )


def parse_symmetry(token: Token) -> SymmetryLine:
    match = SYMMETRY_PAT.search(token.text)
    if not match:
        raise _parsing_error(token, "Unrecognized rotor classification.")
    kind = match.group(1).lower()
    # prolate/oblate symmetric and spherical tops count as symmetric
    return SymmetryLine(symmetric_top=not kind.startswith("asymmetric"), line_number=token.line_number)


def parse_pcm_solvent(token: Token) -> SolventLine:
    match = PCM_SOLVENT_PAT.search(token.text)
    if not match:
        raise _parsing_error(token, "Solvent line has no solvent name.")
    return SolventLine(solvent=match.group(1).strip().lower(), line_number=token.line_number)


def parse_stoichiometry(token: Token) -> StoichiometryLine:
    match = STOICHIOMETRY_PAT.search(token.text)
    if not match:
        raise _parsing_error(token, "Stoichiometry line has no formula.")
    return StoichiometryLine(stoichiometry=match.group(1), line_number=token.line_number)


def parse_atom_count(token: Token) -> AtomCountLine:
    match = NATOMS_PAT.search(token.text)
    if not match:
        raise _parsing_error(token, "NAtoms line has no count.")
    return AtomCountLine(count=int(match.group(1)), line_number=token.line_number)


class MetadataParser(SectionParser):
    """Parses single-line metadata: charge/multiplicity, rotor type, PCM solvent,
    stoichiometry and atom count. Consumes only the current token."""

    name = "metadata"

    _handlers: dict[re.Pattern[str], Callable[[Token], SectionEvent]] = {
        CHARGE_MULT_TRIGGER_PAT: parse_charge_multiplicity,
        SYMMETRY_TRIGGER_PAT: parse_symmetry,
        PCM_SOLVENT_TRIGGER_PAT: parse_pcm_solvent,
        STOICHIOMETRY_PAT: parse_stoichiometry,
        NATOMS_TRIGGER_PAT: parse_atom_count,
    }

    def matches(self, token: Token, state: RecognizerState) -> bool:
        if token.kind is not TokenKind.TEXT:
            return False
        return any(pattern.search(token.text) for pattern in self._handlers)

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        for pattern, handler in self._handlers.items():
            if pattern.search(current.text):
                event = handler(current)
                logger.debug(f"Parsed metadata at line {current.line_number}: {event}")
                return [event]
        raise InternalCodeError("MetadataParser.parse called on non-matching line.")
