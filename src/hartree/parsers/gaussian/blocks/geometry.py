import re
from typing import Literal

from hartree.exceptions import InternalCodeError, ParsingError
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import (
    Atom,
    GeometryBlock,
    Malformed,
    RecognizerState,
    SectionEvent,
    SectionParser,
    TokenIterator,
)
from hartree.utils import logger

# --- Regex Patterns --- #
ORIENTATION_START_PAT = re.compile(r"^\s*(Input|Standard|Z-Matrix) orientation:")
# Center Number, Atomic Number (-1 for dummy atoms), Atomic Type (optional in older output), X, Y, Z
ATOM_ROW_PAT = re.compile(r"^\s*(\d+)\s+(-?\d+)\s+(?:-?\d+\s+)?(\S+)\s+(\S+)\s+(\S+)\s*$")

# fmt:off
ELEMENT_SYMBOLS = (
    "X",
    "H", "He",
    "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar",
    "K", "Ca", "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr",
    "Rb", "Sr", "Y", "Zr", "Nb", "Mo", "Tc", "Ru", "Rh", "Pd", "Ag", "Cd",
    "In", "Sn", "Sb", "Te", "I", "Xe",
    "Cs", "Ba", "La", "Ce", "Pr", "Nd", "Pm", "Sm", "Eu", "Gd", "Tb", "Dy",
    "Ho", "Er", "Tm", "Yb", "Lu", "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt",
    "Au", "Hg", "Tl", "Pb", "Bi", "Po", "At", "Rn",
    "Fr", "Ra", "Ac", "Th", "Pa", "U", "Np", "Pu", "Am", "Cm", "Bk", "Cf",
    "Es", "Fm", "Md", "No", "Lr", "Rf", "Db", "Sg", "Bh", "Hs", "Mt", "Ds",
    "Rg", "Cn", "Nh", "Fl", "Mc", "Lv", "Ts", "Og",
)
# fmt:on

ORIENTATION_NAMES: dict[str, Literal["input", "standard", "z-matrix"]] = {
    "Input": "input",
    "Standard": "standard",
    "Z-Matrix": "z-matrix",
}


def element_symbol(atomic_number: int) -> str:
    """Symbol for an atomic number; dummy and ghost centers (0, -1, ...) map to 'X'."""
    if 0 < atomic_number < len(ELEMENT_SYMBOLS):
        return ELEMENT_SYMBOLS[atomic_number]
    return "X"


def parse_atom_row(token: Token) -> Atom:
    """Parse one row of an orientation table."""
    match = ATOM_ROW_PAT.match(token.text)
    if not match:
        raise ParsingError("Unexpected line in orientation table.", text=token.text, line_number=token.line_number)
    _, atomic_number, x, y, z = match.groups()
    try:
        number = int(atomic_number)
        return Atom(symbol=element_symbol(number), atomic_number=number, x=float(x), y=float(y), z=float(z))
    except ValueError as e:
        raise ParsingError(
            f"Non-numeric coordinate in orientation table: {e}", text=token.text, line_number=token.line_number
        ) from e


class GeometryParser(SectionParser):
    """Parses the Input/Standard/Z-Matrix orientation tables.

    Layout::

                              Standard orientation:
         ---------------------------------------------------------------------
         Center     Atomic      Atomic             Coordinates (Angstroms)
         Number     Number       Type             X           Y           Z
         ---------------------------------------------------------------------
              1          6           0        1.234567   -0.123456    0.000000
         ---------------------------------------------------------------------
    """

    name = "geometry"

    def matches(self, token: Token, state: RecognizerState) -> bool:
        return token.kind is TokenKind.TEXT and ORIENTATION_START_PAT.search(token.text) is not None

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        start_match = ORIENTATION_START_PAT.search(current.text)
        if start_match is None:
            raise InternalCodeError("GeometryParser.parse called on non-matching line.")
        orientation = ORIENTATION_NAMES[start_match.group(1)]
        logger.debug(f"Starting parsing of {orientation} orientation geometry.")

        # Opening rule, two header lines, header rule
        rules_seen = 0
        for token in iterator:
            if token.kind is TokenKind.RULE:
                rules_seen += 1
                if rules_seen == 2:
                    break
        else:
            return [self._truncated(current, "header")]

        atoms: list[Atom] = []
        problem: ParsingError | None = None
        for token in iterator:
            if token.kind is TokenKind.RULE:
                break
            if problem is not None:
                continue  # drain the rest of a broken table
            try:
                atoms.append(parse_atom_row(token))
            except ParsingError as e:
                logger.warning(f"Malformed row in {orientation} orientation near line {token.line_number}: {e}")
                problem = e
        else:
            return [self._truncated(current, "atom rows")]

        if problem is not None:
            return [
                Malformed(
                    section=self.name,
                    text=problem.text or current.text,
                    line_number=problem.line_number or current.line_number,
                    reason=str(problem),
                )
            ]
        if not atoms:
            logger.warning(f"No atoms found in geometry block starting at line {current.line_number}.")
            return [Malformed(self.name, current.text, current.line_number, "orientation table has no atoms")]

        logger.info(f"Parsed {orientation} orientation geometry with {len(atoms)} atoms.")
        return [GeometryBlock(atoms=tuple(atoms), orientation=orientation, line_number=current.line_number)]

    def _truncated(self, current: Token, where: str) -> Malformed:
        logger.warning(f"Transcript ended inside geometry {where} started at line {current.line_number}.")
        return Malformed(
            section=self.name,
            text=current.text,
            line_number=current.line_number,
            reason=f"transcript ended inside orientation table {where}",
        )
