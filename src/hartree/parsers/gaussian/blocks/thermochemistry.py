import re

from hartree.exceptions import ParsingError
from hartree.parsers.gaussian.blocks.energy import SCF_DONE_TRIGGER_PAT
from hartree.parsers.gaussian.blocks.frequencies import FREQ_START_PAT
from hartree.parsers.gaussian.blocks.geometry import ORIENTATION_START_PAT
from hartree.parsers.gaussian.blocks.metadata import SYMMETRY_TRIGGER_PAT, parse_symmetry
from hartree.parsers.gaussian.blocks.termination import CPU_TIME_TRIGGER_PAT, ERROR_TERM_PAT, NORMAL_TERM_PAT
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import (
    Malformed,
    RecognizerState,
    SectionEvent,
    SectionParser,
    ThermochemistryBlock,
    TokenIterator,
)
from hartree.utils import logger

# --- Regex Patterns --- #
THERMO_START_PAT = re.compile(r"^\s*- Thermochemistry -")
TEMPERATURE_PAT = re.compile(r"^\s*Temperature\s+(\S+)\s+Kelvin")
ZPE_PAT = re.compile(r"^\s*Zero-point correction=\s*(\S+)")
GIBBS_PAT = re.compile(r"^\s*Sum of electronic and thermal Free Energies=\s*(\S+)")
Q_TABLE_HEADER_PAT = re.compile(r"^\s*Q\s+Log10\(Q\)\s+Ln\(Q\)")
TRANS_Q_PAT = re.compile(r"^\s*Translational\s+(\S+)\s+\S+\s+\S+\s*$")
ROT_Q_PAT = re.compile(r"^\s*Rotational\s+(\S+)\s+\S+\s+\S+\s*$")

# Lines that can only belong to a later section
SECTION_STOP_PATS = (
    NORMAL_TERM_PAT,
    ERROR_TERM_PAT,
    CPU_TIME_TRIGGER_PAT,
    FREQ_START_PAT,
    ORIENTATION_START_PAT,
    SCF_DONE_TRIGGER_PAT,
    THERMO_START_PAT,
)

ROOM_TEMPERATURE_K = 298.15


def parse_fortran_float(value: str) -> float:
    """Parse a float that may use a Fortran 'D' exponent (0.145453D+09)."""
    return float(value.upper().replace("D", "E"))


class ThermochemistryParser(SectionParser):
    """Parses the '- Thermochemistry -' section of a frequency step.

    Yields a ThermochemistryBlock with whichever of ZPE correction, Gibbs free
    energy and the translational/rotational partition functions (Q column) were
    readable. The rotor classification inside the section is reported as a
    separate SymmetryLine. Unreadable values become Malformed events without
    discarding the rest of the block.
    """

    name = "thermochemistry"

    def matches(self, token: Token, state: RecognizerState) -> bool:
        return token.kind is TokenKind.TEXT and THERMO_START_PAT.search(token.text) is not None

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        logger.debug(f"Starting thermochemistry block parsing at line {current.line_number}.")
        values: dict[str, float] = {}
        side_events: list[SectionEvent] = []
        temperature: float | None = None
        in_q_table = False

        def read(field_name: str, raw: str, token: Token) -> None:
            try:
                values[field_name] = parse_fortran_float(raw)
                logger.debug(f"Parsed {field_name}: {values[field_name]}")
            except ValueError:
                logger.warning(f"Malformed {field_name} near line {token.line_number}: {token.text.strip()}")
                side_events.append(
                    Malformed(self.name, token.text, token.line_number, f"non-numeric {field_name} '{raw}'")
                )

        for token in iterator:
            if token.kind is not TokenKind.TEXT:
                continue
            text = token.text
            if any(pat.search(text) for pat in SECTION_STOP_PATS):
                state.buffered_token = token
                break

            if match := TEMPERATURE_PAT.search(text):
                try:
                    temperature = float(match.group(1))
                except ValueError:
                    side_events.append(Malformed(self.name, text, token.line_number, "non-numeric temperature"))
            elif SYMMETRY_TRIGGER_PAT.search(text):
                try:
                    side_events.append(parse_symmetry(token))
                except ParsingError as e:
                    side_events.append(Malformed(self.name, text, token.line_number, str(e)))
            elif match := ZPE_PAT.search(text):
                read("zpe_correction", match.group(1), token)
            elif match := GIBBS_PAT.search(text):
                read("gibbs_298", match.group(1), token)
            elif Q_TABLE_HEADER_PAT.search(text):
                in_q_table = True
            elif in_q_table and (match := TRANS_Q_PAT.search(text)):
                read("trans_part", match.group(1), token)
            elif in_q_table and (match := ROT_Q_PAT.search(text)):
                read("rot_part", match.group(1), token)
                break  # last row of the partition function table
        else:
            logger.debug("Transcript ended inside thermochemistry block; keeping values read so far.")

        if "gibbs_298" in values and temperature is not None and abs(temperature - ROOM_TEMPERATURE_K) > 0.01:
            logger.warning(f"Thermochemistry computed at {temperature} K; free energy is not a 298 K value.")
            del values["gibbs_298"]

        if not values:
            if not any(isinstance(event, Malformed) for event in side_events):
                side_events.append(
                    Malformed(self.name, current.text, current.line_number, "thermochemistry block has no values")
                )
            return side_events

        logger.info(f"Parsed thermochemistry block with fields {sorted(values)}.")
        return [*side_events, ThermochemistryBlock(line_number=current.line_number, **values)]
