"""Section events produced by the recognizer and consumed by the loader."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal, TypeAlias

from hartree.parsers.gaussian.typing.core import Atom


@dataclass(frozen=True)
class GeometryBlock:
    atoms: Sequence[Atom]
    orientation: Literal["input", "standard", "z-matrix"]
    line_number: int


@dataclass(frozen=True)
class FrequencyBlock:
    values: Sequence[float]  # cm**-1, source order
    line_number: int


@dataclass(frozen=True)
class ThermochemistryBlock:
    """Any subset of the thermochemistry values; absent ones are None."""

    line_number: int
    zpe_correction: float | None = None  # Hartree/Particle
    gibbs_298: float | None = None  # Hartree/Particle
    rot_part: float | None = None
    trans_part: float | None = None


@dataclass(frozen=True)
class EnergyLine:
    energy: float  # Hartree
    line_number: int


@dataclass(frozen=True)
class ChargeMultiplicityLine:
    charge: int
    multiplicity: int
    line_number: int


@dataclass(frozen=True)
class SymmetryLine:
    symmetric_top: bool
    line_number: int


@dataclass(frozen=True)
class SolventLine:
    solvent: str
    line_number: int


@dataclass(frozen=True)
class MethodLine:
    functional: str
    basis_set: str
    line_number: int


@dataclass(frozen=True)
class StoichiometryLine:
    stoichiometry: str
    line_number: int


@dataclass(frozen=True)
class DipoleLine:
    total: float  # Debye
    line_number: int


@dataclass(frozen=True)
class AtomCountLine:
    count: int
    line_number: int


@dataclass(frozen=True)
class TerminationLine:
    timestamp: datetime
    line_number: int
    cpu_time: timedelta | None = None


@dataclass(frozen=True)
class Unrecognized:
    """A run of consecutive lines that starts no known section."""

    text: str  # first line of the run
    line_number: int
    n_tokens: int = 1


@dataclass(frozen=True)
class Malformed:
    section: str
    text: str
    line_number: int
    reason: str


SectionEvent: TypeAlias = (
    GeometryBlock
    | FrequencyBlock
    | ThermochemistryBlock
    | EnergyLine
    | ChargeMultiplicityLine
    | SymmetryLine
    | SolventLine
    | MethodLine
    | StoichiometryLine
    | DipoleLine
    | AtomCountLine
    | TerminationLine
    | Unrecognized
    | Malformed
)
