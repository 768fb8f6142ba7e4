from hartree.parsers.gaussian.typing.core import Atom, Diagnostic, LoadResult, Snapshot, _MutableSnapshot
from hartree.parsers.gaussian.typing.events import (
    AtomCountLine,
    ChargeMultiplicityLine,
    DipoleLine,
    EnergyLine,
    FrequencyBlock,
    GeometryBlock,
    Malformed,
    MethodLine,
    SectionEvent,
    SolventLine,
    StoichiometryLine,
    SymmetryLine,
    TerminationLine,
    ThermochemistryBlock,
    Unrecognized,
)
from hartree.parsers.gaussian.typing.parser import RecognizerState, SectionParser, TokenIterator

__all__ = [
    # from core
    "Atom",
    "Diagnostic",
    "LoadResult",
    "Snapshot",
    "_MutableSnapshot",
    # from events
    "SectionEvent",
    "GeometryBlock",
    "FrequencyBlock",
    "ThermochemistryBlock",
    "EnergyLine",
    "ChargeMultiplicityLine",
    "SymmetryLine",
    "SolventLine",
    "MethodLine",
    "StoichiometryLine",
    "DipoleLine",
    "AtomCountLine",
    "TerminationLine",
    "Unrecognized",
    "Malformed",
    # from parser
    "RecognizerState",
    "SectionParser",
    "TokenIterator",
]
