from hartree.exceptions import AtomOutOfRangeError, HartreeError, ParsingError, UnreadableInputError
from hartree.parsers.gaussian import (
    Atom,
    Diagnostic,
    LoadResult,
    Snapshot,
    SnapshotLoader,
    load_gaussian_output,
    load_snapshot,
    parse_gaussian_output,
)

__all__ = [
    "Atom",
    "AtomOutOfRangeError",
    "Diagnostic",
    "HartreeError",
    "LoadResult",
    "ParsingError",
    "Snapshot",
    "SnapshotLoader",
    "UnreadableInputError",
    "load_gaussian_output",
    "load_snapshot",
    "parse_gaussian_output",
]
