from hartree.parsers.gaussian.core import load_gaussian_output, load_snapshot, parse_gaussian_output
from hartree.parsers.gaussian.loader import SnapshotLoader
from hartree.parsers.gaussian.recognizer import PARSER_REGISTRY, SectionRecognizer
from hartree.parsers.gaussian.tokens import Token, TokenKind, read_transcript, tokenize
from hartree.parsers.gaussian.typing import Atom, Diagnostic, LoadResult, Snapshot

__all__ = [
    "parse_gaussian_output",
    "load_gaussian_output",
    "load_snapshot",
    "SnapshotLoader",
    "SectionRecognizer",
    "PARSER_REGISTRY",
    "Token",
    "TokenKind",
    "tokenize",
    "read_transcript",
    "Atom",
    "Diagnostic",
    "LoadResult",
    "Snapshot",
]
