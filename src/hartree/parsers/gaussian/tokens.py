"""Line lexer for Gaussian output transcripts.

The recognizer works on a flat list of tokens, one per transcript line. Each
token carries a coarse lexical kind so that section parsers can find table
rules and blank separators without re-inspecting the raw text.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from hartree.exceptions import UnreadableInputError
from hartree.utils import logger

RULE_PAT = re.compile(r"^\s*(?:-{10,}|={10,})\s*$")


class TokenKind(Enum):
    BLANK = "BLANK"
    RULE = "RULE"
    TEXT = "TEXT"


@dataclass(frozen=True)
class Token:
    """A single transcript line with its lexical kind."""

    kind: TokenKind
    text: str
    line_number: int  # 1-based

    def __str__(self) -> str:
        return f"{self.line_number:>7}  {self.kind.value:<5}  {self.text}"


def classify_line(line: str) -> TokenKind:
    if not line.strip():
        return TokenKind.BLANK
    if RULE_PAT.match(line):
        return TokenKind.RULE
    return TokenKind.TEXT


def tokenize(text: str) -> list[Token]:
    """Split a transcript into tokens.

    Args:
        text: The full content of the output file.

    Returns:
        The tokens in source order. A list is returned so the sequence can be
        replayed from the start as many times as needed.
    """
    tokens = [
        Token(kind=classify_line(line), text=line, line_number=number)
        for number, line in enumerate(text.splitlines(), start=1)
    ]
    logger.debug(f"Tokenized transcript into {len(tokens)} tokens.")
    return tokens


def read_transcript(path: Path | str) -> str:
    """Read a whole transcript from disk.

    Raises:
        UnreadableInputError: If the file does not exist or cannot be read.
    """
    file_path = Path(path)
    try:
        return file_path.read_text(errors="replace")
    except OSError as e:
        logger.error(f"Could not read transcript {file_path}: {e}")
        raise UnreadableInputError(f"Cannot read transcript '{file_path}': {e}") from e
