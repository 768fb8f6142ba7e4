"""Debugging tool that prints the token stream of a Gaussian transcript.

Usage::

    hartree-tokens path/to/job.out
    hartree-tokens path/to/job.out --kinds RULE TEXT
"""

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

from hartree.exceptions import UnreadableInputError
from hartree.parsers.gaussian.tokens import TokenKind, read_transcript, tokenize


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hartree-tokens", description="Print the tokens of a Gaussian output file.")
    parser.add_argument("file", help="The file to tokenize")
    parser.add_argument(
        "--kinds",
        nargs="+",
        choices=[kind.value for kind in TokenKind],
        help="Only print tokens of these kinds",
    )
    return parser


def dump_tokens(text: str, kinds: Sequence[str] | None = None, stream: TextIO | None = None) -> int:
    """Write one 'line  KIND  text' row per token to stream (stdout by default); returns the number written."""
    stream = sys.stdout if stream is None else stream
    wanted = {TokenKind(kind) for kind in kinds} if kinds else set(TokenKind)
    written = 0
    for token in tokenize(text):
        if token.kind in wanted:
            stream.write(f"{token}\n")
            written += 1
    return written


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        text = read_transcript(args.file)
    except UnreadableInputError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    dump_tokens(text, args.kinds)
    return 0


if __name__ == "__main__":
    sys.exit(main())
