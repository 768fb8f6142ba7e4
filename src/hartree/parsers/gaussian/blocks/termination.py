import re
from datetime import datetime, timedelta

from hartree.exceptions import ParsingError
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import (
    RecognizerState,
    SectionEvent,
    SectionParser,
    TerminationLine,
    TokenIterator,
)
from hartree.utils import logger

# --- Regex Patterns --- #
# Job cpu time:       0 days  1 hours 23 minutes 45.6 seconds.
CPU_TIME_TRIGGER_PAT = re.compile(r"^\s*Job cpu time:")
CPU_TIME_PAT = re.compile(
    r"^\s*Job cpu time:\s*(\d+)\s+days?\s+(\d+)\s+hours?\s+(\d+)\s+minutes?\s+(\d+(?:\.\d*)?)\s+seconds?"
)
# Normal termination of Gaussian 09 at Thu Oct 11 13:02:57 2012.
NORMAL_TERM_PAT = re.compile(r"^\s*Normal termination of Gaussian\b")
TERM_DATE_PAT = re.compile(r"\bat\s+(\w{3}\s+\w{3}\s+\d{1,2}\s+\d{1,2}:\d{2}:\d{2}\s+\d{4})")
ERROR_TERM_PAT = re.compile(r"^\s*Error termination\b")

TERM_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"


def parse_cpu_time(token: Token) -> timedelta:
    match = CPU_TIME_PAT.search(token.text)
    if not match:
        raise ParsingError("Unreadable 'Job cpu time' line.", text=token.text, line_number=token.line_number)
    days, hours, minutes, seconds = match.groups()
    return timedelta(days=int(days), hours=int(hours), minutes=int(minutes), seconds=float(seconds))


def parse_termination_date(token: Token) -> datetime:
    match = TERM_DATE_PAT.search(token.text)
    if not match:
        raise ParsingError("Termination line has no timestamp.", text=token.text, line_number=token.line_number)
    # Single-digit days are padded with an extra space
    stamp = " ".join(match.group(1).split())
    try:
        return datetime.strptime(stamp, TERM_DATE_FORMAT)
    except ValueError as e:
        raise ParsingError(
            f"Could not parse termination timestamp '{stamp}': {e}", text=token.text, line_number=token.line_number
        ) from e


class TerminationParser(SectionParser):
    """Parses the end-of-step lines.

    'Job cpu time' precedes the termination line of the same step, so its
    duration is held in the recognizer state until 'Normal termination' closes
    the step. An error termination discards the pending duration.
    """

    name = "termination"

    def matches(self, token: Token, state: RecognizerState) -> bool:
        if token.kind is not TokenKind.TEXT:
            return False
        return any(pat.search(token.text) for pat in (CPU_TIME_TRIGGER_PAT, NORMAL_TERM_PAT, ERROR_TERM_PAT))

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        if CPU_TIME_TRIGGER_PAT.search(current.text):
            state.pending_cpu_time = None  # a malformed line must not leave a stale duration
            state.pending_cpu_time = parse_cpu_time(current)
            logger.debug(f"Found job cpu time {state.pending_cpu_time} at line {current.line_number}.")
            return []

        if ERROR_TERM_PAT.search(current.text):
            logger.warning(f"Error termination at line {current.line_number}: {current.text.strip()}")
            state.pending_cpu_time = None
            return []

        cpu_time, state.pending_cpu_time = state.pending_cpu_time, None
        timestamp = parse_termination_date(current)
        logger.info(f"Normal termination at {timestamp} (cpu time {cpu_time}).")
        return [TerminationLine(timestamp=timestamp, cpu_time=cpu_time, line_number=current.line_number)]
