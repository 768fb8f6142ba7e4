import re

from hartree.exceptions import ParsingError
from hartree.parsers.gaussian.tokens import Token, TokenKind
from hartree.parsers.gaussian.typing import (
    MethodLine,
    RecognizerState,
    SectionEvent,
    SectionParser,
    SolventLine,
    TokenIterator,
)
from hartree.utils import logger

# --- Regex Patterns --- #
ROUTE_START_PAT = re.compile(r"^ #")
ROUTE_PREFIX_PAT = re.compile(r"^#[pnt]?$")
# functional/basis[/fitting]; excludes keyword=value and iop(x/y=z) tokens
METHOD_TOKEN_PAT = re.compile(r"^(?!iop)([^=/()\s]+)/([^=/\s]+)(?:/\S+)?$")
SCRF_PAT = re.compile(r"scrf=?\(([^)]*)\)|scrf=(\S+)")
SOLVENT_PAT = re.compile(r"solvent=([^,)\s]+)")
# Routes written by Gaussian itself for later links of a compound job
GENERATED_ROUTE_PAT = re.compile(r"\bgenchk\b")
# fmt:off
# Method families Gaussian may prefix with R/U/RO in generated routes
METHOD_STEMS = (
    "hf", "mp", "ccsd", "qcisd", "cis", "td", "am1", "pm", "svwn", "lsda", "blyp", "olyp", "bp86", "pw91",
    "pbe", "rev", "tpss", "b1", "b3", "b97", "bmk", "x3lyp", "o3lyp", "m0", "m1", "mn1", "sogga", "wb97",
    "cam-", "lc-", "hse", "hcth", "apf", "b2plyp", "dsd",
)
# fmt:on
RESTRICTION_PREFIX_PAT = re.compile(rf"^(?:ro|r|u)(?=(?:{'|'.join(map(re.escape, METHOD_STEMS))}))")


def join_route(lines: list[str]) -> str:
    """Glue wrapped route lines back together.

    Gaussian wraps the route at a fixed width, possibly in the middle of a word,
    and indents every line by one space.
    """
    return "".join(line[1:] if line.startswith(" ") else line for line in lines).strip()


def split_route(route: str) -> list[str]:
    """Split a route into keywords, keeping parenthesised option lists intact."""
    keywords: list[str] = []
    current: list[str] = []
    depth = 0
    for char in route:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char.isspace() and depth == 0:
            if current:
                keywords.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        keywords.append("".join(current))
    return keywords


def parse_route(route: str, line_number: int) -> list[SectionEvent]:
    """Extract the model chemistry and any solvent from a joined route string."""
    normalized = route.lower()
    keywords = split_route(normalized)
    if keywords and keywords[0].startswith("#"):
        first = keywords.pop(0)
        if not ROUTE_PREFIX_PAT.match(first):
            keywords.insert(0, first[1:])  # '#m062x/...' with no space after the hash

    events: list[SectionEvent] = []
    for keyword in keywords:
        match = METHOD_TOKEN_PAT.match(keyword)
        if match:
            functional, basis_set = match.group(1), match.group(2)
            if GENERATED_ROUTE_PAT.search(normalized):
                functional = RESTRICTION_PREFIX_PAT.sub("", functional)
            events.append(MethodLine(functional=functional, basis_set=basis_set, line_number=line_number))
            break

    scrf = SCRF_PAT.search(normalized)
    if scrf:
        options = scrf.group(1) if scrf.group(1) is not None else scrf.group(2)
        solvent = SOLVENT_PAT.search(options)
        if solvent:
            events.append(SolventLine(solvent=solvent.group(1), line_number=line_number))
    return events


class RouteParser(SectionParser):
    """Parses the route section (the '#' lines between two rules).

    Yields a MethodLine when a functional/basis keyword is present and a
    SolventLine when an SCRF solvent is requested.
    """

    name = "route"

    def matches(self, token: Token, state: RecognizerState) -> bool:
        return token.kind is TokenKind.TEXT and ROUTE_START_PAT.match(token.text) is not None

    def parse(self, iterator: TokenIterator, current: Token, state: RecognizerState) -> list[SectionEvent]:
        lines = [current.text]
        for token in iterator:
            if token.kind is not TokenKind.TEXT:
                if token.kind is not TokenKind.RULE:
                    state.buffered_token = token
                break
            lines.append(token.text)
        else:
            raise ParsingError(
                "Transcript ended inside the route section.", text=current.text, line_number=current.line_number
            )

        route = join_route(lines)
        logger.info(f"Found route at line {current.line_number}: {route}")
        events = parse_route(route, current.line_number)
        if not any(isinstance(event, MethodLine) for event in events):
            logger.debug("Route names no functional/basis pair.")
        return events
