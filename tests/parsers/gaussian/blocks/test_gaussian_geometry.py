from collections.abc import Callable

import pytest

from hartree.exceptions import InternalCodeError
from hartree.parsers.gaussian.blocks.geometry import GeometryParser, element_symbol, parse_atom_row
from hartree.parsers.gaussian.tokens import Token
from hartree.parsers.gaussian.typing import Atom, GeometryBlock, Malformed, RecognizerState

RULE = " ---------------------------------------------------------------------"
HEADER = [
    RULE,
    " Center     Atomic      Atomic             Coordinates (Angstroms)",
    " Number     Number       Type             X           Y           Z",
    RULE,
]
ROWS = [
    "      1          8           0        0.000000    0.000000    0.117790",
    "      2          1           0        0.000000    0.755453   -0.471161",
    "      3          1           0        0.000000   -0.755453   -0.471161",
]


@pytest.fixture
def parser() -> GeometryParser:
    return GeometryParser()


def run(parser: GeometryParser, tokens: list[Token], state: RecognizerState) -> list:
    return parser.parse(iter(tokens[1:]), tokens[0], state)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("                          Standard orientation:", True),
        ("                          Input orientation:", True),
        ("                         Z-Matrix orientation:", True),
        (" Rotational constants (GHZ):  0.99125  0.51833  0.41722", False),
        (" Standard basis: 6-31+G(2df,p) (6D, 7F)", False),
    ],
)
def test_geometry_matches(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState, line: str, expected: bool
) -> None:
    assert parser.matches(tokens_from(line)[0], state) is expected


def test_geometry_parse_standard_orientation(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState
) -> None:
    """A complete table yields one GeometryBlock with atoms in table order."""
    tokens = tokens_from("                          Standard orientation:", *HEADER, *ROWS, RULE)
    events = run(parser, tokens, state)

    assert len(events) == 1
    block = events[0]
    assert isinstance(block, GeometryBlock)
    assert block.orientation == "standard"
    assert block.line_number == 1
    assert [atom.symbol for atom in block.atoms] == ["O", "H", "H"]
    assert block.atoms[1] == Atom(symbol="H", atomic_number=1, x=0.0, y=0.755453, z=-0.471161)
    assert state.buffered_token is None


def test_geometry_parse_input_orientation_without_type_column(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState
) -> None:
    """Older output omits the 'Atomic Type' column."""
    tokens = tokens_from(
        "                          Input orientation:",
        *HEADER,
        "    1          6             0.000000    0.000000    0.000000",
        "    2         11             1.950000    0.000000    0.000000",
        RULE,
    )
    (block,) = run(parser, tokens, state)

    assert isinstance(block, GeometryBlock)
    assert block.orientation == "input"
    assert [(atom.symbol, atom.atomic_number) for atom in block.atoms] == [("C", 6), ("Na", 11)]
    assert block.atoms[1].x == pytest.approx(1.95)


def test_geometry_parse_z_matrix_with_dummy_atom(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState
) -> None:
    """Dummy atoms carry atomic number -1 and are kept as 'X' centers."""
    tokens = tokens_from(
        "                         Z-Matrix orientation:",
        *HEADER,
        "      1          6           0        0.000000    0.000000    0.000000",
        "      2         -1           0        0.000000    0.000000    1.000000",
        "      3          1           0        1.089000    0.000000    0.000000",
        RULE,
    )
    (block,) = run(parser, tokens, state)

    assert isinstance(block, GeometryBlock)
    assert block.orientation == "z-matrix"
    assert [(atom.symbol, atom.atomic_number) for atom in block.atoms] == [("C", 6), ("X", -1), ("H", 1)]
    assert block.atoms[1].z == pytest.approx(1.0)


def test_geometry_parse_bad_row_is_malformed(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState
) -> None:
    """A damaged row invalidates the table but the rest of it is still consumed."""
    tokens = tokens_from(
        "                          Standard orientation:",
        *HEADER,
        ROWS[0],
        "      2          1           0        0.000000    ******   -0.471161",
        ROWS[2],
        RULE,
        " Rotational constants (GHZ):  0.99125  0.51833  0.41722",
    )
    iterator = iter(tokens[1:])
    events = parser.parse(iterator, tokens[0], state)

    assert len(events) == 1
    malformed = events[0]
    assert isinstance(malformed, Malformed)
    assert malformed.section == "geometry"
    assert malformed.line_number == 7
    assert "******" in malformed.text
    # The closing rule was consumed, the following line was not
    assert next(iterator).text.startswith(" Rotational constants")


def test_geometry_parse_truncated_table(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState
) -> None:
    tokens = tokens_from("                          Standard orientation:", *HEADER, ROWS[0])
    (event,) = run(parser, tokens, state)

    assert isinstance(event, Malformed)
    assert "ended inside orientation table" in event.reason
    assert event.line_number == 1


def test_geometry_parse_empty_table(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState
) -> None:
    tokens = tokens_from("                          Standard orientation:", *HEADER, RULE)
    (event,) = run(parser, tokens, state)

    assert isinstance(event, Malformed)
    assert event.reason == "orientation table has no atoms"


def test_parse_atom_row(tokens_from: Callable[..., list[Token]]) -> None:
    atom = parse_atom_row(tokens_from("     24         11           0        3.398215    1.215783   -1.103564")[0])
    assert atom.symbol == "Na"
    assert atom.atomic_number == 11
    assert (atom.x, atom.y, atom.z) == pytest.approx((3.398215, 1.215783, -1.103564))


@pytest.mark.parametrize(
    "atomic_number, symbol",
    [(1, "H"), (6, "C"), (11, "Na"), (118, "Og"), (0, "X"), (-1, "X"), (119, "X")],
)
def test_element_symbol(atomic_number: int, symbol: str) -> None:
    assert element_symbol(atomic_number) == symbol


def test_geometry_in_example_output(parsed_opt_freq) -> None:
    """The last orientation table of the job defines the snapshot geometry."""
    snapshot = parsed_opt_freq.snapshot
    assert snapshot.n_atoms == 24
    assert snapshot.atoms[0].x == pytest.approx(1.392004)
    assert snapshot.atoms[7].y == pytest.approx(-2.648917)
    assert snapshot.atoms[23].symbol == "Na"


def test_geometry_parse_non_matching_line_is_internal_error(
    parser: GeometryParser, tokens_from: Callable[..., list[Token]], state: RecognizerState
) -> None:
    with pytest.raises(InternalCodeError):
        run(parser, tokens_from(" Rotational constants (GHZ):  0.99125  0.51833  0.41722", *ROWS), state)
