from collections.abc import Callable
from pathlib import Path

import pytest

from hartree.parsers import gaussian
from hartree.parsers.gaussian.tokens import Token, tokenize
from hartree.parsers.gaussian.typing import LoadResult, RecognizerState

# Load the example output file content once
ex_folder = Path(__file__).resolve().parents[3] / "data" / "calculations" / "examples" / "gaussian"
EXAMPLE_OPT_FREQ_PATH = ex_folder / "gluc-na" / "glucNa3eO4areacttwater.out"


@pytest.fixture(scope="module")
def example_opt_freq_path() -> Path:
    return EXAMPLE_OPT_FREQ_PATH


@pytest.fixture(scope="module")
def parsed_opt_freq() -> LoadResult:
    """Fixture to parse the two-step opt+freq output for glucose-Na in water."""
    return gaussian.load_gaussian_output(EXAMPLE_OPT_FREQ_PATH)


@pytest.fixture(scope="module")
def opt_freq_tokens() -> list[Token]:
    return tokenize(EXAMPLE_OPT_FREQ_PATH.read_text())


@pytest.fixture
def state() -> RecognizerState:
    """Provides a fresh recognizer state for each test."""
    return RecognizerState()


def make_tokens(*lines: str) -> list[Token]:
    """Tokenize literal transcript lines, numbered from 1."""
    return tokenize("\n".join(lines))


@pytest.fixture
def tokens_from() -> Callable[..., list[Token]]:
    """Provides a helper that tokenizes literal transcript lines."""
    return make_tokens
