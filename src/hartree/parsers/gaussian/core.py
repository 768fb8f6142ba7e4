from pathlib import Path

from hartree.parsers.gaussian.loader import SnapshotLoader
from hartree.parsers.gaussian.tokens import read_transcript, tokenize
from hartree.parsers.gaussian.typing import LoadResult, Snapshot
from hartree.utils import logger


# --- Public Entry Points --- #
def parse_gaussian_output(output: str, file_name: str | None = None) -> LoadResult:
    """
    Parses the text output of a Gaussian calculation into a snapshot.

    Args:
        output: The string content of the Gaussian output file.
        file_name: Optional name recorded on the snapshot.

    Returns:
        A LoadResult holding the Snapshot and any diagnostics. Damaged sections
        never raise; they show up as diagnostics instead.
    """
    logger.info("Starting Gaussian output parsing.")
    return SnapshotLoader().load(tokenize(output), file_name=file_name)


def load_gaussian_output(path: Path | str) -> LoadResult:
    """
    Reads and parses a Gaussian output file.

    Raises:
        UnreadableInputError: If the file cannot be opened or read.
    """
    file_path = Path(path)
    return parse_gaussian_output(read_transcript(file_path), file_name=file_path.name)


def load_snapshot(path: Path | str) -> Snapshot:
    """Shortcut for callers that only need the snapshot."""
    return load_gaussian_output(path).snapshot
