class HartreeError(Exception):
    """Base class for exceptions in the hartree package."""

    pass


class ParsingError(HartreeError):
    """Exception raised for errors during file parsing.

    Block parsers attach the offending line so the recognizer can report it as
    a diagnostic instead of aborting the whole transcript.
    """

    def __init__(self, message: str, *, text: str | None = None, line_number: int | None = None) -> None:
        super().__init__(message)
        self.text = text
        self.line_number = line_number


class UnreadableInputError(HartreeError, OSError):
    """Exception raised when a transcript cannot be opened or read."""

    pass


class AtomOutOfRangeError(HartreeError, IndexError):
    """Exception raised when an atom id falls outside the current geometry."""

    def __init__(self, atom_id: int, atom_count: int) -> None:
        self.atom_id = atom_id
        self.atom_count = atom_count
        if atom_count:
            detail = f"valid ids are 1..{atom_count}"
        else:
            detail = "no geometry has been parsed"
        super().__init__(f"No atom with ID {atom_id} ({detail})")


class InternalCodeError(HartreeError):
    """Exception raised for errors in the internal code."""

    pass
