"""Folds section events into a Snapshot.

Merge rules per event:

* geometry        replace the atom list wholesale
* frequencies     append, source order
* thermochemistry overwrite each supplied field
* scalar lines    overwrite (last write wins)
* atom count      only until the first geometry block
* termination     append timestamp and, if known, cpu time
* malformed       recorded as a diagnostic, snapshot untouched
"""

from collections.abc import Callable, Iterable
from pathlib import Path

from hartree.parsers.gaussian.recognizer import SectionRecognizer
from hartree.parsers.gaussian.tokens import Token, read_transcript, tokenize
from hartree.parsers.gaussian.typing import (
    AtomCountLine,
    ChargeMultiplicityLine,
    Diagnostic,
    DipoleLine,
    EnergyLine,
    FrequencyBlock,
    GeometryBlock,
    LoadResult,
    Malformed,
    MethodLine,
    SectionEvent,
    Snapshot,
    SolventLine,
    StoichiometryLine,
    SymmetryLine,
    TerminationLine,
    ThermochemistryBlock,
    Unrecognized,
    _MutableSnapshot,
)
from hartree.utils import logger


class SnapshotLoader:
    """Accumulates one transcript's section events into a Snapshot.

    A loader owns its working state exclusively; use a new instance (or
    ``reset``) per transcript.
    """

    def __init__(self, recognizer: SectionRecognizer | None = None) -> None:
        self.recognizer = recognizer or SectionRecognizer()
        self._handlers: dict[type, Callable] = {
            GeometryBlock: self._apply_geometry,
            FrequencyBlock: self._apply_frequencies,
            ThermochemistryBlock: self._apply_thermochemistry,
            EnergyLine: self._apply_energy,
            ChargeMultiplicityLine: self._apply_charge_multiplicity,
            SymmetryLine: self._apply_symmetry,
            SolventLine: self._apply_solvent,
            MethodLine: self._apply_method,
            StoichiometryLine: self._apply_stoichiometry,
            DipoleLine: self._apply_dipole,
            AtomCountLine: self._apply_atom_count,
            TerminationLine: self._apply_termination,
            Unrecognized: self._apply_unrecognized,
            Malformed: self._apply_malformed,
        }
        self.reset()

    def reset(self, file_name: str | None = None) -> None:
        self._data = _MutableSnapshot(file_name=file_name)
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    # --- Public API --- #

    def apply(self, event: SectionEvent) -> None:
        """Merge one section event into the working snapshot."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported section event: {type(event).__name__}")
        handler(event)

    def finalize(self) -> Snapshot:
        return Snapshot.from_mutable(self._data)

    def load(self, tokens: Iterable[Token], file_name: str | None = None) -> LoadResult:
        """Run the recognizer over the tokens and fold every event.

        Args:
            tokens: The tokenized transcript.
            file_name: Optional name recorded on the snapshot.

        Returns:
            The finished snapshot and the diagnostics collected on the way.
        """
        self.reset(file_name)
        for event in self.recognizer.events(tokens):
            self.apply(event)
        snapshot = self.finalize()
        logger.info(f"Snapshot loaded: {snapshot!r}; {len(self._diagnostics)} diagnostic(s).")
        return LoadResult(snapshot=snapshot, diagnostics=tuple(self._diagnostics))

    def load_text(self, text: str, file_name: str | None = None) -> LoadResult:
        return self.load(tokenize(text), file_name=file_name)

    def load_file(self, path: Path | str) -> LoadResult:
        """Load a transcript from disk; raises UnreadableInputError before parsing if it cannot be read."""
        file_path = Path(path)
        return self.load_text(read_transcript(file_path), file_name=file_path.name)

    # --- Merge rules --- #

    def _apply_geometry(self, event: GeometryBlock) -> None:
        self._data.atoms = list(event.atoms)
        self._data.atom_count = len(event.atoms)
        self._data.seen_geometry = True
        logger.debug(f"Replaced geometry with {len(event.atoms)} atoms ({event.orientation} orientation).")

    def _apply_frequencies(self, event: FrequencyBlock) -> None:
        self._data.frequency_values.extend(event.values)
        logger.debug(f"Appended {len(event.values)} frequencies (total {len(self._data.frequency_values)}).")

    def _apply_thermochemistry(self, event: ThermochemistryBlock) -> None:
        for field_name in ("zpe_correction", "gibbs_298", "rot_part", "trans_part"):
            value = getattr(event, field_name)
            if value is not None:
                setattr(self._data, field_name, value)
                logger.debug(f"Set {field_name} = {value}")

    def _apply_energy(self, event: EnergyLine) -> None:
        self._data.electronic_energy = event.energy

    def _apply_charge_multiplicity(self, event: ChargeMultiplicityLine) -> None:
        self._data.charge = event.charge
        self._data.multiplicity = event.multiplicity

    def _apply_symmetry(self, event: SymmetryLine) -> None:
        self._data.symmetric_top = event.symmetric_top

    def _apply_solvent(self, event: SolventLine) -> None:
        self._data.solvent = event.solvent

    def _apply_method(self, event: MethodLine) -> None:
        self._data.functional = event.functional
        self._data.basis_set = event.basis_set
        logger.debug(f"Set model chemistry {event.functional}/{event.basis_set}")

    def _apply_stoichiometry(self, event: StoichiometryLine) -> None:
        self._data.stoichiometry = event.stoichiometry

    def _apply_dipole(self, event: DipoleLine) -> None:
        self._data.dipole_moment_total = event.total

    def _apply_atom_count(self, event: AtomCountLine) -> None:
        if self._data.seen_geometry:
            logger.debug(f"Ignoring NAtoms={event.count}; geometry already parsed.")
            return
        self._data.atom_count = event.count

    def _apply_termination(self, event: TerminationLine) -> None:
        self._data.termination_dates.append(event.timestamp)
        if event.cpu_time is not None:
            self._data.cpu_times.append(event.cpu_time)

    def _apply_unrecognized(self, event: Unrecognized) -> None:
        logger.debug(f"Skipped {event.n_tokens} unrecognized line(s) starting at line {event.line_number}.")

    def _apply_malformed(self, event: Malformed) -> None:
        diagnostic = Diagnostic(
            kind="malformed",
            section=event.section,
            text=event.text,
            line_number=event.line_number,
            reason=event.reason,
        )
        logger.warning(f"Diagnostic recorded: {diagnostic}")
        self._diagnostics.append(diagnostic)
