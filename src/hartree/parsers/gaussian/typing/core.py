from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Literal

from hartree.exceptions import AtomOutOfRangeError


@dataclass(frozen=True)
class Atom:
    """Represents an atom in the molecular geometry."""

    symbol: str
    atomic_number: int
    x: float  # Angstrom
    y: float  # Angstrom
    z: float  # Angstrom


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while extracting a snapshot."""

    kind: Literal["malformed"]
    section: str
    text: str
    line_number: int
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.section} {self.kind} ({self.reason}): '{self.text.strip()}'"


# --- Mutable Data Structure (used during loading) --- #
@dataclass
class _MutableSnapshot:
    """Mutable version of Snapshot, owned by a single SnapshotLoader."""

    file_name: str | None = None
    multiplicity: int | None = None
    charge: int | None = None
    functional: str | None = None
    basis_set: str | None = None
    solvent: str | None = None
    stoichiometry: str | None = None
    zpe_correction: float | None = None
    dipole_moment_total: float | None = None
    gibbs_298: float | None = None
    electronic_energy: float | None = None
    rot_part: float | None = None
    trans_part: float | None = None
    symmetric_top: bool | None = None
    atom_count: int | None = None
    atoms: list[Atom] = field(default_factory=list)
    frequency_values: list[float] = field(default_factory=list)
    termination_dates: list[datetime] = field(default_factory=list)
    cpu_times: list[timedelta] = field(default_factory=list)
    # Set once any geometry block is applied; an explicit NAtoms count is ignored afterwards
    seen_geometry: bool = False


@dataclass(frozen=True)
class Snapshot:
    """Immutable structured result for one Gaussian transcript."""

    file_name: str | None = None
    multiplicity: int | None = None
    charge: int | None = None
    functional: str | None = None
    basis_set: str | None = None
    solvent: str | None = None
    stoichiometry: str | None = None
    zpe_correction: float | None = None
    dipole_moment_total: float | None = None
    gibbs_298: float | None = None
    electronic_energy: float | None = None
    rot_part: float | None = None
    trans_part: float | None = None
    symmetric_top: bool | None = None
    atom_count: int | None = None
    atoms: Sequence[Atom] = ()
    frequency_values: Sequence[float] = ()
    termination_dates: Sequence[datetime] = ()
    cpu_times: Sequence[timedelta] = ()

    @classmethod
    def from_mutable(cls, mutable_data: _MutableSnapshot) -> "Snapshot":
        """Freezes the loader's working state.

        When atoms are present their count is authoritative; an explicit count
        from the transcript survives only if no geometry was ever parsed.
        """
        atom_count = len(mutable_data.atoms) if mutable_data.atoms else mutable_data.atom_count
        return cls(
            file_name=mutable_data.file_name,
            multiplicity=mutable_data.multiplicity,
            charge=mutable_data.charge,
            functional=mutable_data.functional,
            basis_set=mutable_data.basis_set,
            solvent=mutable_data.solvent,
            stoichiometry=mutable_data.stoichiometry,
            zpe_correction=mutable_data.zpe_correction,
            dipole_moment_total=mutable_data.dipole_moment_total,
            gibbs_298=mutable_data.gibbs_298,
            electronic_energy=mutable_data.electronic_energy,
            rot_part=mutable_data.rot_part,
            trans_part=mutable_data.trans_part,
            symmetric_top=mutable_data.symmetric_top,
            atom_count=atom_count,
            atoms=tuple(mutable_data.atoms),
            frequency_values=tuple(mutable_data.frequency_values),
            termination_dates=tuple(mutable_data.termination_dates),
            cpu_times=tuple(mutable_data.cpu_times),
        )

    @property
    def n_atoms(self) -> int:
        return len(self.atoms)

    @property
    def is_complete(self) -> bool:
        """True if at least one calculation step terminated normally."""
        return bool(self.termination_dates)

    def get_atom_by_id(self, atom_id: int) -> Atom:
        """Look up an atom of the most recent geometry by its 1-based id.

        Args:
            atom_id: Identifier in ``1..n_atoms``.

        Returns:
            The atom at position ``atom_id - 1``.

        Raises:
            TypeError: If ``atom_id`` is not an integer.
            AtomOutOfRangeError: If ``atom_id`` is outside ``1..n_atoms``.
        """
        if isinstance(atom_id, bool) or not isinstance(atom_id, int):
            raise TypeError(f"Atom id must be an integer, got {type(atom_id).__name__}")
        if atom_id < 1 or atom_id > len(self.atoms):
            raise AtomOutOfRangeError(atom_id, len(self.atoms))
        return self.atoms[atom_id - 1]

    def __repr__(self) -> str:
        energy_str = f"{self.electronic_energy:.8f}" if self.electronic_energy is not None else "None"
        return (
            f"{type(self).__name__}(functional='{self.functional}', basis='{self.basis_set}', "
            f"electronic_energy={energy_str}, n_atoms={self.n_atoms}, "
            f"n_frequencies={len(self.frequency_values)}, n_steps={len(self.termination_dates)})"
        )


@dataclass(frozen=True)
class LoadResult:
    """A snapshot together with the diagnostics collected while building it."""

    snapshot: Snapshot
    diagnostics: Sequence[Diagnostic] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics
