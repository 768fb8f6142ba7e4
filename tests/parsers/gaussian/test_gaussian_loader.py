import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from _pytest.logging import LogCaptureFixture

from hartree.exceptions import UnreadableInputError
from hartree.parsers.gaussian.loader import SnapshotLoader
from hartree.parsers.gaussian.tokens import Token
from hartree.parsers.gaussian.typing import (
    Atom,
    AtomCountLine,
    ChargeMultiplicityLine,
    DipoleLine,
    EnergyLine,
    FrequencyBlock,
    GeometryBlock,
    Malformed,
    MethodLine,
    TerminationLine,
    ThermochemistryBlock,
    Unrecognized,
)


def _atoms(n: int) -> tuple[Atom, ...]:
    return tuple(Atom(symbol="C", atomic_number=6, x=float(i), y=0.0, z=0.0) for i in range(n))


@pytest.fixture
def loader() -> SnapshotLoader:
    """Provides a fresh loader for each test."""
    return SnapshotLoader()


# === Merge rules ===


def test_last_geometry_wins(loader: SnapshotLoader) -> None:
    loader.apply(GeometryBlock(atoms=_atoms(5), orientation="input", line_number=10))
    loader.apply(GeometryBlock(atoms=_atoms(7), orientation="standard", line_number=50))
    snapshot = loader.finalize()

    assert snapshot.n_atoms == 7
    assert snapshot.atom_count == 7
    assert snapshot.get_atom_by_id(7).x == 6.0


def test_frequencies_accumulate_in_source_order(loader: SnapshotLoader) -> None:
    loader.apply(FrequencyBlock(values=(60.7784, 90.3398), line_number=100))
    loader.apply(FrequencyBlock(values=(120.5,), line_number=200))

    assert list(loader.finalize().frequency_values) == [60.7784, 90.3398, 120.5]


def test_scalar_values_are_overwritten(loader: SnapshotLoader) -> None:
    loader.apply(MethodLine(functional="b3lyp", basis_set="6-31g(d)", line_number=1))
    loader.apply(EnergyLine(energy=-849.1, line_number=2))
    loader.apply(MethodLine(functional="m062x", basis_set="6-31+g(2df,p)", line_number=3))
    loader.apply(EnergyLine(energy=-849.2, line_number=4))
    snapshot = loader.finalize()

    assert snapshot.functional == "m062x"
    assert snapshot.basis_set == "6-31+g(2df,p)"
    assert snapshot.electronic_energy == -849.2


def test_thermochemistry_only_sets_supplied_fields(loader: SnapshotLoader) -> None:
    loader.apply(ThermochemistryBlock(line_number=1, zpe_correction=0.18, gibbs_298=-849.0, rot_part=4.0e5))
    loader.apply(ThermochemistryBlock(line_number=2, trans_part=1.4e8))
    snapshot = loader.finalize()

    assert snapshot.zpe_correction == 0.18
    assert snapshot.gibbs_298 == -849.0
    assert snapshot.rot_part == 4.0e5
    assert snapshot.trans_part == 1.4e8


def test_atom_count_without_geometry(loader: SnapshotLoader) -> None:
    loader.apply(AtomCountLine(count=24, line_number=1))
    snapshot = loader.finalize()

    assert snapshot.atom_count == 24
    assert snapshot.n_atoms == 0


def test_atom_count_ignored_after_geometry(loader: SnapshotLoader) -> None:
    loader.apply(AtomCountLine(count=99, line_number=1))
    loader.apply(GeometryBlock(atoms=_atoms(3), orientation="standard", line_number=2))
    loader.apply(AtomCountLine(count=42, line_number=3))

    assert loader.finalize().atom_count == 3


def test_termination_appends_timestamp_and_cpu_time(loader: SnapshotLoader) -> None:
    first = datetime(2012, 10, 11, 13, 2, 57)
    second = datetime(2012, 10, 11, 14, 10, 3)
    loader.apply(TerminationLine(timestamp=first, line_number=1, cpu_time=timedelta(hours=1)))
    loader.apply(TerminationLine(timestamp=second, line_number=2))
    snapshot = loader.finalize()

    assert list(snapshot.termination_dates) == [first, second]
    assert list(snapshot.cpu_times) == [timedelta(hours=1)]


def test_malformed_becomes_diagnostic(loader: SnapshotLoader, caplog: LogCaptureFixture) -> None:
    loader.apply(ChargeMultiplicityLine(charge=0, multiplicity=1, line_number=1))
    with caplog.at_level(logging.WARNING, logger="hartree"):
        loader.apply(Malformed(section="dipole", text=" Tot= ****", line_number=7, reason="bad total"))

    (diagnostic,) = loader.diagnostics
    assert diagnostic.kind == "malformed"
    assert diagnostic.section == "dipole"
    assert diagnostic.line_number == 7
    assert "line 7" in caplog.text
    # The snapshot is untouched
    assert loader.finalize().multiplicity == 1
    assert loader.finalize().dipole_moment_total is None


def test_unrecognized_changes_nothing(loader: SnapshotLoader) -> None:
    before = loader.finalize()
    loader.apply(Unrecognized(text=" Entering Gaussian System", line_number=1))
    assert loader.finalize() == before
    assert loader.diagnostics == []


def test_unsupported_event_raises(loader: SnapshotLoader) -> None:
    with pytest.raises(TypeError, match="Unsupported section event"):
        loader.apply("not an event")  # type: ignore[arg-type]


def test_reset_clears_state(loader: SnapshotLoader) -> None:
    loader.apply(DipoleLine(total=2.5, line_number=1))
    loader.apply(Malformed(section="scf_energy", text=" SCF Done:", line_number=2, reason="no energy"))
    loader.reset("next.out")

    snapshot = loader.finalize()
    assert snapshot.file_name == "next.out"
    assert snapshot.dipole_moment_total is None
    assert loader.diagnostics == []


# === Whole-transcript loading ===


def test_load_is_idempotent(opt_freq_tokens: list[Token]) -> None:
    """Replaying the same tokens gives an equal snapshot, with one loader or with two."""
    loader = SnapshotLoader()
    first = loader.load(opt_freq_tokens, file_name="job.out")
    second = loader.load(opt_freq_tokens, file_name="job.out")
    third = SnapshotLoader().load(opt_freq_tokens, file_name="job.out")

    assert first == second == third
    assert len(first.snapshot.frequency_values) == 6


def test_load_degrades_gracefully(tokens_from: Callable[..., list[Token]]) -> None:
    """One damaged block is reported and everything else is still extracted."""
    tokens = tokens_from(
        " # m062x/6-31+g(2df,p) freq scrf=(solvent=water)",
        " ----------------------------------------------",
        " Charge =  0 Multiplicity = 1",
        " Dipole moment (field-independent basis, Debye):",
        "    X=  1.0  Y=  2.0  Z=  3.0  Tot=  ******",
        " SCF Done:  E(RM062X) =  -849.236562278     A.U. after   13 cycles",
        " Normal termination of Gaussian 09 at Thu Oct 11 13:02:57 2012.",
    )
    result = SnapshotLoader().load(tokens, file_name="damaged.out")

    assert not result.ok
    (diagnostic,) = result.diagnostics
    assert diagnostic.section == "dipole"
    assert diagnostic.line_number == 5
    snapshot = result.snapshot
    assert snapshot.file_name == "damaged.out"
    assert snapshot.functional == "m062x"
    assert snapshot.solvent == "water"
    assert snapshot.multiplicity == 1
    assert snapshot.electronic_energy == pytest.approx(-849.236562278)
    assert snapshot.dipole_moment_total is None
    assert snapshot.is_complete


def test_load_skips_damaged_frequency_block(tokens_from: Callable[..., list[Token]]) -> None:
    """A damaged middle block is dropped while its neighbours are kept in order."""
    header = " Harmonic frequencies (cm**-1), IR intensities (KM/Mole), Raman scattering"
    tokens = tokens_from(
        header,
        " ",
        " Frequencies --     60.7784                90.3398",
        " ",
        header,
        " ",
        " Frequencies --     75.1000               ********",
        " ",
        header,
        " ",
        " Frequencies --    120.5000",
        " ",
    )
    result = SnapshotLoader().load(tokens, file_name="freq.out")

    assert list(result.snapshot.frequency_values) == pytest.approx([60.7784, 90.3398, 120.5])
    (diagnostic,) = result.diagnostics
    assert diagnostic.section == "frequencies"
    assert diagnostic.line_number == 7
    assert "********" in diagnostic.text


def test_load_text_of_empty_transcript() -> None:
    result = SnapshotLoader().load_text("")

    assert result.ok
    assert result.snapshot.n_atoms == 0
    assert result.snapshot.atom_count is None
    assert result.snapshot.frequency_values == ()
    assert result.snapshot.is_complete is False


def test_load_file_records_file_name(example_opt_freq_path: Path) -> None:
    result = SnapshotLoader().load_file(example_opt_freq_path)
    assert result.snapshot.file_name == "glucNa3eO4areacttwater.out"


def test_load_file_missing(tmp_path: Path) -> None:
    with pytest.raises(UnreadableInputError):
        SnapshotLoader().load_file(tmp_path / "nope.out")
