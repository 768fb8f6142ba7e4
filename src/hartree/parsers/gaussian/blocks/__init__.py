from hartree.parsers.gaussian.blocks.dipole import DipoleParser
from hartree.parsers.gaussian.blocks.energy import ScfEnergyParser
from hartree.parsers.gaussian.blocks.frequencies import FrequencyParser
from hartree.parsers.gaussian.blocks.geometry import GeometryParser
from hartree.parsers.gaussian.blocks.metadata import MetadataParser
from hartree.parsers.gaussian.blocks.route import RouteParser
from hartree.parsers.gaussian.blocks.termination import TerminationParser
from hartree.parsers.gaussian.blocks.thermochemistry import ThermochemistryParser

__all__ = [
    "DipoleParser",
    "FrequencyParser",
    "GeometryParser",
    "MetadataParser",
    "RouteParser",
    "ScfEnergyParser",
    "TerminationParser",
    "ThermochemistryParser",
]
