from hartree.visualize.freq import plot_frequency_spectrum
from hartree.visualize.style import apply_development_style, apply_publication_style

__all__ = ["plot_frequency_spectrum", "apply_development_style", "apply_publication_style"]
