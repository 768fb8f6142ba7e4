from collections.abc import Sequence

import plotly.graph_objects as go

from hartree.parsers.gaussian.typing import Snapshot
from hartree.visualize.style import MODE_COLORS, apply_development_style, apply_publication_style


def stick_coordinates(values: Sequence[float]) -> tuple[list[float | None], list[float | None]]:
    """Build x/y arrays drawing one vertical unit stick per value, separated by gaps."""
    xs: list[float | None] = []
    ys: list[float | None] = []
    for value in values:
        xs.extend([value, value, None])
        ys.extend([0.0, 1.0, None])
    return xs, ys


def plot_frequency_spectrum(snapshot: Snapshot, publication: bool = False, title: str | None = None) -> go.Figure:
    """Plot the snapshot's vibrational frequencies as a stick spectrum.

    Imaginary modes (printed by Gaussian as negative wavenumbers) get their own
    trace so they stand out.

    Args:
        snapshot: A parsed snapshot with at least one frequency.
        publication: Use the light publication style instead of the dark development one.
        title: Figure title; defaults to the snapshot's file name.

    Returns:
        A plotly Figure with one trace per mode kind present.

    Raises:
        ValueError: If the snapshot has no frequencies.
    """
    if not snapshot.frequency_values:
        raise ValueError("Snapshot has no vibrational frequencies to plot.")

    real = [value for value in snapshot.frequency_values if value >= 0]
    imaginary = [value for value in snapshot.frequency_values if value < 0]

    fig = go.Figure()
    for label, values in (("real", real), ("imaginary", imaginary)):
        if not values:
            continue
        xs, ys = stick_coordinates(values)
        fig.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                name=f"{label} modes ({len(values)})",
                line=dict(color=MODE_COLORS[label], width=2),
            )
        )

    fig.update_layout(
        title_text=title or snapshot.file_name or "Vibrational Frequencies",
        xaxis_title="Wavenumber (cm<sup>-1</sup>)",
        yaxis=dict(title_text="Mode", showticklabels=False, range=[0, 1.1]),
        showlegend=True,
    )
    if publication:
        apply_publication_style(fig)
    else:
        apply_development_style(fig)
    return fig
