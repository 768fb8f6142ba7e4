"""
Plotting style definitions for snapshot figures.
"""

from typing import Any

import plotly.graph_objects as go

# -----------------------------------------------------------------------------
# Style parameters
# -----------------------------------------------------------------------------

FONT_FAMILY = "Helvetica"
FONT_COLOR = "#333333"

FONT_SIZES: dict[str, int] = {
    "title": 20,
    "axis_title": 16,
    "tick_label": 16,
    "legend": 12,
}

AXIS_STYLE: dict[str, Any] = {
    "showgrid": True,
    "gridwidth": 1,
    "gridcolor": "#E7E7E7",
    "zeroline": False,
    "linewidth": 2,
    "linecolor": "#333333",
}

LAYOUT_STYLE: dict[str, Any] = {
    "plot_bgcolor": "#FBFCFF",
    "paper_bgcolor": "#FBFCFF",
    "margin": dict(t=40, b=40, r=40),
}

DEVELOPMENT_STYLE: dict[str, Any] = {
    "template": "plotly_dark",
    "plot_bgcolor": "black",
    "paper_bgcolor": "black",
    "font": dict(color="white"),
}

# Stick colors for real and imaginary vibrational modes
MODE_COLORS: dict[str, str] = {
    "real": "#2F6DB5",
    "imaginary": "#C8423B",
}


# -----------------------------------------------------------------------------
# Styling functions
# -----------------------------------------------------------------------------


def get_font_dict(size: int, bold: bool = False) -> dict[str, Any]:
    """Helper function to create consistent font dictionaries."""
    return dict(
        family=FONT_FAMILY,
        size=size,
        color=FONT_COLOR,
        weight="bold" if bold else None,
    )


def update_axis(axis: go.layout.XAxis | go.layout.YAxis, axis_style: dict[str, Any]) -> None:
    axis.update(
        axis_style,
        title_font=get_font_dict(FONT_SIZES["axis_title"], bold=True),
        tickfont=get_font_dict(FONT_SIZES["tick_label"]),
    )


def apply_publication_style(fig: go.Figure, **kwargs: Any) -> None:
    """Apply publication-quality fonts, axes and background to a figure.

    Args:
        fig: A plotly figure
        **kwargs: Additional layout parameters to override defaults
    """
    fig.update_layout(font=get_font_dict(FONT_SIZES["tick_label"]))
    if fig.layout.title is not None:
        fig.layout.title.update(font=get_font_dict(FONT_SIZES["title"], bold=True))

    for key in fig.layout:
        if key.startswith("xaxis") or key.startswith("yaxis"):
            update_axis(getattr(fig.layout, key), AXIS_STYLE)

    layout_style: dict[str, Any] = LAYOUT_STYLE.copy()
    layout_style.update(kwargs)
    fig.update_layout(layout_style, legend=dict(font=get_font_dict(FONT_SIZES["legend"])))


def apply_development_style(fig: go.Figure) -> None:
    """Apply dark theme development styling to a figure."""
    fig.update_layout(**DEVELOPMENT_STYLE)
