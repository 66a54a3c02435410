"""
Visualization functions for the image-to-music pipeline.

This module provides diagnostic plots for the two intermediate products of
the pipeline: the feature profiles of an analysis and the generated notes.
"""

from collections.abc import Sequence

from matplotlib.figure import Figure

from toposonics.models import ImageAnalysisResult, NoteEvent
from toposonics.scales import midi_to_pitch

VOICE_COLORS = {
    "bass": "#1f77b4",
    "melody": "#d62728",
    "pad": "#2ca02c",
    "fx": "#9467bd",
}


def _note_color(event: NoteEvent):
    from matplotlib.colors import hsv_to_rgb

    if event.voice in VOICE_COLORS:
        return VOICE_COLORS[event.voice]
    return hsv_to_rgb(((event.midi % 12) / 12.0, 0.8, 0.85))


def create_piano_roll_visualization(
    events: Sequence[NoteEvent],
    *,
    width_px: int = 1200,
    note_h_in: float = 0.28,
    max_h_in: float = 12.0,
    min_h_in: float = 2.0,
    dpi: int = 150,
    margin_frac: float = 0.05,
) -> Figure:
    """Create a piano roll visualization of note events with note labels.

    Generates a horizontal timeline chart showing notes as colored bars,
    with each row representing a different pitch. Voice-tagged notes are
    colored per voice; untagged notes by pitch class. The bar opacity
    follows velocity.

    Args:
        events: Sequence of note events to visualize.
        width_px: Logical bitmap width in pixels (default 1200).
        note_h_in: Physical height per pitch row in inches (default 0.28).
        max_h_in: Maximum figure height in inches (default 12.0).
        min_h_in: Minimum figure height in inches (default 2.0).
        dpi: Raster resolution for output (default 150).
        margin_frac: Fraction of row height to leave as margin (default 0.05).

    Returns:
        Matplotlib Figure object containing the piano roll visualization.
        Returns a figure with "No note events" message if events is empty.
    """
    import matplotlib.patches as patches
    from matplotlib.lines import Line2D

    # ---------- empty case ----------
    if not events:
        fig = Figure(figsize=(width_px / dpi, min_h_in), dpi=dpi)
        ax = fig.add_subplot()
        ax.text(
            0.5, 0.5, "No note events", ha="center", va="center", transform=ax.transAxes
        )
        ax.axis("off")
        return fig

    # ---------- basic extents ----------
    lo_note = min(e.midi for e in events)
    hi_note = max(e.midi for e in events)
    lo_beat = min(e.start for e in events)
    hi_beat = max(e.end for e in events)

    pitch_span = hi_note - lo_note + 1  # number of rows

    # ---------- figure size ----------
    height_in = max(min_h_in, min(max_h_in, pitch_span * note_h_in))
    fig = Figure(figsize=(width_px / dpi, height_in), dpi=dpi)
    ax = fig.add_subplot()

    ax.set_xlim(lo_beat, hi_beat)
    ax.set_ylim(lo_note - 0.5, hi_note + 0.5)  # rows are centred on ints

    for k in range(pitch_span + 1):
        ax.axhline(lo_note - 0.5 + k, color="lightgray", linewidth=0.5, zorder=0)

    # ---------- note rectangles ----------
    cell_h = 1 - 2 * margin_frac
    y_shift = 0.5 - margin_frac
    for ev in events:
        ax.add_patch(
            patches.Rectangle(
                (ev.start, ev.midi - y_shift),
                ev.duration,
                cell_h,
                facecolor=_note_color(ev),
                edgecolor="black",
                linewidth=0.6,
                alpha=0.35 + 0.65 * ev.velocity,
                zorder=1,
            )
        )

    # ---------- note name labels ----------
    visible_notes = range(lo_note, hi_note + 1)
    ax.set_yticks(list(visible_notes))
    ax.set_yticklabels([midi_to_pitch(n) for n in visible_notes], fontsize=8)

    voices = [v for v in VOICE_COLORS if any(e.voice == v for e in events)]
    if voices:
        handles = [Line2D([0], [0], color=VOICE_COLORS[v], linewidth=6) for v in voices]
        ax.legend(handles, voices, loc="upper right", fontsize=8)

    ax.set_xlabel("Time (beats)", fontsize=10)
    ax.set_ylabel("Note", fontsize=10)
    for spine_name, spine in ax.spines.items():
        if spine_name not in ("left", "bottom"):
            spine.set_visible(False)

    ax.set_facecolor("white")
    fig.tight_layout()
    return fig


def create_profile_visualization(
    analysis: ImageAnalysisResult | None,
    *,
    width_px: int = 1200,
    row_h_in: float = 1.6,
    dpi: int = 150,
) -> Figure:
    """Plot every available profile of an analysis on a shared x axis.

    Brightness is shown on its native 0-255 scale; the derived profiles on
    0-1.

    Returns:
        Matplotlib Figure with one row per profile, or a placeholder figure
        when there is nothing to plot.
    """
    profiles = []
    if analysis is not None:
        candidates = [
            ("brightness", analysis.brightness_profile, (0, 255)),
            ("depth", analysis.depth_profile, (0, 1)),
            ("ridges", analysis.ridge_strength, (0, 1)),
            ("horizon", analysis.horizon_profile, (0, 1)),
            ("texture", analysis.texture_profile, (0, 1)),
        ]
        profiles = [c for c in candidates if c[1]]

    if not profiles:
        fig = Figure(figsize=(width_px / dpi, row_h_in), dpi=dpi)
        ax = fig.add_subplot()
        ax.text(
            0.5, 0.5, "No profiles", ha="center", va="center", transform=ax.transAxes
        )
        ax.axis("off")
        return fig

    fig = Figure(figsize=(width_px / dpi, row_h_in * len(profiles)), dpi=dpi)
    axes = fig.subplots(len(profiles), 1, sharex=True, squeeze=False)[:, 0]
    for ax, (name, values, limits) in zip(axes, profiles):
        ax.plot(range(len(values)), values, linewidth=1.2)
        ax.set_ylim(*limits)
        ax.set_ylabel(name, fontsize=8)
        ax.tick_params(labelsize=7)

    axes[-1].set_xlabel("Sample", fontsize=10)
    fig.tight_layout()
    return fig
