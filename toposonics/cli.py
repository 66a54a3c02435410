"""TopoSonics CLI entry point."""

import sys
from pathlib import Path

import click

from toposonics import __version__
from toposonics.image_io import load_rgba_image
from toposonics.logging_config import setup_logging
from toposonics.midi_utils import midi_filename
from toposonics.models import MappingMode, ProcessingParameters, ScaleType
from toposonics.pipeline import process_complete_pipeline, resolve_preset
from toposonics.presets import default_catalog
from toposonics.scales import available_keys, available_scale_names, scale_intervals


def build_parameters(
    mode: str,
    preset_id: str | None,
    key: str | None,
    scale: str | None,
    tempo: int | None,
    max_notes: int,
    title: str | None,
    transpose: int = 0,
    quantize: bool = False,
) -> ProcessingParameters:
    """Assemble pipeline parameters from CLI options.

    Key, scale and tempo default to the preset's values when a preset applies
    (always in MULTI_VOICE mode), otherwise to C major at 120 BPM.
    """
    params = ProcessingParameters(mode=MappingMode(mode), preset_id=preset_id)

    preset = None
    if preset_id is not None or params.mode is MappingMode.MULTI_VOICE:
        preset = resolve_preset(params, default_catalog())

    key = key or (preset.default_key if preset else "C")
    scale = ScaleType(scale) if scale else (
        preset.default_scale if preset else ScaleType.C_MAJOR
    )
    tempo = tempo or (preset.default_tempo_bpm if preset else 120)
    tempo = max(30, min(240, tempo))

    musical = {"key": key, "scale": scale}
    return params.model_copy(
        update={
            "linear": params.linear.model_copy(
                update={**musical, "max_notes": max_notes}
            ),
            "depth_ridge": params.depth_ridge.model_copy(
                update={**musical, "max_notes": max_notes}
            ),
            "multi_voice": params.multi_voice.model_copy(update=musical),
            "midi": params.midi.model_copy(
                update={
                    **musical,
                    "tempo_bpm": tempo,
                    "title": title,
                    "transpose_semitones": transpose,
                    "quantize": quantize,
                }
            ),
        }
    )


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="toposonics")
def main() -> None:
    """TopoSonics: turn landscape images into MIDI compositions."""


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination MIDI file path. Defaults to <title>.mid.",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in MappingMode], case_sensitive=False),
    default=MappingMode.LINEAR_LANDSCAPE.value,
    show_default=True,
    help="Mapping algorithm.",
)
@click.option("--preset", "preset_id", default=None, help="Topo preset id.")
@click.option(
    "--key",
    type=click.Choice(available_keys()),
    default=None,
    help="Musical key. Defaults to the preset key, or C.",
)
@click.option(
    "--scale",
    type=click.Choice(available_scale_names()),
    default=None,
    help="Scale. Defaults to the preset scale, or C_MAJOR.",
)
@click.option(
    "--tempo",
    type=click.IntRange(30, 240),
    default=None,
    help="Tempo in BPM. Defaults to the preset tempo, or 120.",
)
@click.option(
    "--max-notes",
    type=click.IntRange(1, 512),
    default=64,
    show_default=True,
    help="Maximum notes for the single-voice modes.",
)
@click.option("--title", default=None, metavar="TEXT", help="Title stored in the file.")
@click.option(
    "--transpose",
    type=click.IntRange(-36, 36),
    default=0,
    show_default=True,
    help="Transpose by this many semitones.",
)
@click.option("--quantize", is_flag=True, help="Quantize to a 16th-note grid.")
@click.option(
    "--piano-roll",
    default=None,
    metavar="PATH",
    help="Also save a piano roll image of the notes.",
)
@click.option(
    "--log-level",
    default=None,
    metavar="LEVEL",
    help="Logging level (default: $TOPOSONICS_LOG_LEVEL or INFO).",
)
def render(
    image: str,
    output: str | None,
    mode: str,
    preset_id: str | None,
    key: str | None,
    scale: str | None,
    tempo: int | None,
    max_notes: int,
    title: str | None,
    transpose: int,
    quantize: bool,
    piano_roll: str | None,
    log_level: str | None,
) -> None:
    """
    Render an image as a MIDI composition.

    IMAGE is the path to a photo (any format OpenCV can read).

    \b
    Examples:
      toposonics render alps.jpg
      toposonics render alps.jpg --mode DEPTH_RIDGE --key D --scale D_DORIAN
      toposonics render skyline.jpg --mode MULTI_VOICE --preset night-city -o city.mid
    """
    setup_logging(log_level)

    if preset_id is not None and default_catalog().get_topo_preset(preset_id) is None:
        click.echo(f"  ERROR: Unknown preset '{preset_id}'", err=True)
        sys.exit(2)

    loaded = load_rgba_image(image)
    if loaded is None:
        click.echo(f"  ERROR: Could not read image '{image}'", err=True)
        sys.exit(1)
    pixels, width, height = loaded

    title = title or Path(image).stem.replace("_", " ")
    params = build_parameters(
        mode.upper(), preset_id, key, scale, tempo, max_notes, title, transpose, quantize
    )
    output = output or midi_filename(title)

    click.echo(f"toposonics v{__version__}")
    click.echo(f"  Image : {image} ({width}x{height})")
    click.echo(f"  Mode  : {params.mode.value}")
    click.echo(
        f"  Key   : {params.midi.key} {params.midi.scale.value}  |  "
        f"Tempo: {params.midi.tempo_bpm} BPM"
    )

    analysis_result, mapping_result, midi_result = process_complete_pipeline(
        pixels, width, height, params
    )
    if midi_result.midi_bytes is None:
        click.echo("  ERROR: The image produced no notes.", err=True)
        sys.exit(1)

    click.echo(f"  Samples: {analysis_result.sample_count}")
    if mapping_result.preset_id:
        click.echo(f"  Preset : {mapping_result.preset_id}")
    click.echo(
        f"  Notes  : {len(midi_result.events)} "
        f"({midi_result.duration_seconds:.1f} s)"
    )

    try:
        Path(output).write_bytes(midi_result.midi_bytes)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write MIDI file: {exc}", err=True)
        sys.exit(1)

    if piano_roll:
        from toposonics.visualization import create_piano_roll_visualization

        fig = create_piano_roll_visualization(midi_result.events)
        fig.savefig(piano_roll)
        click.echo(f"  Piano roll: {piano_roll}")

    click.echo(f"Done!  Wrote '{output}'.")


# ── catalog subcommands ────────────────────────────────────────────────────────

@main.command()
def presets() -> None:
    """List topo presets and scene packs."""
    catalog = default_catalog()
    default_id = catalog.default_topo_preset().id

    click.echo("Topo presets:")
    for preset in catalog.all_topo_presets():
        marker = "*" if preset.id == default_id else " "
        click.echo(
            f" {marker} {preset.id:<20} {preset.default_key:<2} "
            f"{preset.default_scale.value:<15} {preset.default_tempo_bpm:>3} BPM  "
            f"{preset.name}"
        )

    click.echo()
    click.echo("Scene packs:")
    for scene in catalog.all_scene_packs():
        click.echo(
            f"   {scene.id:<26} {scene.category:<12} -> {scene.preset_id}  "
            f"{scene.tagline}"
        )


@main.command()
def scales() -> None:
    """List scales and their intervals."""
    for name in available_scale_names():
        intervals = " ".join(str(i) for i in scale_intervals(name))
        click.echo(f"{name:<20} {intervals}")
    click.echo()
    click.echo("Keys: " + " ".join(available_keys()))
