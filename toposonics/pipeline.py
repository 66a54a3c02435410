"""
Pipeline processing functions for image-to-MIDI conversion.

This module chains the processing stages (feature extraction, note mapping,
post-processing and MIDI encoding), separating business logic from the CLI
and plotting concerns. Each stage returns an empty result model when its
input is missing or rejected, so later stages can run unconditionally.
"""

import logging

from toposonics.analyzer import (
    analyze_for_depth_ridge,
    analyze_for_linear_landscape,
    analyze_for_multi_voice,
)
from toposonics.errors import TopoSonicsError
from toposonics.image_processing import PixelBuffer
from toposonics.mappers import map_analysis
from toposonics.midi_utils import midi_filename, write_midi_file
from toposonics.models import (
    AnalysisStageResult,
    MappingMode,
    MappingResult,
    MidiResult,
    ProcessingParameters,
    TopoPreset,
)
from toposonics.music_transformations import (
    beats_to_seconds,
    quantize_notes,
    scale_velocity,
    snap_to_scale,
    total_duration_beats,
    transpose_notes,
)
from toposonics.presets import PresetCatalog, default_catalog

logger = logging.getLogger(__name__)

_ANALYZERS = {
    MappingMode.LINEAR_LANDSCAPE: analyze_for_linear_landscape,
    MappingMode.DEPTH_RIDGE: analyze_for_depth_ridge,
    MappingMode.MULTI_VOICE: analyze_for_multi_voice,
}


def analyze_image(
    pixels: PixelBuffer | None,
    width: int,
    height: int,
    params: ProcessingParameters,
) -> AnalysisStageResult:
    """Extract the feature profiles needed by the selected mapping mode.

    Args:
        pixels: Flat RGBA pixel buffer, or None.
        width: Image width in pixels.
        height: Image height in pixels.
        params: Complete pipeline parameters.

    Returns:
        AnalysisStageResult containing the analysis
    """
    if pixels is None:
        logger.warning("No pixels provided for analysis")
        return AnalysisStageResult()

    try:
        analyzer = _ANALYZERS[MappingMode(params.mode)]
        analysis = analyzer(pixels, width, height, params.analysis)
    except TopoSonicsError as e:
        logger.error(f"Error in image analysis: {e}")
        return AnalysisStageResult()

    return AnalysisStageResult(analysis=analysis)


def resolve_preset(
    params: ProcessingParameters, catalog: PresetCatalog | None = None
) -> TopoPreset:
    """Look up the configured preset, falling back to the catalog default."""
    catalog = catalog or default_catalog()
    if params.preset_id is None:
        return catalog.default_topo_preset()

    preset = catalog.get_topo_preset(params.preset_id)
    if preset is None:
        logger.warning(
            "Unknown preset %r, using %s",
            params.preset_id,
            catalog.default_topo_preset().id,
        )
        return catalog.default_topo_preset()
    return preset


def map_notes(
    analysis_result: AnalysisStageResult,
    params: ProcessingParameters,
    catalog: PresetCatalog | None = None,
) -> MappingResult:
    """Turn an analysis into note events.

    Args:
        analysis_result: Output of ``analyze_image``.
        params: Complete pipeline parameters.
        catalog: Preset catalog for MULTI_VOICE; defaults to the built-in one.

    Returns:
        MappingResult with the generated events
    """
    mode = MappingMode(params.mode)
    if analysis_result.analysis is None or analysis_result.sample_count == 0:
        logger.warning("No analysis available for note mapping")
        return MappingResult(mode=mode)

    preset = resolve_preset(params, catalog) if mode is MappingMode.MULTI_VOICE else None

    try:
        events = map_analysis(analysis_result.analysis, mode, params, preset)
    except TopoSonicsError as e:
        logger.error(f"Error in note mapping: {e}")
        return MappingResult(mode=mode)

    logger.debug("%s mapping produced %d notes", mode.value, len(events))
    return MappingResult(
        events=events, mode=mode, preset_id=preset.id if preset else None
    )


def generate_midi(
    mapping_result: MappingResult, params: ProcessingParameters
) -> MidiResult:
    """Post-process note events and encode them as a MIDI file.

    Transposition, scale snapping, velocity scaling and quantization are
    applied in that order, each only when requested in ``params.midi``.

    Args:
        mapping_result: Output of ``map_notes``.
        params: Complete pipeline parameters.

    Returns:
        MidiResult with the final events and MIDI data
    """
    midi_params = params.midi
    if not mapping_result.events:
        logger.warning("No note events for MIDI generation")
        return MidiResult(tempo_bpm=midi_params.tempo_bpm)

    events = mapping_result.events
    try:
        # 1) Transpose if requested
        if midi_params.transpose_semitones:
            events = transpose_notes(events, midi_params.transpose_semitones)

        # 2) Snap into scale if requested
        if midi_params.snap_to_scale:
            events = snap_to_scale(events, midi_params.key, midi_params.scale)

        # 3) Scale velocities
        if midi_params.velocity_scale != 1.0:
            events = scale_velocity(events, midi_params.velocity_scale)

        # 4) Quantize rhythm if requested
        if midi_params.quantize:
            events = quantize_notes(events, midi_params.grid_size)

        midi_bytes = write_midi_file(events, midi_params.tempo_bpm, midi_params.title)
    except TopoSonicsError as e:
        logger.error(f"Error in MIDI generation: {e}")
        return MidiResult(tempo_bpm=midi_params.tempo_bpm)

    duration = total_duration_beats(events)
    return MidiResult(
        events=events,
        midi_bytes=midi_bytes,
        filename=midi_filename(midi_params.title),
        tempo_bpm=midi_params.tempo_bpm,
        duration_beats=duration,
        duration_seconds=beats_to_seconds(duration, midi_params.tempo_bpm),
    )


def process_complete_pipeline(
    pixels: PixelBuffer | None,
    width: int,
    height: int,
    params: ProcessingParameters | None = None,
    catalog: PresetCatalog | None = None,
) -> tuple[AnalysisStageResult, MappingResult, MidiResult]:
    """Process the complete image-to-MIDI pipeline.

    Args:
        pixels: Flat RGBA pixel buffer
        width: Image width in pixels
        height: Image height in pixels
        params: Complete pipeline parameters
        catalog: Preset catalog for MULTI_VOICE

    Returns:
        Tuple of (analysis_result, mapping_result, midi_result)
    """
    params = params or ProcessingParameters()
    if pixels is None:
        logger.warning("No pixels provided for pipeline processing")
        return (
            AnalysisStageResult(),
            MappingResult(mode=params.mode),
            MidiResult(tempo_bpm=params.midi.tempo_bpm),
        )

    # Step 1: Feature extraction
    analysis_result = analyze_image(pixels, width, height, params)

    # Step 2: Note mapping
    mapping_result = map_notes(analysis_result, params, catalog)

    # Step 3: Post-processing and MIDI encoding
    midi_result = generate_midi(mapping_result, params)

    return analysis_result, mapping_result, midi_result
