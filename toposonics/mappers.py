"""Single-voice mapping from image analysis results to note events.

Two algorithms are provided:

- LINEAR_LANDSCAPE walks the brightness profile left to right and plays one
  evenly spaced note per sample.
- DEPTH_RIDGE plays notes only at prominent ridges, leaving short rests
  elsewhere, and lets ridge notes ring past the next onset.

``map_analysis`` dispatches on ``MappingMode`` and also covers MULTI_VOICE
through the composer.
"""

import logging
import math

from toposonics.composer import map_image_to_multi_voice_composition
from toposonics.models import (
    FILTER_CUTOFF,
    REVERB_SEND,
    DepthRidgeParams,
    ImageAnalysisResult,
    LinearLandscapeParams,
    MappingMode,
    NoteEvent,
    ProcessingParameters,
    TopoPreset,
)
from toposonics.scales import brightness_to_scale_index, scale_notes

logger = logging.getLogger(__name__)

# LINEAR_LANDSCAPE constants
FIXED_VELOCITY = 0.7
MIN_VELOCITY = 0.3
DEFAULT_REVERB = 0.2
NEAR_REVERB = 0.1
DEPTH_REVERB_RANGE = 0.6

# DEPTH_RIDGE constants
RIDGE_BASE_VELOCITY = 0.4
RIDGE_VELOCITY_BOOST = 0.3
RIDGE_DURATION_MULTIPLIER = 0.5
RHYTHMIC_GAP_FACTOR = 0.25
RIDGE_DEFAULT_REVERB = 0.3
RIDGE_NEAR_REVERB = 0.2
REVERB_DEPTH_SENSITIVITY = 0.5


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _position_pan(index: int, count: int) -> float:
    """Map a position to [-1, 1]; a single sample sits in the center."""
    if count <= 1:
        return 0.0
    return _clamp(index / (count - 1) * 2 - 1, -1.0, 1.0)


def map_linear_landscape(
    analysis: ImageAnalysisResult, params: LinearLandscapeParams
) -> list[NoteEvent]:
    """Map brightness to an evenly spaced sequence of notes.

    Brightness picks the pitch from a three-octave scale table starting at
    octave 3, and optionally the velocity. Horizontal position drives
    panning, depth drives the reverb send (farther = wetter) and brightness
    opens the filter. Notes are laid out back to back.

    Args:
        analysis: Result of image analysis.
        params: Key, scale and layout options.

    Returns:
        Note events in time order; empty if the brightness profile is empty.
    """
    brightness = analysis.brightness_profile
    if not brightness:
        return []

    table = scale_notes(params.key, params.scale, 3, 3)
    depth = analysis.depth_profile or []

    sample_count = min(len(brightness), params.max_notes)
    step = len(brightness) / sample_count
    sampled = [brightness[math.floor(i * step)] for i in range(sample_count)]

    events: list[NoteEvent] = []
    current_time = 0.0
    for i, raw in enumerate(sampled):
        value = _clamp(raw, 0.0, 255.0)
        pitch = table[brightness_to_scale_index(value, len(table))]

        velocity = FIXED_VELOCITY
        if params.enable_velocity_variation:
            velocity = MIN_VELOCITY + (value / 255) * (1 - MIN_VELOCITY)

        pan = _position_pan(i, sample_count) if params.enable_panning else 0.0

        reverb_send = DEFAULT_REVERB
        if i < len(depth):
            # Lower depth (farther away) gets more reverb
            reverb_send = NEAR_REVERB + (1 - _clamp(depth[i], 0.0, 1.0)) * DEPTH_REVERB_RANGE

        events.append(
            NoteEvent(
                pitch=pitch,
                start=current_time,
                duration=params.note_duration_beats,
                velocity=_clamp(velocity, 0.0, 1.0),
                pan=pan,
                effects={REVERB_SEND: reverb_send, FILTER_CUTOFF: value / 255},
            )
        )
        current_time += params.note_duration_beats

    logger.debug("LINEAR_LANDSCAPE produced %d notes", len(events))
    return events


def map_depth_ridge(
    analysis: ImageAnalysisResult, params: DepthRidgeParams
) -> list[NoteEvent]:
    """Map ridges to accented notes and everything else to short rests.

    Positions whose ridge strength falls below ``params.ridge_threshold``
    advance the timeline by a quarter of the note duration without playing.
    Ridge notes are louder and longer in proportion to the ridge strength,
    but the timeline still advances by the base duration, so strong ridges
    overlap the following note.

    Without a ridge profile every position plays.

    Args:
        analysis: Result of image analysis.
        params: Key, scale, threshold and layout options.

    Returns:
        Note events in time order.
    """
    brightness = analysis.brightness_profile
    if not brightness:
        return []

    table = scale_notes(params.key, params.scale, 3, 3)
    ridges = analysis.ridge_strength or []
    depth = analysis.depth_profile or []
    base = params.note_duration_beats

    events: list[NoteEvent] = []
    current_time = 0.0
    for i in range(min(len(brightness), params.max_notes)):
        ridge = _clamp(ridges[i], 0.0, 1.0) if i < len(ridges) else 0.0
        if ridges and ridge < params.ridge_threshold:
            current_time += base * RHYTHMIC_GAP_FACTOR
            continue

        value = _clamp(brightness[i], 0.0, 255.0)
        pitch = table[brightness_to_scale_index(value, len(table))]
        velocity = min(
            1.0,
            RIDGE_BASE_VELOCITY
            + (value / 255) * (1 - RIDGE_BASE_VELOCITY)
            + ridge * RIDGE_VELOCITY_BOOST,
        )

        reverb_send = RIDGE_DEFAULT_REVERB
        if params.depth_to_reverb and i < len(depth):
            reverb_send = (
                RIDGE_NEAR_REVERB
                + (1 - _clamp(depth[i], 0.0, 1.0)) * REVERB_DEPTH_SENSITIVITY
            )

        events.append(
            NoteEvent(
                pitch=pitch,
                start=current_time,
                duration=base * (1 + ridge * RIDGE_DURATION_MULTIPLIER),
                velocity=velocity,
                pan=_position_pan(i, len(brightness)),
                effects={REVERB_SEND: reverb_send, FILTER_CUTOFF: value / 255},
            )
        )
        current_time += base

    logger.debug("DEPTH_RIDGE produced %d notes", len(events))
    return events


def map_analysis(
    analysis: ImageAnalysisResult,
    mode: MappingMode,
    params: ProcessingParameters | None = None,
    preset: TopoPreset | None = None,
) -> list[NoteEvent]:
    """Run the mapping algorithm selected by ``mode``.

    Args:
        analysis: Result of image analysis.
        mode: Mapping algorithm to use.
        params: Complete parameter set; the sub-model matching ``mode`` is used.
        preset: Preset for MULTI_VOICE; ignored by the other modes.

    Returns:
        Note events in time order.
    """
    params = params or ProcessingParameters()
    mode = MappingMode(mode)

    if mode is MappingMode.LINEAR_LANDSCAPE:
        return map_linear_landscape(analysis, params.linear)
    if mode is MappingMode.DEPTH_RIDGE:
        return map_depth_ridge(analysis, params.depth_ridge)
    return map_image_to_multi_voice_composition(analysis, params.multi_voice, preset)
