"""Multi-voice composition from image analysis results.

A composition is built from up to four concurrent voices. Each voice blends
the analysis profiles with the weights of its ``MappingBias``, picks onsets
at a stride set by its density, and reads pitch, loudness and panning from
the blended value at each onset.
"""

import logging
import math

from toposonics.errors import MalformedAnalysisInput
from toposonics.models import (
    FILTER_CUTOFF,
    REVERB_SEND,
    ImageAnalysisResult,
    MappingBias,
    MultiVoiceParams,
    NoteEvent,
    TopoPreset,
    VoiceConfig,
    VoiceType,
)
from toposonics.scales import scale_notes_in_range, value_to_scale_index

logger = logging.getLogger(__name__)

# Stride between onsets at density 0; density 1 plays every sample
MAX_STRIDE = 16

VOICE_ORDER = (VoiceType.BASS, VoiceType.MELODY, VoiceType.PAD, VoiceType.FX)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def onset_stride(density: float) -> int:
    """Get the sample stride between onsets for a voice density."""
    density = _clamp(density, 0.0, 1.0)
    return 1 + math.floor((1 - density) * (MAX_STRIDE - 1))


def blend_profiles(
    analysis: ImageAnalysisResult, bias: MappingBias
) -> list[float] | None:
    """Combine the analysis profiles into one curve using the bias weights.

    Only profiles that are present, non-empty and carry a positive weight
    take part; the result is their weighted mean, clamped to [0, 1].

    Args:
        analysis: Analysis carrying the optional horizon/ridge/texture/depth
            profiles.
        bias: Weight per feature.

    Returns:
        The blended curve, or None if no profile is usable.

    Raises:
        MalformedAnalysisInput: If the participating profiles differ in length.
    """
    weighted = [
        (bias.horizon_weight, analysis.horizon_profile),
        (bias.ridge_weight, analysis.ridge_strength),
        (bias.texture_weight, analysis.texture_profile),
        (bias.depth_weight, analysis.depth_profile),
    ]
    usable = [(w, profile) for w, profile in weighted if w > 0 and profile]
    if not usable:
        return None

    lengths = {len(profile) for _, profile in usable}
    if len(lengths) > 1:
        raise MalformedAnalysisInput(
            f"Weighted profiles have different lengths: {sorted(lengths)}"
        )

    total_weight = sum(w for w, _ in usable)
    length = lengths.pop()
    return [
        _clamp(sum(w * profile[i] for w, profile in usable) / total_weight, 0.0, 1.0)
        for i in range(length)
    ]


def compose_voice(
    voice: VoiceType,
    analysis: ImageAnalysisResult,
    params: MultiVoiceParams,
    config: VoiceConfig,
    bias: MappingBias,
) -> list[NoteEvent]:
    """Generate the notes of a single voice.

    Args:
        voice: Voice being generated; used for the tag and base duration.
        analysis: Result of image analysis.
        params: Key, scale and timing options.
        config: Range, density, dynamics and effects of the voice.
        bias: Feature weights of the voice.

    Returns:
        Note events in start order, empty if no profile drives the voice or
        its pitch window holds no scale note.
    """
    voice = VoiceType(voice)
    blended = blend_profiles(analysis, bias)
    if not blended:
        logger.debug("Voice %s has no usable profile", voice.value)
        return []

    table = scale_notes_in_range(params.key, params.scale, config.min_note, config.max_note)
    if not table:
        logger.debug(
            "Voice %s: no %s %s notes between %s and %s",
            voice.value,
            params.key,
            params.scale.value,
            config.min_note,
            config.max_note,
        )
        return []

    count = len(blended)
    stride = onset_stride(config.density)
    duration = params.base_durations.get(voice, 1.0) * config.duration_factor
    if duration <= 0:
        return []

    events: list[NoteEvent] = []
    for i in range(0, count, stride):
        if len(events) >= params.max_notes_per_voice:
            break

        value = blended[i]
        velocity = config.velocity_min + (config.velocity_max - config.velocity_min) * value
        position = i / (count - 1) * 2 - 1 if count > 1 else 0.0

        events.append(
            NoteEvent(
                pitch=table[value_to_scale_index(value, len(table))],
                start=i * params.beats_per_sample,
                duration=duration,
                velocity=_clamp(velocity, 0.0, 1.0),
                pan=_clamp(position * config.stereo_spread, -1.0, 1.0),
                voice=voice.value,
                effects={
                    REVERB_SEND: config.reverb_send,
                    FILTER_CUTOFF: config.filter_brightness,
                },
            )
        )
    return events


def map_image_to_multi_voice_composition(
    analysis: ImageAnalysisResult,
    params: MultiVoiceParams | None = None,
    preset: TopoPreset | None = None,
) -> list[NoteEvent]:
    """Compose up to four concurrent voices from an image analysis.

    A voice plays when it is enabled both in ``params`` and in the preset.
    Voices are generated in the order bass, melody, pad, fx and the combined
    list is stably sorted by start time.

    Args:
        analysis: Result of image analysis.
        params: Key, scale, timing and voice switches.
        preset: Voice configurations and biases; None selects the default
            catalog preset.

    Returns:
        Note events sorted by start, each tagged with its voice.
    """
    params = params or MultiVoiceParams()
    if preset is None:
        from toposonics.presets import default_catalog

        preset = default_catalog().default_topo_preset()

    events: list[NoteEvent] = []
    for voice in VOICE_ORDER:
        config = preset.voices.get(voice)
        bias = preset.mapping_bias.get(voice)
        if config is None or bias is None:
            continue
        if not (params.is_enabled(voice) and config.enabled):
            continue

        voice_events = compose_voice(voice, analysis, params, config, bias)
        logger.debug("Voice %s produced %d notes", voice.value, len(voice_events))
        events.extend(voice_events)

    return sorted(events, key=lambda e: e.start)
