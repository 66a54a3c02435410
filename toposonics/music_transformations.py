"""
Musical transformation utilities for note events.

This module provides functions for transforming note events according to
musical principles like scales, key signatures, and rhythm quantization.
Every function returns new events and leaves the effects map and all other
fields untouched.
"""

import logging

from toposonics.models import NoteEvent, ScaleType, VoiceType
from toposonics.scales import (
    MIDI_MAX,
    key_offset,
    midi_to_pitch,
    scale_intervals,
)

logger = logging.getLogger(__name__)

# Lowest MIDI number with a pitch name (C0)
_LOWEST_NAMED_MIDI = 12


def transpose_notes(notes: list[NoteEvent], semitones: int) -> list[NoteEvent]:
    """Transpose all note events by a given number of semitones.

    Args:
        notes: Note events to transpose.
        semitones: Number of semitones to transpose (positive or negative).

    Returns:
        A new list of NoteEvent objects with each pitch shifted by
        ``semitones``, rolling over octave boundaries (B3 + 1 = C4).

    Raises:
        InvalidPitchName: If a shifted pitch leaves the range a pitch name can
            express (C0 to G9).
    """
    if not notes or semitones == 0:
        return list(notes)

    return [
        note.model_copy(update={"pitch": midi_to_pitch(note.midi + semitones)})
        for note in notes
    ]


def quantize_notes(notes: list[NoteEvent], grid: float = 0.25) -> list[NoteEvent]:
    """Quantize note events to a rhythmic grid.

    Args:
        notes: Note events to quantize.
        grid: Grid size in beats (e.g., 0.25 = 16th note).

    Returns:
        A new list of NoteEvent objects with starts rounded to the nearest
        grid line and durations rounded to a whole number of grid steps (at
        least one), in input order.
    """
    if not notes:
        return []
    if grid <= 0:
        raise ValueError(f"Grid size must be positive, got {grid}")

    quantized = []
    for note in notes:
        start = round(note.start / grid) * grid
        duration = max(grid, round(note.duration / grid) * grid)
        quantized.append(note.model_copy(update={"start": start, "duration": duration}))

    return quantized


def scale_velocity(notes: list[NoteEvent], factor: float) -> list[NoteEvent]:
    """Multiply every velocity by ``factor``, clamped to [0, 1]."""
    return [
        note.model_copy(update={"velocity": max(0.0, min(1.0, note.velocity * factor))})
        for note in notes
    ]


def _scale_midi_numbers(key: str, scale_name: ScaleType | str) -> list[int]:
    offset = key_offset(key)
    pitch_classes = {(offset + interval) % 12 for interval in scale_intervals(scale_name)}
    return [
        midi
        for midi in range(_LOWEST_NAMED_MIDI, MIDI_MAX + 1)
        if midi % 12 in pitch_classes
    ]


def snap_to_scale(
    notes: list[NoteEvent], key: str = "C", scale_name: ScaleType | str = ScaleType.C_MAJOR
) -> list[NoteEvent]:
    """Map notes to the closest notes in a given scale (across all octaves).

    Args:
        notes: Note events to map.
        key: Root pitch class of the scale (e.g., "C", "F#").
        scale_name: Scale whose interval pattern to use.

    Returns:
        A new list of NoteEvent objects where each pitch is replaced by the
        nearest pitch of the scale. A pitch halfway between two scale notes
        moves down.
    """
    if not notes:
        return []

    members = _scale_midi_numbers(key, scale_name)
    member_set = set(members)

    snapped = []
    for note in notes:
        midi = note.midi
        if midi in member_set:
            snapped.append(note)
            continue
        # min() keeps the first of equal distances, and members are ascending
        closest = min(members, key=lambda m: abs(m - midi))
        snapped.append(note.model_copy(update={"pitch": midi_to_pitch(closest)}))
    return snapped


def filter_voice(notes: list[NoteEvent], voice: VoiceType | str) -> list[NoteEvent]:
    """Keep only the notes tagged with ``voice``."""
    tag = voice.value if isinstance(voice, VoiceType) else voice
    return [note for note in notes if note.voice == tag]


def total_duration_beats(notes: list[NoteEvent]) -> float:
    """Get the end time of the last sounding note, in beats (0 if empty)."""
    return max((note.end for note in notes), default=0.0)


def beats_to_seconds(beats: float, tempo_bpm: float) -> float:
    """Convert a beat position to seconds at the given tempo."""
    if tempo_bpm <= 0:
        raise ValueError(f"Tempo must be positive, got {tempo_bpm}")
    return beats * 60.0 / tempo_bpm
