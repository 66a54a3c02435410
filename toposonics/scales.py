"""Scale and pitch utilities.

Pure functions mapping normalized feature values onto scale degrees and
converting between pitch names, MIDI note numbers and frequencies. Pitch
names use scientific notation with canonical sharp spelling ("C4", "A#3"),
so ``midi_to_pitch(pitch_to_midi(p)) == p`` for every valid name.
"""

import logging
import math
import re

from toposonics.errors import InvalidPitchName
from toposonics.models.core_models import ScaleType

logger = logging.getLogger(__name__)


CHROMATIC_NOTES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

_MAJOR = [0, 2, 4, 5, 7, 9, 11]
_NATURAL_MINOR = [0, 2, 3, 5, 7, 8, 10]
_DORIAN = [0, 2, 3, 5, 7, 9, 10]

# Semitone offsets from the root. The scale name only selects the interval
# pattern; the root always comes from the separate key argument.
SCALE_INTERVALS: dict[ScaleType, list[int]] = {
    ScaleType.C_MAJOR: _MAJOR,
    ScaleType.D_MAJOR: _MAJOR,
    ScaleType.G_MAJOR: _MAJOR,
    ScaleType.C_MINOR: _NATURAL_MINOR,
    ScaleType.E_MINOR: _NATURAL_MINOR,
    ScaleType.A_MINOR: _NATURAL_MINOR,
    ScaleType.A_SHARP_MINOR: _NATURAL_MINOR,
    ScaleType.C_PENTATONIC: [0, 2, 4, 7, 9],
    ScaleType.A_MINOR_PENTATONIC: [0, 3, 5, 7, 10],
    ScaleType.C_BLUES: [0, 3, 5, 6, 7, 10],
    ScaleType.D_DORIAN: _DORIAN,
    ScaleType.A_DORIAN: _DORIAN,
    ScaleType.C_MIXOLYDIAN: [0, 2, 4, 5, 7, 9, 10],
    ScaleType.E_PHRYGIAN: [0, 1, 3, 5, 7, 8, 10],
}

_PITCH_PATTERN = re.compile(r"^([A-G]#?)(\d+)$")

MIDI_MIN = 0
MIDI_MAX = 127


def available_keys() -> list[str]:
    """Get the twelve supported keys in chromatic order starting at C."""
    return list(CHROMATIC_NOTES)


def available_scale_names() -> list[str]:
    """Get the supported scale names (e.g. ``["C_MAJOR", "C_MINOR", ...]``)."""
    return [scale.value for scale in ScaleType]


def key_offset(key: str) -> int:
    """Get the position of a key's root in the chromatic set starting at C.

    Args:
        key: Root pitch class using sharp spelling (e.g. "C", "F#").

    Returns:
        Semitone offset from C in the range 0-11.

    Raises:
        InvalidPitchName: If ``key`` is not one of the twelve pitch classes.
    """
    try:
        return CHROMATIC_NOTES.index(key)
    except ValueError:
        raise InvalidPitchName(f"Unknown key: {key!r}") from None


def scale_intervals(scale_name: ScaleType | str) -> list[int]:
    """Look up the interval pattern for a scale name.

    Raises:
        ValueError: If the scale name is not a known ``ScaleType``.
    """
    return list(SCALE_INTERVALS[ScaleType(scale_name)])


def scale_notes(
    key: str,
    scale_name: ScaleType | str,
    octaves: int = 3,
    start_octave: int = 3,
) -> list[str]:
    """Generate pitch names for a key and scale across several octaves.

    Ordering is octave-major, interval-minor, which is ascending pitch because
    every interval pattern is sorted and below 12.

    Args:
        key: Root pitch class (e.g. "C", "A#").
        scale_name: Scale whose interval pattern to use.
        octaves: Number of octaves to generate (default 3).
        start_octave: Octave number of the first root (default 3).

    Returns:
        Pitch names in scientific notation, e.g. ``["C3", "D3", "E3", ...]``.
    """
    offset = key_offset(key)
    intervals = scale_intervals(scale_name)

    notes: list[str] = []
    for octave in range(octaves):
        for interval in intervals:
            absolute = offset + interval
            name = CHROMATIC_NOTES[absolute % 12]
            notes.append(f"{name}{start_octave + octave + absolute // 12}")
    return notes


def scale_notes_in_range(
    key: str, scale_name: ScaleType | str, min_note: str, max_note: str
) -> list[str]:
    """Get every scale pitch whose MIDI number lies in ``[min_note, max_note]``.

    Returns:
        Ascending pitch names, empty if the window holds no scale member.
    """
    low = pitch_to_midi(min_note)
    high = pitch_to_midi(max_note)
    candidates = scale_notes(key, scale_name, octaves=10, start_octave=0)
    return [p for p in candidates if low <= pitch_to_midi(p) <= high]


def value_to_scale_index(value: float, scale_length: int) -> int:
    """Map a normalized value onto an index into a scale table.

    Values are clamped to [0, 1] and ``value == 1`` lands on the last index
    instead of one past it.
    """
    clamped = max(0.0, min(1.0, value))
    return min(int(math.floor(clamped * scale_length)), scale_length - 1)


def brightness_to_scale_index(brightness: float, scale_length: int) -> int:
    """Map a brightness value (0-255) onto an index into a scale table."""
    return value_to_scale_index(brightness / 255, scale_length)


def pitch_to_midi(name: str) -> int:
    """Convert a pitch name such as "C4" to its MIDI note number (60).

    Raises:
        InvalidPitchName: If the name does not match ``[A-G]#?<octave>``.
    """
    match = _PITCH_PATTERN.match(name) if isinstance(name, str) else None
    if match is None:
        raise InvalidPitchName(f"Invalid pitch name: {name!r}")

    pitch_class, octave = match.groups()
    return (int(octave) + 1) * 12 + CHROMATIC_NOTES.index(pitch_class)


def midi_to_pitch(midi: int) -> str:
    """Convert a MIDI note number to a sharp-spelled pitch name.

    Raises:
        InvalidPitchName: If the number falls outside what a pitch name can
            express (below C0, i.e. 12, or above 127).
    """
    octave = midi // 12 - 1
    if octave < 0 or midi > MIDI_MAX:
        raise InvalidPitchName(f"MIDI number {midi} has no pitch name")
    return f"{CHROMATIC_NOTES[midi % 12]}{octave}"


def pitch_to_frequency_hz(name: str) -> float:
    """Get the equal-tempered frequency of a pitch (A4 = 440 Hz)."""
    midi = pitch_to_midi(name)
    return 440.0 * 2 ** ((midi - 69) / 12)
