"""MIDI generation utilities.

This module converts note events into Standard MIDI Files with mido. Events
are grouped into one track per voice, behind a tempo track that carries the
tempo, a 4/4 time signature and the optional title. Times are converted from
beats to ticks at 480 ticks per beat.
"""

import io
import logging
import re

import mido
from mido import Message, MetaMessage, MidiFile, MidiTrack

from toposonics.errors import EmptyCompositionError
from toposonics.models import Composition, NoteEvent

logger = logging.getLogger(__name__)

TICKS_PER_BEAT = 480
DEFAULT_TEMPO_BPM = 120
DEFAULT_TRACK_NAME = "Main"
MIDI_CHANNEL = 0

# Largest value a variable-length quantity can hold (four bytes)
MAX_VARIABLE_LENGTH = 0x0FFFFFFF


def encode_variable_length(value: int) -> bytes:
    """Encode an integer as a MIDI variable-length quantity.

    Seven bits per byte, most significant group first, with the high bit set
    on every byte but the last.

    Args:
        value: Integer in [0, 0x0FFFFFFF].

    Returns:
        One to four encoded bytes.

    Raises:
        ValueError: If ``value`` is negative or too large.
    """
    if value < 0 or value > MAX_VARIABLE_LENGTH:
        raise ValueError(f"Value out of range for a variable-length quantity: {value}")

    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))


def velocity_to_midi(velocity: float) -> int:
    """Convert a 0-1 velocity to a MIDI velocity in [1, 127]."""
    return max(1, min(127, round(velocity * 127)))


def beats_to_ticks(beats: float, ticks_per_beat: int = TICKS_PER_BEAT) -> int:
    return max(0, round(beats * ticks_per_beat))


def _group_by_track(events: list[NoteEvent]) -> dict[str, list[NoteEvent]]:
    tracks: dict[str, list[NoteEvent]] = {}
    for event in events:
        name = (event.voice or "").strip() or DEFAULT_TRACK_NAME
        tracks.setdefault(name, []).append(event)
    return tracks


def _note_track(name: str, events: list[NoteEvent]) -> MidiTrack:
    track = MidiTrack()
    track.append(MetaMessage("track_name", name=name, time=0))

    # (tick, order, type, note, velocity); note_off sorts before note_on
    timeline: list[tuple[int, int, str, int, int]] = []
    for event in events:
        on_tick = beats_to_ticks(event.start)
        # never shorter than one tick
        off_tick = max(on_tick + 1, beats_to_ticks(event.end))
        velocity = velocity_to_midi(event.velocity)
        timeline.append((on_tick, 1, "note_on", event.midi, velocity))
        timeline.append((off_tick, 0, "note_off", event.midi, 0))

    timeline.sort(key=lambda item: (item[0], item[1]))

    previous_tick = 0
    for tick, _, message_type, note, velocity in timeline:
        track.append(
            Message(
                message_type,
                channel=MIDI_CHANNEL,
                note=note,
                velocity=velocity,
                time=tick - previous_tick,
            )
        )
        previous_tick = tick

    track.append(MetaMessage("end_of_track", time=0))
    return track


def write_midi_file(
    events: list[NoteEvent],
    tempo_bpm: float = DEFAULT_TEMPO_BPM,
    title: str | None = None,
) -> bytes:
    """Generate a MIDI file from a list of note events.

    Creates a format-1 MIDI file: a tempo track followed by one track per
    distinct voice tag, in the order the tags first appear. Untagged events
    go to a track named "Main".

    Args:
        events: Note events to include in the file.
        tempo_bpm: Tempo in beats per minute (default 120).
        title: Optional name written into the tempo track.

    Returns:
        MIDI file data as bytes, suitable for writing to a .mid file
        or loading in a MIDI player.

    Raises:
        EmptyCompositionError: If there are no events.
    """
    if not events:
        raise EmptyCompositionError("No notes to export")

    midi_file = MidiFile(type=1, ticks_per_beat=TICKS_PER_BEAT)

    tempo_track = MidiTrack()
    tempo_track.append(
        MetaMessage("set_tempo", tempo=round(60_000_000 / max(1, tempo_bpm)), time=0)
    )
    tempo_track.append(
        MetaMessage("time_signature", numerator=4, denominator=4, time=0)
    )
    if title and title.strip():
        tempo_track.append(MetaMessage("track_name", name=title.strip(), time=0))
    tempo_track.append(MetaMessage("end_of_track", time=0))
    midi_file.tracks.append(tempo_track)

    for name, track_events in _group_by_track(events).items():
        midi_file.tracks.append(_note_track(name, track_events))

    logger.debug(
        "Encoded %d notes in %d tracks at %s BPM",
        len(events),
        len(midi_file.tracks) - 1,
        tempo_bpm,
    )

    # Serialize to bytes
    buffer = io.BytesIO()
    midi_file.save(file=buffer)
    return buffer.getvalue()


def composition_to_midi_bytes(
    composition: Composition, tempo_override: float | None = None
) -> bytes:
    """Encode a composition, using its own tempo unless overridden."""
    tempo = tempo_override if tempo_override is not None else composition.tempo
    return write_midi_file(composition.note_events, tempo, composition.title)


def read_note_timeline(data: bytes) -> list[tuple[int, str, int, int]]:
    """Parse MIDI bytes back into note on/off events.

    Args:
        data: Standard MIDI File bytes.

    Returns:
        ``(absolute_tick, "on" | "off", note, track_index)`` tuples in track
        order, then file order. A note_on with velocity 0 counts as "off".
    """
    midi_file = MidiFile(file=io.BytesIO(data))

    timeline = []
    for index, track in enumerate(midi_file.tracks):
        tick = 0
        for message in track:
            tick += message.time
            if message.type == "note_on" and message.velocity > 0:
                timeline.append((tick, "on", message.note, index))
            elif message.type in ("note_on", "note_off"):
                timeline.append((tick, "off", message.note, index))
    return timeline


def tempo_from_midi(data: bytes) -> float | None:
    """Get the first tempo of a MIDI file in BPM, or None if it sets none."""
    midi_file = MidiFile(file=io.BytesIO(data))
    for track in midi_file.tracks:
        for message in track:
            if message.type == "set_tempo":
                return mido.tempo2bpm(message.tempo)
    return None


def midi_filename(title: str | None) -> str:
    """Build a download filename from a title ("My Song!" -> "my-song.mid")."""
    slug = re.sub(r"[^a-z0-9]+", "-", (title or "").lower()).strip("-")
    return f"{slug or 'composition'}.mid"
