import pytest

from toposonics.errors import InvalidPitchName
from toposonics.models import NoteEvent, VoiceType
from toposonics.music_transformations import (
    beats_to_seconds,
    filter_voice,
    quantize_notes,
    scale_velocity,
    snap_to_scale,
    total_duration_beats,
    transpose_notes,
)


def _note(pitch="C4", start=0.0, duration=1.0, **kwargs) -> NoteEvent:
    return NoteEvent(
        pitch=pitch, start=start, duration=duration, velocity=0.5, **kwargs
    )


def test_transpose_no_change(note_events) -> None:
    assert transpose_notes(note_events, 0) == note_events


@pytest.mark.parametrize(
    "pitch, semitones, expected",
    [("C4", 1, "C#4"), ("B3", 1, "C4"), ("C4", -12, "C3"), ("A#3", 2, "C4")],
)
def test_transpose_rolls_octaves(pitch, semitones, expected) -> None:
    assert transpose_notes([_note(pitch)], semitones)[0].pitch == expected


def test_transpose_out_of_range_raises() -> None:
    with pytest.raises(InvalidPitchName):
        transpose_notes([_note("G9")], 1)
    with pytest.raises(InvalidPitchName):
        transpose_notes([_note("C0")], -1)


def test_transpose_keeps_other_fields(note_events) -> None:
    shifted = transpose_notes(note_events, 5)
    for before, after in zip(note_events, shifted):
        assert after.midi == before.midi + 5
        assert after.effects == before.effects
        assert (after.start, after.duration, after.voice) == (
            before.start,
            before.duration,
            before.voice,
        )


def test_quantize_to_grid() -> None:
    notes = [_note(start=0.13, duration=0.1), _note(start=1.01, duration=0.6)]
    out = quantize_notes(notes, 0.25)
    assert [n.start for n in out] == pytest.approx([0.25, 1.0])
    assert [n.duration for n in out] == pytest.approx([0.25, 0.5])


def test_quantize_keeps_order_and_effects() -> None:
    notes = [
        _note(start=2.1, effects={"custom": 1.0}),
        _note(start=0.9, effects={"reverbSend": 0.2}),
    ]
    out = quantize_notes(notes)
    assert [n.start for n in out] == pytest.approx([2.0, 1.0])
    assert out[0].effects == {"custom": 1.0}


def test_quantize_rejects_bad_grid() -> None:
    with pytest.raises(ValueError):
        quantize_notes([_note()], 0)


def test_quantize_empty() -> None:
    assert quantize_notes([]) == []


def test_scale_velocity_clamps() -> None:
    notes = [_note()]
    assert scale_velocity(notes, 3.0)[0].velocity == 1.0
    assert scale_velocity(notes, 0.5)[0].velocity == pytest.approx(0.25)


@pytest.mark.parametrize(
    "pitch, expected",
    [("C4", "C4"), ("C#4", "C4"), ("D#4", "D4"), ("F#4", "F4"), ("A#4", "A4")],
)
def test_snap_to_c_major(pitch, expected) -> None:
    assert snap_to_scale([_note(pitch)], "C", "C_MAJOR")[0].pitch == expected


def test_snap_uses_key_root() -> None:
    # F in D major is a semitone from both E and F#; ties go down
    assert snap_to_scale([_note("F4")], "D", "D_MAJOR")[0].pitch == "E4"
    assert snap_to_scale([_note("F#4")], "D", "D_MAJOR")[0].pitch == "F#4"


def test_snap_pentatonic_whole_step_gap() -> None:
    # C pentatonic has no F: E4 and G4 are 1 and 2 semitones away
    assert snap_to_scale([_note("F4")], "C", "C_PENTATONIC")[0].pitch == "E4"


def test_filter_voice(note_events) -> None:
    melody = filter_voice(note_events, VoiceType.MELODY)
    assert [n.pitch for n in melody] == ["C4"]
    assert filter_voice(note_events, "bass")[0].pitch == "E4"
    assert filter_voice(note_events, "pad") == []


def test_total_duration(note_events) -> None:
    assert total_duration_beats(note_events) == pytest.approx(3.5)
    assert total_duration_beats([]) == 0.0


def test_beats_to_seconds() -> None:
    assert beats_to_seconds(4, 120) == pytest.approx(2.0)
    assert beats_to_seconds(1, 60) == pytest.approx(1.0)
    with pytest.raises(ValueError):
        beats_to_seconds(1, 0)
