import pytest
from pydantic import ValidationError

from toposonics.models import (
    Composition,
    ImageAnalysisResult,
    MappingMode,
    NoteEvent,
    ScaleType,
    VoiceType,
)


def test_note_properties(valid_note) -> None:
    assert valid_note.midi == 69
    assert valid_note.end == pytest.approx(1.5)
    assert valid_note.pan is None
    assert valid_note.voice is None
    assert valid_note.effects == {}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pitch": "H4"},
        {"pitch": "C"},
        {"pitch": "Db4"},
        {"pitch": "G#9"},
        {"start": -0.1},
        {"duration": 0.0},
        {"velocity": 1.1},
        {"velocity": -0.1},
        {"pan": 1.5},
    ],
)
def test_note_validation_raises(kwargs) -> None:
    base = {"pitch": "C4", "start": 0.0, "duration": 1.0, "velocity": 0.5}
    with pytest.raises(ValidationError):
        NoteEvent(**{**base, **kwargs})


def test_note_is_frozen(valid_note) -> None:
    with pytest.raises(ValidationError):
        valid_note.velocity = 0.1


def test_note_copy_with_update(valid_note) -> None:
    louder = valid_note.model_copy(update={"velocity": 1.0})
    assert louder.velocity == 1.0
    assert valid_note.velocity == 0.75


def test_note_accepts_open_effects() -> None:
    note = NoteEvent(
        pitch="C4",
        start=0.0,
        duration=1.0,
        velocity=0.5,
        effects={"reverbSend": 0.4, "shimmer": 2.0},
    )
    assert note.effects["shimmer"] == 2.0


def test_analysis_defaults(valid_analysis) -> None:
    assert valid_analysis.ridge_strength is None
    assert valid_analysis.depth_profile is None
    assert valid_analysis.horizon_profile is None
    assert valid_analysis.texture_profile is None
    assert valid_analysis.metadata == {}


def test_analysis_rejects_negative_size() -> None:
    with pytest.raises(ValidationError):
        ImageAnalysisResult(width=-1, height=2)


def test_composition_defaults() -> None:
    composition = Composition()
    assert composition.key == "C"
    assert composition.scale is ScaleType.C_MAJOR
    assert composition.tempo == 120.0
    assert composition.mapping_mode is MappingMode.LINEAR_LANDSCAPE
    assert composition.note_events == []


def test_composition_rejects_bad_key() -> None:
    with pytest.raises(ValidationError):
        Composition(key="H")


def test_enums_from_strings() -> None:
    assert MappingMode("DEPTH_RIDGE") is MappingMode.DEPTH_RIDGE
    assert VoiceType("pad") is VoiceType.PAD
    assert ScaleType("A_SHARP_MINOR") is ScaleType.A_SHARP_MINOR


def test_composition_round_trip_keeps_effects(valid_note) -> None:
    note = valid_note.model_copy(update={"effects": {"reverbSend": 0.2, "warp": 0.9}})
    composition = Composition(title="Dunes", note_events=[note])

    restored = Composition.model_validate(composition.model_dump())
    assert restored.note_events == [note]
    assert restored.note_events[0].effects["warp"] == 0.9
