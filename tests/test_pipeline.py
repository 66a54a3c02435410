import pytest

from toposonics.midi_utils import read_note_timeline, tempo_from_midi
from toposonics.models import (
    AnalysisStageResult,
    MappingMode,
    MappingResult,
    MidiParams,
    NoteEvent,
    ProcessingParameters,
)
from toposonics.pipeline import (
    analyze_image,
    generate_midi,
    map_notes,
    process_complete_pipeline,
    resolve_preset,
)


def test_analyze_image_with_none() -> None:
    result = analyze_image(None, 10, 10, ProcessingParameters())
    assert result.analysis is None
    assert result.sample_count == 0


def test_analyze_image_short_buffer_is_empty() -> None:
    result = analyze_image(b"\x00" * 10, 4, 4, ProcessingParameters())
    assert result.analysis is None


def test_analyze_image_linear(landscape_image) -> None:
    pixels, w, h = landscape_image
    result = analyze_image(pixels, w, h, ProcessingParameters())
    assert result.sample_count == 128
    assert result.analysis.depth_profile is not None
    assert result.analysis.horizon_profile is None


def test_analyze_image_multi_voice(landscape_image) -> None:
    pixels, w, h = landscape_image
    params = ProcessingParameters(mode=MappingMode.MULTI_VOICE)
    analysis = analyze_image(pixels, w, h, params).analysis
    n = len(analysis.brightness_profile)
    for profile in (
        analysis.depth_profile,
        analysis.ridge_strength,
        analysis.horizon_profile,
        analysis.texture_profile,
    ):
        assert len(profile) == n


def test_map_notes_without_analysis() -> None:
    result = map_notes(AnalysisStageResult(), ProcessingParameters())
    assert result.events == []


def test_resolve_preset() -> None:
    assert resolve_preset(ProcessingParameters()).id == "majestic-mountains"
    assert resolve_preset(ProcessingParameters(preset_id="night-city")).id == "night-city"
    # unknown ids fall back to the default
    assert resolve_preset(ProcessingParameters(preset_id="nope")).id == "majestic-mountains"


def test_map_notes_records_preset(sample_analysis) -> None:
    params = ProcessingParameters(mode=MappingMode.MULTI_VOICE, preset_id="ocean-horizon")
    result = map_notes(AnalysisStageResult(analysis=sample_analysis), params)
    assert result.events
    assert result.preset_id == "ocean-horizon"

    linear = map_notes(AnalysisStageResult(analysis=sample_analysis), ProcessingParameters())
    assert linear.preset_id is None


def test_generate_midi_without_events() -> None:
    result = generate_midi(MappingResult(), ProcessingParameters())
    assert result.midi_bytes is None
    assert result.events == []


def test_generate_midi(note_events) -> None:
    params = ProcessingParameters(midi=MidiParams(tempo_bpm=60, title="Test Tune"))
    result = generate_midi(MappingResult(events=note_events), params)

    assert result.midi_bytes[:4] == b"MThd"
    assert result.filename == "test-tune.mid"
    assert result.duration_beats == pytest.approx(3.5)
    assert result.duration_seconds == pytest.approx(3.5)
    assert tempo_from_midi(result.midi_bytes) == pytest.approx(60)


def test_generate_midi_applies_transformations(note_events) -> None:
    params = ProcessingParameters(
        midi=MidiParams(transpose_semitones=2, velocity_scale=0.5, quantize=True)
    )
    result = generate_midi(MappingResult(events=note_events), params)

    assert [n.pitch for n in result.events] == ["D4", "F#4", "A4"]
    assert result.events[0].velocity == pytest.approx(0.4)
    notes_on = [note for _, kind, note, _ in read_note_timeline(result.midi_bytes) if kind == "on"]
    assert sorted(notes_on) == [62, 66, 69]


def test_generate_midi_snaps_to_scale() -> None:
    events = [NoteEvent(pitch="C#4", start=0.0, duration=1.0, velocity=0.5)]
    params = ProcessingParameters(midi=MidiParams(snap_to_scale=True, key="D", scale="D_MAJOR"))
    result = generate_midi(MappingResult(events=events), params)
    assert result.events[0].pitch == "C#4"

    params = ProcessingParameters(midi=MidiParams(snap_to_scale=True))
    result = generate_midi(MappingResult(events=events), params)
    assert result.events[0].pitch == "C4"


def test_generate_midi_transpose_out_of_range() -> None:
    events = [NoteEvent(pitch="G9", start=0.0, duration=1.0, velocity=0.5)]
    params = ProcessingParameters(midi=MidiParams(transpose_semitones=12))
    result = generate_midi(MappingResult(events=events), params)
    assert result.midi_bytes is None


def test_complete_pipeline_with_none() -> None:
    analysis, mapping, midi = process_complete_pipeline(None, 0, 0)
    assert analysis.analysis is None
    assert mapping.events == []
    assert midi.midi_bytes is None


@pytest.mark.parametrize("mode", list(MappingMode))
def test_complete_pipeline_each_mode(mode, landscape_image) -> None:
    pixels, w, h = landscape_image
    params = ProcessingParameters(mode=mode, preset_id="night-city")
    analysis, mapping, midi = process_complete_pipeline(pixels, w, h, params)

    assert analysis.sample_count > 0
    assert mapping.mode == mode
    assert mapping.events
    assert midi.midi_bytes[:4] == b"MThd"
    assert len(midi.events) == len(mapping.events)


def test_complete_pipeline_is_deterministic(landscape_image) -> None:
    pixels, w, h = landscape_image
    params = ProcessingParameters(mode=MappingMode.MULTI_VOICE)
    first = process_complete_pipeline(pixels, w, h, params)[2].midi_bytes
    second = process_complete_pipeline(pixels, w, h, params)[2].midi_bytes
    assert first == second


def test_complete_pipeline_empty_image() -> None:
    analysis, mapping, midi = process_complete_pipeline(b"", 0, 0)
    assert analysis.sample_count == 0
    assert mapping.events == []
    assert midi.midi_bytes is None
