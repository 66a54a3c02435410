"""Models for representing pipeline processing stages.

This module contains Pydantic models that encapsulate the results of each
stage in the image-to-music pipeline. Each model represents the output of a
specific step, so stages can be tested and reused independently.
"""

from pydantic import BaseModel, Field

from toposonics.models.core_models import ImageAnalysisResult, MappingMode, NoteEvent


class AnalysisStageResult(BaseModel):
    """Result of the feature extraction stage.

    Attributes:
        analysis: Extracted profiles, or None if no pixels were supplied.
        sample_count: Length of the brightness profile (0 when empty).
    """

    analysis: ImageAnalysisResult | None = Field(
        None, description="Extracted feature profiles"
    )

    @property
    def sample_count(self) -> int:
        if self.analysis is None:
            return 0
        return len(self.analysis.brightness_profile)


class MappingResult(BaseModel):
    """Note events produced by one mapping mode.

    Attributes:
        events: Time-ordered note events, empty if mapping was skipped.
        mode: Mapping mode that produced the events.
        preset_id: Preset applied by the multi-voice composer, if any.
    """

    events: list[NoteEvent] = Field(
        default_factory=list, description="Generated note events"
    )
    mode: MappingMode = Field(MappingMode.LINEAR_LANDSCAPE, description="Mapping mode")
    preset_id: str | None = Field(None, description="Applied preset identifier")


class MidiResult(BaseModel):
    """Post-processed events and their Standard MIDI File encoding.

    Attributes:
        events: Note events after transposition, snapping and quantization.
        midi_bytes: Serialized MIDI file, or None if there was nothing to encode.
        filename: Suggested download filename.
        tempo_bpm: Tempo written into the file.
        duration_beats: End of the last note in beats.
        duration_seconds: End of the last note in seconds at ``tempo_bpm``.
    """

    events: list[NoteEvent] = Field(
        default_factory=list, description="Exported note events"
    )
    midi_bytes: bytes | None = Field(None, description="Serialized MIDI file data")
    filename: str = Field("", description="Suggested filename")
    tempo_bpm: int = Field(120, description="Tempo in beats per minute")
    duration_beats: float = Field(0.0, description="Total length in beats")
    duration_seconds: float = Field(0.0, description="Total length in seconds")
