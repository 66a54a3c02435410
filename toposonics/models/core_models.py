"""Core domain models for image-to-music mapping."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


KeyType = Literal["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

REVERB_SEND = "reverbSend"
FILTER_CUTOFF = "filterCutoff"


class MappingMode(str, Enum):
    """Algorithms for turning an image analysis into note events."""

    LINEAR_LANDSCAPE = "LINEAR_LANDSCAPE"
    DEPTH_RIDGE = "DEPTH_RIDGE"
    MULTI_VOICE = "MULTI_VOICE"


class VoiceType(str, Enum):
    """Musical layers of a multi-voice composition."""

    BASS = "bass"
    MELODY = "melody"
    PAD = "pad"
    FX = "fx"


class ScaleType(str, Enum):
    """Named interval patterns; the root comes from the key, not the name."""

    C_MAJOR = "C_MAJOR"
    C_MINOR = "C_MINOR"
    D_MAJOR = "D_MAJOR"
    E_MINOR = "E_MINOR"
    A_MINOR = "A_MINOR"
    A_SHARP_MINOR = "A_SHARP_MINOR"
    G_MAJOR = "G_MAJOR"
    C_PENTATONIC = "C_PENTATONIC"
    A_MINOR_PENTATONIC = "A_MINOR_PENTATONIC"
    C_BLUES = "C_BLUES"
    D_DORIAN = "D_DORIAN"
    A_DORIAN = "A_DORIAN"
    C_MIXOLYDIAN = "C_MIXOLYDIAN"
    E_PHRYGIAN = "E_PHRYGIAN"


class NoteEvent(BaseModel):
    """One discrete sound event; times are measured in beats.

    Note events are created by the mapping functions and never mutated
    afterwards; transformations return copies via ``model_copy``.

    Attributes:
        pitch: Pitch name in scientific notation (e.g. "C4", "A#3").
        start: Start time in beats (non-negative).
        duration: Duration in beats (positive).
        velocity: Loudness in [0, 1].
        pan: Optional stereo position, -1 (left) to 1 (right).
        voice: Optional layer tag; "bass", "melody", "pad" and "fx" are reserved.
        effects: Open map of named effect parameters (reverb send, filter
            cutoff, and arbitrary extensions).
    """

    model_config = ConfigDict(frozen=True)

    pitch: str = Field(..., description="Pitch name in scientific notation")
    start: float = Field(..., ge=0, description="Start time in beats")
    duration: float = Field(..., gt=0, description="Duration in beats")
    velocity: float = Field(..., ge=0.0, le=1.0, description="Velocity (0-1)")
    pan: float | None = Field(None, ge=-1.0, le=1.0, description="Stereo pan")
    voice: str | None = Field(None, description="Voice/track tag")
    effects: dict[str, float] = Field(
        default_factory=dict, description="Named effect parameters"
    )

    @field_validator("pitch")
    @classmethod
    def _pitch_is_midi_note(cls, value: str) -> str:
        from toposonics.scales import MIDI_MAX, pitch_to_midi

        if pitch_to_midi(value) > MIDI_MAX:
            raise ValueError(f"Pitch {value!r} is above MIDI note {MIDI_MAX}")
        return value

    @property
    def midi(self) -> int:
        """MIDI note number of this event's pitch."""
        from toposonics.scales import pitch_to_midi

        return pitch_to_midi(self.pitch)

    @property
    def end(self) -> float:
        """End time in beats."""
        return self.start + self.duration


class ImageAnalysisResult(BaseModel):
    """Feature profiles extracted from one image.

    Every profile is indexed along the horizontal axis of the image. Profiles
    produced by the same analysis call share one sample count; profiles
    assembled by hand carry no such guarantee.

    Attributes:
        width: Source image width in pixels.
        height: Source image height in pixels.
        brightness_profile: Brightness values (0-255), one per sample.
        ridge_strength: Optional ridge/edge strength per sample (0-1).
        depth_profile: Optional depth estimate per sample (0-1, 1 = near).
        horizon_profile: Optional horizon height per sample (0-1, 1 = top).
        texture_profile: Optional local variance per sample (0-1).
        metadata: Advisory diagnostics; never read by mapping logic.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=0, description="Image width in pixels")
    height: int = Field(..., ge=0, description="Image height in pixels")
    brightness_profile: list[float] = Field(
        default_factory=list, description="Brightness (0-255) per sample"
    )
    ridge_strength: list[float] | None = Field(
        None, description="Ridge strength (0-1) per sample"
    )
    depth_profile: list[float] | None = Field(
        None, description="Depth estimate (0-1) per sample"
    )
    horizon_profile: list[float] | None = Field(
        None, description="Horizon height (0-1) per sample"
    )
    texture_profile: list[float] | None = Field(
        None, description="Texture/variance (0-1) per sample"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Advisory diagnostic values"
    )


class Composition(BaseModel):
    """A titled note sequence with the musical context it was generated in.

    Persistence fields (ids, owners, timestamps) belong to the storing
    application and are not modelled here.
    """

    title: str = Field("TopoSonics Composition", description="Composition title")
    description: str | None = Field(None, description="Optional notes")
    key: KeyType = Field("C", description="Musical key")
    scale: ScaleType = Field(ScaleType.C_MAJOR, description="Musical scale")
    tempo: float = Field(120.0, gt=0, description="Tempo in beats per minute")
    mapping_mode: MappingMode = Field(
        MappingMode.LINEAR_LANDSCAPE, description="Mapping mode used"
    )
    preset_id: str | None = Field(None, description="Preset used, if any")
    note_events: list[NoteEvent] = Field(
        default_factory=list, description="Ordered note events"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Free-form metadata"
    )
