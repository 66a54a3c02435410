"""Catalog records: per-voice configuration, mapping biases and presets.

These models describe read-only catalog data. The composer receives a
``TopoPreset`` by value and never mutates it, so every record is frozen.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from toposonics.models.core_models import KeyType, ScaleType, VoiceType


class VoiceConfig(BaseModel):
    """Configuration for one voice of a multi-voice preset.

    Attributes:
        enabled: Whether the voice plays at all.
        min_note: Lowest pitch the voice may use (e.g. "C2").
        max_note: Highest pitch the voice may use (e.g. "C4").
        density: Note density, 0 = sparse, 1 = dense.
        duration_factor: Multiplier applied to the voice's base duration.
        velocity_min: Velocity at feature value 0.
        velocity_max: Velocity at feature value 1.
        reverb_send: Reverb send written into each note's effects.
        filter_brightness: Filter cutoff written into each note's effects.
        stereo_spread: Scales positional panning, 0 = center, 1 = wide.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(True, description="Whether this voice is enabled")
    min_note: str = Field("C3", description="Lowest pitch")
    max_note: str = Field("C5", description="Highest pitch")
    density: float = Field(0.5, ge=0.0, le=1.0, description="Note density")
    duration_factor: float = Field(
        1.0, ge=0.0, le=2.5, description="Duration multiplier"
    )
    velocity_min: float = Field(0.3, ge=0.0, le=1.0, description="Minimum velocity")
    velocity_max: float = Field(0.8, ge=0.0, le=1.0, description="Maximum velocity")
    reverb_send: float = Field(0.3, ge=0.0, le=1.0, description="Reverb send")
    filter_brightness: float = Field(
        0.5, ge=0.0, le=1.0, description="Filter brightness"
    )
    stereo_spread: float = Field(0.3, ge=0.0, le=1.0, description="Stereo spread")


class MappingBias(BaseModel):
    """Weights deciding which image features drive a voice."""

    model_config = ConfigDict(frozen=True)

    horizon_weight: float = Field(0.0, ge=0.0, le=1.0)
    ridge_weight: float = Field(0.0, ge=0.0, le=1.0)
    texture_weight: float = Field(0.0, ge=0.0, le=1.0)
    depth_weight: float = Field(0.0, ge=0.0, le=1.0)


class TopoPreset(BaseModel):
    """A named bundle of voice configurations and mapping biases."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique preset identifier")
    name: str = Field(..., description="Human-readable name")
    description: str = Field("", description="Character of the preset")
    default_key: KeyType = Field("C", description="Default key")
    default_scale: ScaleType = Field(ScaleType.C_MAJOR, description="Default scale")
    default_tempo_bpm: int = Field(90, ge=20, le=300, description="Default tempo")
    mapping_mode: Literal["SIMPLE", "MULTI_VOICE"] = Field("MULTI_VOICE")
    voices: dict[VoiceType, VoiceConfig] = Field(
        ..., description="Configuration per voice"
    )
    mapping_bias: dict[VoiceType, MappingBias] = Field(
        ..., description="Feature weights per voice"
    )


class ScenePack(BaseModel):
    """A curated scene bundle pointing at a preset, with shooting guidance."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    tagline: str = ""
    description: str = ""
    category: Literal["Nature", "Urban", "Atmospheric"] = "Nature"
    preset_id: str
    recommended_subjects: tuple[str, ...] = ()
    recommended_lighting: str = ""
    recommended_usage_notes: str | None = None
    sample_image_path: str | None = None
    accent_color: str | None = None


class Envelope(BaseModel):
    """ADSR envelope in seconds (sustain is a level in [0, 1])."""

    model_config = ConfigDict(frozen=True)

    attack: float = Field(..., ge=0.0)
    decay: float = Field(..., ge=0.0)
    sustain: float = Field(..., ge=0.0, le=1.0)
    release: float = Field(..., ge=0.0)


class FilterSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["lowpass", "highpass", "bandpass"] = "lowpass"
    frequency: float = Field(..., gt=0.0)
    resonance: float = Field(1.0, ge=0.0)


class SoundPreset(BaseModel):
    """Instrument settings handed to an audio rendering engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    oscillator_type: Literal["sine", "square", "triangle", "sawtooth"]
    description: str | None = None
    envelope: Envelope | None = None
    filter: FilterSettings | None = None
    reverb_wet: float | None = Field(None, ge=0.0, le=1.0)
    reverb_decay: float | None = Field(None, ge=0.0)
    delay_time: float | None = Field(None, ge=0.0)
    delay_feedback: float | None = Field(None, ge=0.0, le=1.0)
