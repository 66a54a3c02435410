"""Parameter models for pipeline configuration.

This module defines Pydantic models that encapsulate all configurable
parameters for each stage of the image-to-music pipeline: feature
extraction, note mapping (one model per mapping mode) and MIDI export.
"""

from pydantic import BaseModel, Field

from toposonics.models.core_models import KeyType, MappingMode, ScaleType, VoiceType


class AnalysisParams(BaseModel):
    """Configuration parameters for image feature extraction.

    Attributes:
        row_index: Row to sample; None selects the center row.
        average_rows: Whether to average a band of rows around ``row_index``.
        rows_to_average: Height of the averaged band (default 5).
        max_samples: Cap on profile length; longer profiles are bin-averaged.
        include_depth: Whether to compute the contrast-based depth profile.
        include_ridges: Whether to compute ridge strength.
        depth_window: Window size for the local contrast used as depth.
        ridge_smoothing_window: Optional moving-average window for ridges.
        horizon_brightness_threshold: Minimum luma for a horizon edge.
        horizon_gradient_threshold: Minimum luma step for a horizon edge.
        horizon_smooth_window: Moving-average window for the horizon contour.
        texture_window: Window size for local standard deviation.
        texture_row_samples: Number of evenly spaced rows sampled for texture.
    """

    row_index: int | None = Field(None, ge=0, description="Row to sample")
    average_rows: bool = Field(False, description="Average rows around the center")
    rows_to_average: int = Field(5, ge=1, description="Rows in the averaged band")
    max_samples: int = Field(128, ge=1, description="Maximum profile length")
    include_depth: bool = Field(True, description="Compute depth profile")
    include_ridges: bool = Field(False, description="Compute ridge strength")
    depth_window: int = Field(5, ge=1, description="Depth contrast window")
    ridge_smoothing_window: int | None = Field(
        None, ge=1, description="Ridge smoothing window"
    )
    horizon_brightness_threshold: float = Field(
        30.0, ge=0.0, le=255.0, description="Horizon luma threshold"
    )
    horizon_gradient_threshold: float = Field(
        20.0, ge=0.0, le=255.0, description="Horizon gradient threshold"
    )
    horizon_smooth_window: int = Field(7, ge=1, description="Horizon smoothing")
    texture_window: int = Field(8, ge=1, description="Texture variance window")
    texture_row_samples: int = Field(5, ge=1, description="Rows sampled for texture")


class LinearLandscapeParams(BaseModel):
    """Configuration parameters for the LINEAR_LANDSCAPE mapping.

    Attributes:
        key: Root of the scale.
        scale: Scale pattern notes are drawn from.
        max_notes: Maximum number of notes (profile is stride-sampled).
        note_duration_beats: Length of every note and of each time step.
        enable_panning: Pan notes from left to right across the image.
        enable_velocity_variation: Derive velocity from brightness.
    """

    key: KeyType = Field("C", description="Musical key")
    scale: ScaleType = Field(ScaleType.C_MAJOR, description="Musical scale")
    max_notes: int = Field(64, ge=1, description="Maximum number of notes")
    note_duration_beats: float = Field(
        0.5, gt=0.0, description="Note duration in beats"
    )
    enable_panning: bool = Field(True, description="Positional stereo panning")
    enable_velocity_variation: bool = Field(
        True, description="Brightness-driven velocity"
    )


class DepthRidgeParams(LinearLandscapeParams):
    """Configuration parameters for the DEPTH_RIDGE mapping.

    Attributes:
        ridge_threshold: Ridge strength below which a position becomes a rest.
        depth_to_reverb: Whether depth drives the reverb send.
    """

    ridge_threshold: float = Field(
        0.5, ge=0.0, le=1.0, description="Ridge strength threshold"
    )
    depth_to_reverb: bool = Field(True, description="Map depth to reverb send")


def _default_base_durations() -> dict[VoiceType, float]:
    return {
        VoiceType.BASS: 2.0,
        VoiceType.MELODY: 0.5,
        VoiceType.PAD: 4.0,
        VoiceType.FX: 1.0,
    }


class MultiVoiceParams(BaseModel):
    """Configuration parameters for the MULTI_VOICE composer.

    Attributes:
        key: Root of the scale.
        scale: Scale pattern notes are drawn from.
        enable_bass: Generate the horizon-driven bass voice.
        enable_melody: Generate the ridge-driven melody voice.
        enable_pad: Generate the texture-driven pad voice.
        enable_fx: Generate the depth-driven fx voice.
        beats_per_sample: Time between adjacent profile samples.
        max_notes_per_voice: Cap on notes emitted by any single voice.
        base_durations: Base note length per voice before its duration factor.
    """

    key: KeyType = Field("C", description="Musical key")
    scale: ScaleType = Field(ScaleType.C_MAJOR, description="Musical scale")
    enable_bass: bool = Field(True, description="Enable bass voice")
    enable_melody: bool = Field(True, description="Enable melody voice")
    enable_pad: bool = Field(True, description="Enable pad voice")
    enable_fx: bool = Field(True, description="Enable fx voice")
    beats_per_sample: float = Field(
        0.5, gt=0.0, description="Beats between adjacent samples"
    )
    max_notes_per_voice: int = Field(64, ge=1, description="Notes per voice cap")
    base_durations: dict[VoiceType, float] = Field(
        default_factory=_default_base_durations,
        description="Base note duration per voice in beats",
    )

    def is_enabled(self, voice: VoiceType) -> bool:
        """Check the enable flag for one voice."""
        return {
            VoiceType.BASS: self.enable_bass,
            VoiceType.MELODY: self.enable_melody,
            VoiceType.PAD: self.enable_pad,
            VoiceType.FX: self.enable_fx,
        }[VoiceType(voice)]


class MidiParams(BaseModel):
    """Configuration parameters for post-processing and MIDI export.

    Attributes:
        tempo_bpm: Tempo in beats per minute (30-240, default 120).
        title: Optional title written into the tempo track.
        transpose_semitones: Transposition in semitones (-36 to +36).
        velocity_scale: Global velocity multiplier.
        snap_to_scale: Snap every pitch to the nearest note of ``key``/``scale``.
        key: Key used when snapping.
        scale: Scale used when snapping.
        quantize: Whether to quantize onsets and durations to a grid.
        grid_size: Grid size in beats (0.0625-1.0, default 0.25).
    """

    tempo_bpm: int = Field(120, ge=30, le=240, description="Tempo in beats per minute")
    title: str | None = Field(None, description="Composition title")

    transpose_semitones: int = Field(
        0, ge=-36, le=36, description="Transposition in semitones"
    )
    velocity_scale: float = Field(1.0, ge=0.0, le=4.0, description="Velocity scale")

    snap_to_scale: bool = Field(False, description="Enable scale snapping")
    key: KeyType = Field("C", description="Key for scale snapping")
    scale: ScaleType = Field(ScaleType.C_MAJOR, description="Scale for snapping")

    quantize: bool = Field(False, description="Enable rhythm quantization")
    grid_size: float = Field(
        0.25, ge=0.0625, le=1.0, description="Quantization grid in beats"
    )


class ProcessingParameters(BaseModel):
    """Complete configuration for the entire image-to-music pipeline.

    Attributes:
        mode: Mapping mode used to turn the analysis into notes.
        preset_id: Catalog preset for MULTI_VOICE; unknown ids fall back to
            the catalog default.
        analysis: Parameters for feature extraction.
        linear: Parameters for LINEAR_LANDSCAPE mapping.
        depth_ridge: Parameters for DEPTH_RIDGE mapping.
        multi_voice: Parameters for MULTI_VOICE composition.
        midi: Parameters for post-processing and MIDI export.
    """

    mode: MappingMode = Field(MappingMode.LINEAR_LANDSCAPE, description="Mapping mode")
    preset_id: str | None = Field(None, description="Topo preset identifier")
    analysis: AnalysisParams = Field(
        default_factory=AnalysisParams, description="Feature extraction parameters"
    )
    linear: LinearLandscapeParams = Field(
        default_factory=LinearLandscapeParams, description="Linear mapping parameters"
    )
    depth_ridge: DepthRidgeParams = Field(
        default_factory=DepthRidgeParams, description="Depth/ridge parameters"
    )
    multi_voice: MultiVoiceParams = Field(
        default_factory=MultiVoiceParams, description="Multi-voice parameters"
    )
    midi: MidiParams = Field(
        default_factory=MidiParams, description="MIDI export parameters"
    )
