"""Domain models for the toposonics package.

This module provides a centralized location for all data models used
throughout the image-to-music pipeline. It includes:

- Core domain models (NoteEvent, ImageAnalysisResult, Composition, enums)
- Catalog records (VoiceConfig, MappingBias, TopoPreset, ScenePack, SoundPreset)
- Configuration parameters for each processing stage
- Pipeline processing stage results

All models are built using Pydantic for data validation and serialization,
ensuring type safety and clear interfaces between pipeline components.
"""

# Re-export core models
from toposonics.models.core_models import (
    FILTER_CUTOFF,
    REVERB_SEND,
    Composition,
    ImageAnalysisResult,
    KeyType,
    MappingMode,
    NoteEvent,
    ScaleType,
    VoiceType,
)

# Re-export catalog models
from toposonics.models.preset_models import (
    Envelope,
    FilterSettings,
    MappingBias,
    ScenePack,
    SoundPreset,
    TopoPreset,
    VoiceConfig,
)

# Re-export setting models
from toposonics.models.settings_models import (
    AnalysisParams,
    DepthRidgeParams,
    LinearLandscapeParams,
    MidiParams,
    MultiVoiceParams,
    ProcessingParameters,
)

# Re-export pipeline models
from toposonics.models.pipeline_models import (
    AnalysisStageResult,
    MappingResult,
    MidiResult,
)
