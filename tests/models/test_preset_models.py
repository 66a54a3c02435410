import pytest
from pydantic import ValidationError

from toposonics.models import (
    Envelope,
    FilterSettings,
    MappingBias,
    ScenePack,
    SoundPreset,
    TopoPreset,
    VoiceConfig,
    VoiceType,
)


def test_voice_config_defaults() -> None:
    config = VoiceConfig()
    assert config.enabled is True
    assert (config.min_note, config.max_note) == ("C3", "C5")
    assert config.density == 0.5


@pytest.mark.parametrize(
    "kwargs",
    [{"density": 1.5}, {"duration_factor": 3.0}, {"velocity_max": 2.0}, {"stereo_spread": -0.1}],
)
def test_voice_config_validation(kwargs) -> None:
    with pytest.raises(ValidationError):
        VoiceConfig(**kwargs)


def test_mapping_bias_defaults_to_zero() -> None:
    bias = MappingBias(ridge_weight=0.7)
    assert bias.horizon_weight == 0.0
    assert bias.ridge_weight == 0.7


def test_topo_preset_keys_are_voice_types() -> None:
    preset = TopoPreset(
        id="p",
        name="P",
        voices={"bass": VoiceConfig()},
        mapping_bias={"bass": MappingBias(horizon_weight=1.0)},
    )
    assert list(preset.voices) == [VoiceType.BASS]
    assert preset.mapping_mode == "MULTI_VOICE"


def test_topo_preset_is_frozen() -> None:
    preset = TopoPreset(id="p", name="P", voices={}, mapping_bias={})
    with pytest.raises(ValidationError):
        preset.name = "Q"


def test_scene_pack_category() -> None:
    scene = ScenePack(id="s", name="S", preset_id="p", category="Urban")
    assert scene.recommended_subjects == ()
    with pytest.raises(ValidationError):
        ScenePack(id="s", name="S", preset_id="p", category="Space")


def test_sound_preset() -> None:
    sound = SoundPreset(
        id="pluck",
        name="Pluck",
        oscillator_type="triangle",
        envelope=Envelope(attack=0.001, decay=0.3, sustain=0.1, release=0.2),
        filter=FilterSettings(frequency=4000, resonance=2),
    )
    assert sound.filter.type == "lowpass"
    assert sound.delay_time is None
    with pytest.raises(ValidationError):
        SoundPreset(id="x", name="X", oscillator_type="noise")
