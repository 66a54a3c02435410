"""Built-in catalog of topo presets, scene packs and sound presets.

``PresetCatalog`` is an immutable lookup object; ``default_catalog()`` builds
the one shipped with the package. Lookups by id return None on a miss.
"""

import logging
from functools import lru_cache

from toposonics.models import (
    Envelope,
    FilterSettings,
    MappingBias,
    ScaleType,
    ScenePack,
    SoundPreset,
    TopoPreset,
    VoiceConfig,
    VoiceType,
)

logger = logging.getLogger(__name__)

DEFAULT_TOPO_PRESET_ID = "majestic-mountains"
DEFAULT_SOUND_PRESET_ID = "sine-soft"


class PresetCatalog:
    """Read-only collection of presets, indexed by id.

    Args:
        topo_presets: Topo presets; the first one is the default unless
            ``default_topo_id`` names another.
        scene_packs: Scene packs referring to topo presets by id.
        sound_presets: Instrument presets; the first one is the default
            unless ``default_sound_id`` names another.
    """

    def __init__(
        self,
        topo_presets: list[TopoPreset],
        scene_packs: list[ScenePack] | None = None,
        sound_presets: list[SoundPreset] | None = None,
        default_topo_id: str | None = None,
        default_sound_id: str | None = None,
    ):
        if not topo_presets:
            raise ValueError("A preset catalog needs at least one topo preset")

        self._topo = {preset.id: preset for preset in topo_presets}
        self._scenes = {scene.id: scene for scene in scene_packs or []}
        self._sounds = {sound.id: sound for sound in sound_presets or []}

        self._default_topo_id = default_topo_id or topo_presets[0].id
        if self._default_topo_id not in self._topo:
            raise ValueError(f"Unknown default topo preset: {self._default_topo_id!r}")

        self._default_sound_id = default_sound_id or next(iter(self._sounds), None)
        if self._default_sound_id is not None and self._default_sound_id not in self._sounds:
            raise ValueError(f"Unknown default sound preset: {self._default_sound_id!r}")

        for scene in self._scenes.values():
            if scene.preset_id not in self._topo:
                logger.warning(
                    "Scene pack %s refers to unknown preset %s", scene.id, scene.preset_id
                )

    def get_topo_preset(self, preset_id: str) -> TopoPreset | None:
        return self._topo.get(preset_id)

    def get_scene_pack(self, scene_id: str) -> ScenePack | None:
        return self._scenes.get(scene_id)

    def get_sound_preset(self, sound_id: str) -> SoundPreset | None:
        return self._sounds.get(sound_id)

    def default_topo_preset(self) -> TopoPreset:
        return self._topo[self._default_topo_id]

    def default_sound_preset(self) -> SoundPreset | None:
        if self._default_sound_id is None:
            return None
        return self._sounds[self._default_sound_id]

    def preset_for_scene(self, scene: ScenePack | str) -> TopoPreset | None:
        """Get the topo preset a scene pack points at."""
        if isinstance(scene, str):
            scene = self.get_scene_pack(scene)
            if scene is None:
                return None
        return self.get_topo_preset(scene.preset_id)

    def all_topo_presets(self) -> list[TopoPreset]:
        return list(self._topo.values())

    def all_scene_packs(self) -> list[ScenePack]:
        return list(self._scenes.values())

    def all_sound_presets(self) -> list[SoundPreset]:
        return list(self._sounds.values())


def _voice(
    min_note, max_note, density, duration, vel_min, vel_max, reverb, brightness, spread
) -> VoiceConfig:
    return VoiceConfig(
        enabled=True,
        min_note=min_note,
        max_note=max_note,
        density=density,
        duration_factor=duration,
        velocity_min=vel_min,
        velocity_max=vel_max,
        reverb_send=reverb,
        filter_brightness=brightness,
        stereo_spread=spread,
    )


def _bias(horizon, ridge, texture, depth) -> MappingBias:
    return MappingBias(
        horizon_weight=horizon,
        ridge_weight=ridge,
        texture_weight=texture,
        depth_weight=depth,
    )


def _topo_preset(
    preset_id, name, description, key, scale, tempo, voices, biases
) -> TopoPreset:
    order = (VoiceType.BASS, VoiceType.MELODY, VoiceType.PAD, VoiceType.FX)
    return TopoPreset(
        id=preset_id,
        name=name,
        description=description,
        default_key=key,
        default_scale=scale,
        default_tempo_bpm=tempo,
        mapping_mode="MULTI_VOICE",
        voices={v: _voice(*cfg) for v, cfg in zip(order, voices)},
        mapping_bias={v: _bias(*b) for v, b in zip(order, biases)},
    )


# Voice rows: min, max, density, duration factor, velocity min/max, reverb,
# filter brightness, stereo spread. Bias rows: horizon, ridge, texture, depth.
# Rows are ordered bass, melody, pad, fx.
_TOPO_PRESETS = [
    _topo_preset(
        "majestic-mountains",
        "Majestic Mountains",
        "Wide, slow, cinematic. Perfect for ridgelines and vast landscapes.",
        "D",
        ScaleType.D_MAJOR,
        60,
        [
            ("D2", "A2", 0.3, 1.8, 0.4, 0.7, 0.4, 0.3, 0.1),
            ("A3", "D5", 0.5, 1.0, 0.4, 0.9, 0.6, 0.6, 0.3),
            ("D3", "A4", 0.2, 2.0, 0.3, 0.6, 0.8, 0.5, 0.4),
            ("D2", "D5", 0.2, 1.5, 0.2, 0.5, 0.9, 0.4, 0.7),
        ],
        [
            (0.9, 0.1, 0.2, 0.2),
            (0.2, 0.8, 0.3, 0.4),
            (0.3, 0.3, 0.8, 0.5),
            (0.1, 0.3, 0.4, 0.9),
        ],
    ),
    _topo_preset(
        "night-city",
        "Night City",
        "Neon skyline, busy but moody. Great for urban scenes.",
        "E",
        ScaleType.E_MINOR,
        90,
        [
            ("E2", "B2", 0.6, 0.8, 0.5, 0.9, 0.3, 0.5, 0.2),
            ("B3", "E5", 0.7, 0.5, 0.4, 1.0, 0.4, 0.8, 0.5),
            ("E3", "B4", 0.4, 1.5, 0.2, 0.6, 0.7, 0.4, 0.3),
            ("E2", "E5", 0.5, 1.0, 0.3, 0.8, 0.6, 0.7, 0.8),
        ],
        [
            (0.7, 0.3, 0.3, 0.4),
            (0.2, 0.7, 0.5, 0.4),
            (0.3, 0.3, 0.7, 0.5),
            (0.1, 0.4, 0.6, 0.8),
        ],
    ),
    _topo_preset(
        "foggy-forest",
        "Foggy Forest",
        "Low-contrast, moody, almost lo-fi. Soft attacks and darker tones.",
        "A",
        ScaleType.A_DORIAN,
        55,
        [
            ("A1", "E2", 0.2, 2.0, 0.2, 0.5, 0.7, 0.2, 0.1),
            ("E3", "C5", 0.3, 1.2, 0.3, 0.7, 0.9, 0.3, 0.4),
            ("A2", "E4", 0.3, 2.0, 0.2, 0.6, 1.0, 0.2, 0.5),
            ("A2", "E4", 0.3, 1.5, 0.2, 0.5, 1.0, 0.2, 0.7),
        ],
        [
            (0.6, 0.2, 0.3, 0.5),
            (0.2, 0.4, 0.4, 0.6),
            (0.1, 0.3, 0.8, 0.6),
            (0.0, 0.3, 0.6, 1.0),
        ],
    ),
    _topo_preset(
        "desert-drones",
        "Desert Drones",
        "Minimal, hypnotic, very slow-moving. Great for dunes and rock deserts.",
        "C",
        ScaleType.C_PENTATONIC,
        40,
        [
            ("C1", "G2", 0.1, 2.5, 0.3, 0.8, 0.6, 0.4, 0.1),
            ("G2", "D4", 0.2, 1.5, 0.3, 0.7, 0.5, 0.5, 0.3),
            ("C2", "G4", 0.2, 2.5, 0.2, 0.6, 0.7, 0.4, 0.4),
            ("C2", "G4", 0.3, 2.0, 0.2, 0.5, 0.8, 0.5, 0.8),
        ],
        [
            (0.8, 0.2, 0.2, 0.3),
            (0.3, 0.5, 0.3, 0.4),
            (0.4, 0.3, 0.6, 0.5),
            (0.2, 0.3, 0.7, 0.8),
        ],
    ),
    _topo_preset(
        "ocean-horizon",
        "Ocean Horizon",
        "Gentle, flowing, more legato and wavy. Perfect for seascapes.",
        "G",
        ScaleType.G_MAJOR,
        70,
        [
            ("G2", "D3", 0.3, 1.8, 0.4, 0.8, 0.5, 0.4, 0.2),
            ("D3", "G5", 0.6, 0.8, 0.4, 0.9, 0.7, 0.6, 0.5),
            ("G3", "D5", 0.3, 2.0, 0.3, 0.7, 0.8, 0.5, 0.6),
            ("G2", "G5", 0.4, 1.2, 0.3, 0.6, 0.8, 0.5, 0.9),
        ],
        [
            (0.7, 0.2, 0.3, 0.3),
            (0.2, 0.6, 0.5, 0.4),
            (0.4, 0.3, 0.6, 0.5),
            (0.1, 0.4, 0.6, 0.9),
        ],
    ),
    _topo_preset(
        "industrial-grid",
        "Industrial Grid",
        "Mechanical, tight, rhythmic. Great for geometric, man-made photos.",
        "A#",
        ScaleType.A_SHARP_MINOR,
        110,
        [
            ("A#1", "F2", 0.7, 0.6, 0.5, 1.0, 0.2, 0.5, 0.1),
            ("F3", "A#5", 0.8, 0.4, 0.5, 1.0, 0.3, 0.9, 0.4),
            ("A#2", "F4", 0.3, 1.2, 0.3, 0.7, 0.5, 0.6, 0.3),
            ("A#2", "A#5", 0.6, 0.7, 0.4, 0.8, 0.4, 0.8, 0.9),
        ],
        [
            (0.5, 0.6, 0.4, 0.4),
            (0.3, 0.8, 0.4, 0.4),
            (0.3, 0.4, 0.7, 0.5),
            (0.2, 0.7, 0.7, 0.7),
        ],
    ),
]


_SCENE_PACKS = [
    ScenePack(
        id="scene-majestic-mountains",
        name="Majestic Mountains",
        tagline="Cinematic ridgelines and slow-moving skies.",
        description=(
            "Slow, wide, orchestral-style soundscapes for mountain ranges and big "
            "horizons. Great for alpine photos and desert cliffs."
        ),
        category="Nature",
        preset_id="majestic-mountains",
        recommended_subjects=(
            "mountain ranges",
            "alpine valleys",
            "desert cliffs",
            "canyons",
        ),
        recommended_lighting=(
            "Golden hour or soft overcast, with clear separation between ground and sky."
        ),
        recommended_usage_notes=(
            "Works best when there's a clear horizon and visible peaks. "
            "Avoid super busy foreground clutter."
        ),
        sample_image_path="/demo/scene-majestic-mountains.jpg",
        accent_color="#A855F7",
    ),
    ScenePack(
        id="scene-night-city",
        name="Night City",
        tagline="Neon skylines and blinking lights.",
        description=(
            "Minor-key, rhythmic textures inspired by city skylines, highways, and "
            "building grids. Great for night shots and high contrast photos."
        ),
        category="Urban",
        preset_id="night-city",
        recommended_subjects=(
            "city skylines",
            "downtown streets",
            "bridges at night",
            "neon signs",
        ),
        recommended_lighting=(
            "Night, twilight, or moody indoor lighting with strong highlights."
        ),
        recommended_usage_notes=(
            "The more small bright details (windows, car lights), the more melodic "
            "activity you'll hear."
        ),
        sample_image_path="/demo/scene-night-city.jpg",
        accent_color="#22D3EE",
    ),
    ScenePack(
        id="scene-foggy-forest",
        name="Foggy Forest",
        tagline="Soft, misty drones and slow melodies.",
        description=(
            "Low-contrast, reverb-heavy atmospheres for forests, fog, and quiet "
            "nature scenes."
        ),
        category="Atmospheric",
        preset_id="foggy-forest",
        recommended_subjects=("forests", "foggy hills", "misty fields", "overcast trails"),
        recommended_lighting="Overcast, fog, or low-contrast scenes benefit most.",
        recommended_usage_notes=(
            "Don't worry if the image is low contrast; this pack is designed for "
            "that softness."
        ),
        sample_image_path="/demo/scene-foggy-forest.jpg",
        accent_color="#4ADE80",
    ),
    ScenePack(
        id="scene-desert-drones",
        name="Desert Drones",
        tagline="Minimal, hypnotic dunes and rockscapes.",
        description=(
            "Sparse, slow-moving drones tuned for dunes, rock deserts, and minimal "
            "landscapes."
        ),
        category="Nature",
        preset_id="desert-drones",
        recommended_subjects=(
            "sand dunes",
            "rock deserts",
            "Joshua Tree landscapes",
            "canyons",
        ),
        recommended_lighting=(
            "Harsh midday or golden hour both work; shape and shadow matter."
        ),
        recommended_usage_notes="Big shapes and clean lines work best. Embrace minimalism.",
        sample_image_path="/demo/scene-desert-drones.jpg",
        accent_color="#F97316",
    ),
    ScenePack(
        id="scene-ocean-horizon",
        name="Ocean Horizon",
        tagline="Flowing wave textures and sky pads.",
        description=(
            "Gentle, flowing soundscapes tuned to coastlines and seascapes with "
            "visible horizons."
        ),
        category="Nature",
        preset_id="ocean-horizon",
        recommended_subjects=(
            "ocean horizons",
            "coastlines",
            "beaches",
            "lakes with visible horizons",
        ),
        recommended_lighting=(
            "Any, but soft afternoon light or overcast gives smooth results."
        ),
        recommended_usage_notes=(
            "Works best when the water/sky boundary is clear and there's some wave "
            "texture."
        ),
        sample_image_path="/demo/scene-ocean-horizon.jpg",
        accent_color="#38BDF8",
    ),
    ScenePack(
        id="scene-industrial-grid",
        name="Industrial Grid",
        tagline="Mechanical pulses and grid-based melodies.",
        description=(
            "Tight, rhythmically active textures tuned to factories, bridges, wires, "
            "and infrastructure."
        ),
        category="Urban",
        preset_id="industrial-grid",
        recommended_subjects=(
            "factories",
            "bridges",
            "overpasses",
            "rail yards",
            "power lines",
        ),
        recommended_lighting="Harsh daytime or high-contrast night scenes work well.",
        recommended_usage_notes=(
            "The more geometric repetition (windows, beams, cables), the more "
            "rhythmic and mechanical the music."
        ),
        sample_image_path="/demo/scene-industrial-grid.jpg",
        accent_color="#FACC15",
    ),
]


def _sound_preset(
    sound_id, name, oscillator, description, adsr, cutoff, resonance, reverb, delay=None
) -> SoundPreset:
    attack, decay, sustain, release = adsr
    wet, reverb_decay = reverb
    delay_time, delay_feedback = delay or (None, None)
    return SoundPreset(
        id=sound_id,
        name=name,
        oscillator_type=oscillator,
        description=description,
        envelope=Envelope(attack=attack, decay=decay, sustain=sustain, release=release),
        filter=FilterSettings(type="lowpass", frequency=cutoff, resonance=resonance),
        reverb_wet=wet,
        reverb_decay=reverb_decay,
        delay_time=delay_time,
        delay_feedback=delay_feedback,
    )


_SOUND_PRESETS = [
    _sound_preset(
        "sine-soft",
        "Soft Sine",
        "sine",
        "Gentle, pure tone - good for landscapes and ambient textures",
        (0.1, 0.2, 0.6, 0.8),
        2000,
        1,
        (0.3, 2.5),
    ),
    _sound_preset(
        "triangle-warm",
        "Warm Triangle",
        "triangle",
        "Warm, mellow tone with subtle harmonics",
        (0.05, 0.3, 0.7, 0.5),
        1500,
        2,
        (0.2, 1.5),
    ),
    _sound_preset(
        "square-bright",
        "Bright Square",
        "square",
        "Bright, digital sound - good for urban scenes",
        (0.01, 0.1, 0.8, 0.3),
        3000,
        3,
        (0.15, 1.0),
    ),
    _sound_preset(
        "sawtooth-rich",
        "Rich Sawtooth",
        "sawtooth",
        "Rich harmonics - good for mountains and dramatic scenes",
        (0.02, 0.2, 0.7, 0.6),
        2500,
        4,
        (0.4, 3.0),
    ),
    _sound_preset(
        "sine-ambient",
        "Ambient Pad",
        "sine",
        "Long, sustained ambient texture",
        (0.5, 0.3, 0.8, 2.0),
        1000,
        1,
        (0.6, 5.0),
        delay=(0.375, 0.3),
    ),
    _sound_preset(
        "triangle-pluck",
        "Plucked",
        "triangle",
        "Short, plucked notes - good for rhythmic textures",
        (0.001, 0.3, 0.1, 0.2),
        4000,
        2,
        (0.1, 0.8),
    ),
]


@lru_cache(maxsize=1)
def default_catalog() -> PresetCatalog:
    """Get the built-in catalog (built once, shared; it is read-only)."""
    return PresetCatalog(
        _TOPO_PRESETS,
        _SCENE_PACKS,
        _SOUND_PRESETS,
        default_topo_id=DEFAULT_TOPO_PRESET_ID,
        default_sound_id=DEFAULT_SOUND_PRESET_ID,
    )
