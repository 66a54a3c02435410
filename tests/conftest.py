import numpy as np
import pytest

from toposonics.models import FILTER_CUTOFF, REVERB_SEND, ImageAnalysisResult, NoteEvent


def make_rgba(rgb: np.ndarray) -> bytes:
    """Flatten an (h, w, 3) RGB array into opaque RGBA bytes."""
    h, w = rgb.shape[:2]
    alpha = np.full((h, w, 1), 255, dtype=np.uint8)
    return np.concatenate((rgb.astype(np.uint8), alpha), axis=2).tobytes()


@pytest.fixture
def rgba_from_rgb():
    return make_rgba


@pytest.fixture
def column_ramp_image():
    # 3×3 image: black, gray and white columns, identical rows
    row = np.array([[0, 0, 0], [128, 128, 128], [255, 255, 255]], dtype=np.uint8)
    rgb = np.stack([row] * 3)
    return make_rgba(rgb), 3, 3


@pytest.fixture
def ground_below_sky_image():
    # 4×5 image: dark rows 0-2, bright rows 3-4 (edge at y=3)
    rgb = np.zeros((5, 4, 3), dtype=np.uint8)
    rgb[3:] = 255
    return make_rgba(rgb), 4, 5


@pytest.fixture
def landscape_image():
    # 200×50 synthetic scene: bright ground under a wavy horizon, faint noise
    rng = np.random.default_rng(7)
    h, w = 50, 200
    rgb = rng.integers(0, 8, size=(h, w, 3)).astype(np.int32)
    xs = np.arange(w)
    ridge = (25 + 10 * np.sin(xs / 12)).astype(int)
    for x in xs:
        rgb[ridge[x]:, x] += 150
    rgb[:, ::17] += 60
    return make_rgba(np.clip(rgb, 0, 255)), w, h


@pytest.fixture
def sample_analysis():
    # All five profiles with 32 samples each
    n = 32
    xs = np.linspace(0, 1, n)
    return ImageAnalysisResult(
        width=n,
        height=16,
        brightness_profile=(xs * 255).tolist(),
        ridge_strength=np.abs(np.sin(xs * 6)).tolist(),
        depth_profile=(1 - xs).tolist(),
        horizon_profile=(0.5 + 0.4 * np.sin(xs * 3)).tolist(),
        texture_profile=(xs**2).tolist(),
    )


@pytest.fixture
def note_events():
    return [
        NoteEvent(
            pitch="C4",
            start=0.0,
            duration=1.0,
            velocity=0.8,
            pan=-0.5,
            voice="melody",
            effects={REVERB_SEND: 0.3, FILTER_CUTOFF: 0.6, "custom": 0.42},
        ),
        NoteEvent(pitch="E4", start=1.0, duration=0.5, velocity=0.6, voice="bass"),
        NoteEvent(pitch="G4", start=1.5, duration=2.0, velocity=0.4),
    ]
