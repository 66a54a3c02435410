import numpy as np
import pytest

from toposonics.errors import MalformedAnalysisInput
from toposonics.image_processing import (
    averaged_brightness_profile,
    brightness_profile,
    brightness_profile_from_row,
    classify_texture,
    depth_profile,
    detect_ridges,
    downsample_profile,
    edge_profile,
    horizon_contour,
    horizon_profile,
    normalize_profile,
    pixel_brightness,
    segment_profile,
    smooth_profile,
    sobel_edge_magnitudes,
    texture_from_brightness,
    texture_profile,
    to_rgba_array,
)


def test_pixel_brightness_weights() -> None:
    assert pixel_brightness(255, 255, 255) == pytest.approx(255.0)
    assert pixel_brightness(0, 255, 0) == pytest.approx(0.7152 * 255)


def test_brightness_profile_columns(column_ramp_image) -> None:
    pixels, w, h = column_ramp_image
    profile = brightness_profile(pixels, w, h, rows_to_average=3)
    assert profile == pytest.approx([0.0, 128.0, 255.0])


def test_brightness_profile_single_row_defaults_to_center(column_ramp_image) -> None:
    pixels, w, h = column_ramp_image
    assert brightness_profile(pixels, w, h) == pytest.approx([0.0, 128.0, 255.0])


def test_brightness_from_row_clamps_index(column_ramp_image) -> None:
    pixels, w, h = column_ramp_image
    assert brightness_profile_from_row(pixels, w, h, 99) == pytest.approx(
        [0.0, 128.0, 255.0]
    )


def test_averaged_brightness_rows(ground_below_sky_image) -> None:
    pixels, w, h = ground_below_sky_image
    # rows 2 (dark) and 3 (bright)
    profile = averaged_brightness_profile(pixels, w, h, 2, 4)
    assert profile == pytest.approx([127.5] * 4)


def test_brightness_accepts_numpy_and_lists(column_ramp_image) -> None:
    pixels, w, h = column_ramp_image
    as_array = np.frombuffer(pixels, dtype=np.uint8)
    assert brightness_profile(as_array, w, h) == brightness_profile(
        list(pixels), w, h
    )


@pytest.mark.parametrize("w, h", [(0, 0), (0, 5), (5, 0)])
def test_empty_image_yields_empty_profiles(w, h) -> None:
    assert brightness_profile(b"", w, h) == []
    assert horizon_profile(b"", w, h) == []
    assert texture_profile(b"", w, h) == []


def test_negative_dimensions_raise() -> None:
    with pytest.raises(MalformedAnalysisInput):
        brightness_profile(b"", -1, 3)


def test_non_integer_dimensions_raise() -> None:
    with pytest.raises(MalformedAnalysisInput):
        to_rgba_array(b"\x00" * 16, 2.0, 2)


def test_short_buffer_raises() -> None:
    with pytest.raises(MalformedAnalysisInput):
        brightness_profile(b"\x00" * 10, 2, 2)


def test_normalize_profile() -> None:
    assert normalize_profile([2, 4, 6]) == pytest.approx([0.0, 0.5, 1.0])
    assert normalize_profile([3, 3]) == [0.5, 0.5]
    assert normalize_profile([]) == []


def test_downsample_profile_bins() -> None:
    assert downsample_profile(list(range(10)), 5) == pytest.approx(
        [0.5, 2.5, 4.5, 6.5, 8.5]
    )


def test_downsample_profile_short_unchanged() -> None:
    profile = [1.0, 2.0, 3.0]
    result = downsample_profile(profile, 5)
    assert result == profile
    assert result is not profile


def test_depth_profile_flat_is_neutral() -> None:
    assert depth_profile([10.0] * 5) == [0.5] * 5


def test_depth_profile_contrast() -> None:
    assert depth_profile([0, 0, 255, 0, 0], window_size=3) == pytest.approx(
        [0.0, 1.0, 1.0, 1.0, 0.0]
    )


def test_detect_ridges_flat_is_zero() -> None:
    assert detect_ridges([0.0, 0.0, 0.0]) == [0.0, 0.0, 0.0]
    assert detect_ridges([]) == []


def test_detect_ridges_peak() -> None:
    ridges = detect_ridges([0.0, 100.0, 0.0])
    assert ridges == pytest.approx([1.0, 0.3, 1.0])


@pytest.mark.parametrize("use_sobel", [False, True])
def test_detect_ridges_range(use_sobel) -> None:
    rng = np.random.default_rng(0)
    values = rng.uniform(0, 255, size=50).tolist()
    ridges = detect_ridges(values, use_sobel=use_sobel)
    assert len(ridges) == 50
    assert all(0.0 <= r <= 1.0 for r in ridges)
    assert max(ridges) == pytest.approx(1.0)


def test_smooth_profile_truncates_ends() -> None:
    assert smooth_profile([0.0, 3.0, 6.0], 3) == pytest.approx([1.5, 3.0, 4.5])


def test_horizon_profile_finds_edge(ground_below_sky_image) -> None:
    pixels, w, h = ground_below_sky_image
    assert horizon_profile(pixels, w, h) == pytest.approx([0.25] * 4)


def test_horizon_profile_no_edge_is_bottom(rgba_from_rgb) -> None:
    pixels = rgba_from_rgb(np.zeros((4, 3, 3), dtype=np.uint8))
    assert horizon_profile(pixels, 3, 4) == [0.0, 0.0, 0.0]


def test_horizon_profile_single_row(rgba_from_rgb) -> None:
    pixels = rgba_from_rgb(np.full((1, 3, 3), 255, dtype=np.uint8))
    assert horizon_profile(pixels, 3, 1) == [0.0, 0.0, 0.0]


def test_horizon_contour_smooths(ground_below_sky_image) -> None:
    pixels, w, h = ground_below_sky_image
    assert horizon_contour(pixels, w, h) == pytest.approx([0.25] * 4)


def test_texture_from_brightness() -> None:
    texture = texture_from_brightness([0.0, 255.0, 0.0, 255.0], window_size=2)
    assert texture[0] == pytest.approx(0.5)
    assert all(0.0 <= t <= 1.0 for t in texture)


def test_texture_profile_uniform_is_zero(rgba_from_rgb) -> None:
    pixels = rgba_from_rgb(np.full((12, 6, 3), 90, dtype=np.uint8))
    assert texture_profile(pixels, 6, 12) == pytest.approx([0.0] * 6)


def test_segment_profile() -> None:
    assert segment_profile([1, 1, 3, 3], 2) == pytest.approx([1.0, 3.0])
    assert segment_profile([], 4) == []


@pytest.mark.parametrize(
    "value, label", [(0.0, "low"), (0.29, "low"), (0.3, "medium"), (0.7, "high")]
)
def test_classify_texture(value, label) -> None:
    assert classify_texture(value) == label


def test_sobel_edges_on_step(ground_below_sky_image) -> None:
    pixels, w, h = ground_below_sky_image
    magnitudes = sobel_edge_magnitudes(pixels, w, h)
    assert magnitudes.shape == (h, w)
    assert magnitudes.max() == pytest.approx(1.0)
    # The step lies between rows 2 and 3; row 0 is flat
    assert edge_profile(magnitudes, row_index=0, rows_to_average=1) == pytest.approx(
        [0.0] * w
    )


def test_sobel_edges_uniform_is_zero(rgba_from_rgb) -> None:
    pixels = rgba_from_rgb(np.full((5, 5, 3), 200, dtype=np.uint8))
    magnitudes = sobel_edge_magnitudes(pixels, 5, 5)
    assert not magnitudes.any()
