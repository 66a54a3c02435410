import pytest

from toposonics.models import ImageAnalysisResult, NoteEvent


@pytest.fixture
def valid_note():
    return NoteEvent(pitch="A4", start=1.0, duration=0.5, velocity=0.75)


@pytest.fixture
def valid_analysis():
    return ImageAnalysisResult(
        width=4, height=2, brightness_profile=[0.0, 64.0, 128.0, 255.0]
    )
