"""Image-to-music conversion library.

This package turns photographs, landscapes in particular, into note sequences
and Standard MIDI Files. Horizontal profiles of visual features (brightness,
ridges, depth, horizon contour, texture) are sampled from the image and mapped
onto musical scales, either as a single melodic line or as a layered
composition of up to four voices.

The main processing pipeline consists of:
1. Feature extraction from a flat RGBA pixel buffer
2. Note mapping (LINEAR_LANDSCAPE, DEPTH_RIDGE or MULTI_VOICE)
3. Optional transposition, scale snapping and quantization
4. MIDI file export

Example:
    Basic usage through the pipeline API:

    >>> from toposonics.image_io import load_rgba_image
    >>> from toposonics.pipeline import process_complete_pipeline
    >>> from toposonics.models import ProcessingParameters
    >>>
    >>> pixels, width, height = load_rgba_image("alps.jpg")
    >>> params = ProcessingParameters(mode="MULTI_VOICE", preset_id="night-city")
    >>> _, _, midi_result = process_complete_pipeline(pixels, width, height, params)
"""

__version__ = "0.1.0"
