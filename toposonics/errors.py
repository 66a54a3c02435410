"""Exception types raised by the toposonics core.

Extraction functions degrade gracefully and never raise on empty input, so
every error here signals either a caller programming error (a malformed pitch
string, impossible image dimensions) or, for the encoder, input that is valid
but cannot be written out.
"""


class TopoSonicsError(Exception):
    """Base exception for all toposonics errors."""

    pass


class InvalidPitchName(TopoSonicsError, ValueError):
    """Raised when a pitch string cannot be parsed to a MIDI number."""

    pass


class EmptyCompositionError(TopoSonicsError, ValueError):
    """Raised when encoding is attempted with zero note events."""

    pass


class MalformedAnalysisInput(TopoSonicsError, ValueError):
    """Raised for impossible dimensions or mismatched profile lengths."""

    pass
