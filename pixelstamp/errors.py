from __future__ import annotations


class PixelStampError(Exception):
    """Base class for every error raised by pixelstamp."""


class DecodeFailure(PixelStampError):
    """The image file could not be decoded."""


class UnsupportedFormat(PixelStampError):
    """The file extension is not handled by any converter."""


class InvalidDimensions(PixelStampError, ValueError):
    """A pixel grid reports inconsistent width, height or pixel count."""


class DimensionMismatch(PixelStampError, ValueError):
    """Packed data length does not match ``height * ceil(width / 8)``."""


class OutOfBounds(PixelStampError, IndexError):
    """A coordinate lies outside the declared width and height."""


class ResourceError(PixelStampError, ValueError):
    """A binary resource container is malformed or corrupted."""
