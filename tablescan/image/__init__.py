"""Image acquisition and encoding."""

from .acquisition import AcquiredImage, ImageAcquirer, ImageSource
from .encoding import EncodedPayload, encode

__all__ = ["AcquiredImage", "ImageAcquirer", "ImageSource", "EncodedPayload", "encode"]
