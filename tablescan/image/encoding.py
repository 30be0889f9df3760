"""Base64 encoding of acquired images for the extraction request."""

import base64
from dataclasses import dataclass

from tablescan.image.acquisition import AcquiredImage


@dataclass(frozen=True)
class EncodedPayload:
    """Transport-safe image text plus its original media type."""
    data: str
    mime_type: str


def encode(image: AcquiredImage) -> EncodedPayload:
    """Encode image bytes as standard base64 text."""
    b64 = base64.b64encode(image.data).decode("ascii")
    return EncodedPayload(data=b64, mime_type=image.mime_type)
