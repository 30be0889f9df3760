"""
Image acquisition for uploaded files and camera captures.

Validates the media type, size and readability of a selected image and
wraps it as an AcquiredImage. Nothing here touches the network, so a
rejected file never reaches the extraction client.
"""

import logging
import mimetypes
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from tablescan import messages
from tablescan.config import AppConfig, get_config
from tablescan.errors import ValidationError

logger = logging.getLogger(__name__)


class ImageSource(Enum):
    """How the image was obtained."""
    UPLOAD = "upload"
    CAMERA = "camera"


@dataclass(frozen=True)
class AcquiredImage:
    """A validated image held for one conversion cycle."""
    data: bytes
    mime_type: str
    name: str
    source: ImageSource
    width: int
    height: int


class ImageAcquirer:
    """
    Accepts raw image payloads from the uploader or camera.

    Only the media types listed in the configuration are accepted
    (JPEG and PNG by default).
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or get_config()
        self.accepted_types = {t.lower() for t in self.config.accepted_mime_types}

    def accept(
        self,
        data: bytes,
        mime_type: Optional[str],
        name: str = "",
        source: ImageSource = ImageSource.UPLOAD,
    ) -> AcquiredImage:
        """
        Validate a payload and wrap it as an AcquiredImage.

        Args:
            data: Raw image bytes
            mime_type: Declared media type; guessed from the name when missing
            name: Original file name
            source: Upload or camera

        Returns:
            AcquiredImage ready for encoding

        Raises:
            ValidationError: If the type, size or content is not acceptable
        """
        resolved_type = self._resolve_mime_type(mime_type, name)
        if resolved_type not in self.accepted_types:
            logger.info(f"Rejected {name or 'image'}: unsupported type {mime_type!r}")
            raise ValidationError(
                messages.INVALID_FILE_TYPE,
                details={"mime_type": mime_type, "accepted": sorted(self.accepted_types)},
            )

        if not data:
            raise ValidationError(messages.EMPTY_FILE)

        if len(data) > self.config.max_file_size_bytes:
            raise ValidationError(
                messages.FILE_TOO_LARGE.format(max_mb=self.config.max_file_size_mb),
                details={"size_bytes": len(data)},
            )

        width, height = self._read_dimensions(data)

        image = AcquiredImage(
            data=bytes(data),
            mime_type=resolved_type,
            name=name,
            source=source,
            width=width,
            height=height,
        )
        logger.info(
            f"Accepted {source.value} image {name or '(unnamed)'}: "
            f"{width}x{height}, {resolved_type}, {len(data):,} bytes"
        )
        return image

    @staticmethod
    def _resolve_mime_type(mime_type: Optional[str], name: str) -> str:
        if not mime_type and name:
            mime_type, _ = mimetypes.guess_type(name)
        if not mime_type:
            return ""
        # Drop parameters such as "; charset=binary"
        return mime_type.split(";", 1)[0].strip().lower()

    @staticmethod
    def _read_dimensions(data: bytes) -> tuple[int, int]:
        try:
            with Image.open(BytesIO(data)) as img:
                return img.size
        except Image.DecompressionBombError as e:
            logger.info(f"Rejected oversized image: {e}")
            raise ValidationError(messages.IMAGE_TOO_LARGE)
        except (UnidentifiedImageError, OSError) as e:
            logger.info(f"Could not decode image: {e}")
            raise ValidationError(messages.UNREADABLE_IMAGE)

