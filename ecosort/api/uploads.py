from __future__ import annotations

import io
import logging

from PIL import Image

from ..ai.errors import ValidationError


logger = logging.getLogger(__name__)


def validate_image_bytes(data: bytes | None, max_bytes: int) -> bytes:
    """Return ``data`` if it holds a decodable image within the size limit."""
    if not data:
        raise ValidationError("No file uploaded.")
    if len(data) > max_bytes:
        raise ValidationError(f"Uploaded file exceeds the {max_bytes} byte limit.")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except Exception as exc:
        logger.debug("Rejected upload that is not an image", exc_info=True)
        raise ValidationError("Uploaded file is not a valid image.") from exc
    return data


__all__ = ["validate_image_bytes"]
