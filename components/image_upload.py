from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from config import UPLOAD_EXTENSIONS, UPLOAD_MAX_BYTES

_MIME_BY_FORMAT = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
}


class ImageUploadError(ValueError):
    pass


@dataclass
class UploadResult:
    url: str
    file_name: str
    width: int
    height: int


def image_to_data_url(file_name: str, data: bytes) -> UploadResult:
    """
    Validate an uploaded dress photo and return it as an inline data URL:
    - extension must be jpg, jpeg, png, gif or webp
    - at most 10 MB
    - must actually decode as one of those formats
    """
    ext = Path(file_name or "").suffix.lower()
    if ext not in UPLOAD_EXTENSIONS:
        raise ImageUploadError("Invalid file. Allowed: jpg, jpeg, png, gif, webp.")
    if not data:
        raise ImageUploadError("Empty file.")
    if len(data) > UPLOAD_MAX_BYTES:
        raise ImageUploadError("File too large. Max 10MB.")

    try:
        img = Image.open(BytesIO(data))
        img.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as exc:
        raise ImageUploadError(f"Could not read image: {exc}") from exc

    mime = _MIME_BY_FORMAT.get(img.format or "")
    if mime is None:
        raise ImageUploadError(f"Unsupported image format: {img.format}")

    encoded = base64.b64encode(data).decode("ascii")
    return UploadResult(
        url=f"data:{mime};base64,{encoded}",
        file_name=Path(file_name).name,
        width=img.width,
        height=img.height,
    )
