"""Load card photos for upload to a vision model."""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Supported image extensions
MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
}


@dataclass
class CardImage:
    """Base64-encoded image ready to send to a model."""

    path: Path
    """Source file."""

    mime_type: str
    """MIME type derived from the file extension."""

    data: str
    """Base64 payload without the data URL prefix."""

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def load_card_image(image_path: str | Path) -> CardImage:
    """
    Read an image file and encode it as base64.

    Args:
        image_path: Path to the business card photo.

    Returns:
        CardImage with the encoded payload.

    Raises:
        FileNotFoundError: If the image file does not exist.
        ValueError: If the file type is not supported or the file is empty.
    """
    path = Path(image_path)
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")

    mime_type = MIME_TYPES.get(path.suffix.lower())
    if mime_type is None:
        supported = ", ".join(sorted(MIME_TYPES))
        raise ValueError(f"Unsupported image type '{path.suffix}'. Use one of: {supported}")

    raw = path.read_bytes()
    if not raw:
        raise ValueError(f"Image file is empty: {path}")

    logger.debug("Loaded %s (%d bytes, %s)", path, len(raw), mime_type)
    return CardImage(
        path=path,
        mime_type=mime_type,
        data=base64.b64encode(raw).decode("ascii"),
    )
