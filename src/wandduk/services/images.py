"""Image storage port and JPEG encoding."""

import io
from typing import Protocol

from PIL import Image

from wandduk.domain.errors import CompressionFailedError

_MAX_JPEG_QUALITY = 100
_TRANSPARENT_MODES = {"RGBA", "LA", "P"}
_BACKGROUND = (255, 255, 255)


class ImageStore(Protocol):
    """Persistence interface for meal photos."""

    def save(self, image: bytes) -> str:
        """Store an image and return its path relative to the storage root."""

    def load(self, relative_path: str) -> bytes | None:
        """Return stored image bytes, or None if absent."""

    def delete(self, relative_path: str) -> None:
        """Remove a stored image; missing files are ignored."""


def encode_jpeg(image: bytes, quality: float) -> bytes:
    """Re-encode arbitrary image bytes as a single-pass JPEG.

    ``quality`` is a fraction of the maximum (0.0-1.0). Transparent images are
    flattened onto a white background. Any decoder or encoder failure, including
    Pillow's decompression-bomb guard, raises CompressionFailedError.
    """
    try:
        with Image.open(io.BytesIO(image)) as source:
            source.load()
            rgb_image = _to_rgb(source)
            output = io.BytesIO()
            rgb_image.save(
                output, format="JPEG", quality=_pillow_quality(quality)
            )
    except Exception as exc:
        raise CompressionFailedError() from exc
    return output.getvalue()


def _to_rgb(image: Image.Image) -> Image.Image:
    if image.mode in _TRANSPARENT_MODES:
        if image.mode == "P":
            image = image.convert("RGBA")
        background = Image.new("RGB", image.size, _BACKGROUND)
        has_alpha = image.mode in ("RGBA", "LA")
        mask = image.split()[-1] if has_alpha else None
        background.paste(image, mask=mask)
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def _pillow_quality(quality: float) -> int:
    scaled = round(quality * _MAX_JPEG_QUALITY)
    return max(1, min(_MAX_JPEG_QUALITY, scaled))
