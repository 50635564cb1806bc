"""Card image loading from the local image cache directory.

Images are stored as ``<image_dir>/<image key>.<ext>``. The loader is a plain
callable so the resource prefetcher runs it in a worker thread.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from PIL import Image

from utils.constants import IMAGE_CACHE_DIR

IMAGE_EXTENSIONS = (".png", ".webp", ".jpg", ".jpeg")
CARD_IMAGE_SIZE = (367, 512)
PLACEHOLDER_COLOR = (40, 46, 54)


class CardImageLoader:
    """Opens card images by key from a directory."""

    def __init__(self, image_dir: Path = IMAGE_CACHE_DIR, size: tuple[int, int] | None = None):
        self.image_dir = Path(image_dir)
        self.size = size

    def find_image_path(self, key: str) -> Path | None:
        """Return the first existing file for ``key``, trying every known extension."""
        if not key:
            return None
        # keys may already carry an extension
        direct = self.image_dir / key
        if direct.suffix.lower() in IMAGE_EXTENSIONS and direct.exists():
            return direct
        for ext in IMAGE_EXTENSIONS:
            candidate = self.image_dir / f"{key}{ext}"
            if candidate.exists():
                return candidate
        return None

    def __call__(self, key: str) -> Image.Image:
        """
        Load the image for ``key`` fully into memory.

        Raises:
            FileNotFoundError: If no image exists for the key
            OSError: If the file cannot be decoded
        """
        path = self.find_image_path(key)
        if path is None:
            raise FileNotFoundError(f"No cached image for {key}")
        with Image.open(path) as img:
            img.load()
            image = img.convert("RGBA")
        if self.size:
            image = image.resize(self.size)
        logger.trace(f"Loaded card image {path}")
        return image


def placeholder_image(size: tuple[int, int] = CARD_IMAGE_SIZE) -> Image.Image:
    """Default card image shown when the real one is unavailable."""
    return Image.new("RGBA", size, PLACEHOLDER_COLOR + (255,))


__all__ = ["CARD_IMAGE_SIZE", "CardImageLoader", "IMAGE_EXTENSIONS", "placeholder_image"]
