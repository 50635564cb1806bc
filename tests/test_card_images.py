"""Tests for card image loading."""

import pytest
from PIL import Image

from utils.card_images import CARD_IMAGE_SIZE, CardImageLoader, placeholder_image


@pytest.fixture
def image_dir(tmp_path):
    Image.new("RGB", (40, 56), (255, 0, 0)).save(tmp_path / "a1-001.png")
    Image.new("RGB", (40, 56), (0, 0, 255)).save(tmp_path / "a1-002.jpg")
    return tmp_path


def test_find_image_path_tries_extensions(image_dir):
    loader = CardImageLoader(image_dir)

    assert loader.find_image_path("a1-001") == image_dir / "a1-001.png"
    assert loader.find_image_path("a1-002") == image_dir / "a1-002.jpg"
    assert loader.find_image_path("a1-002.jpg") == image_dir / "a1-002.jpg"
    assert loader.find_image_path("missing") is None
    assert loader.find_image_path("") is None


def test_loader_returns_rgba_image(image_dir):
    image = CardImageLoader(image_dir)("a1-001")

    assert image.mode == "RGBA"
    assert image.size == (40, 56)


def test_loader_resizes_when_configured(image_dir):
    image = CardImageLoader(image_dir, size=(20, 28))("a1-002")

    assert image.size == (20, 28)


def test_loader_missing_image_raises(image_dir):
    with pytest.raises(FileNotFoundError):
        CardImageLoader(image_dir)("missing")


def test_placeholder_image():
    image = placeholder_image()

    assert image.size == CARD_IMAGE_SIZE
    assert image.mode == "RGBA"
