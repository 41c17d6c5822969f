"""Pytest configuration for all tests."""

from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from fileserve.core.config import Settings, get_settings
from fileserve.domain.services import FileRetrievalService


def make_image(path: Path, size: tuple[int, int], image_format: str, mode: str = "RGB", color="red") -> Path:
    """Write a solid-color image to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color).save(path, format=image_format)
    return path


def make_animated_gif(path: Path, size: tuple[int, int], colors: list[str]) -> Path:
    frames = [Image.new("RGB", size, color) for color in colors]
    frames[0].save(path, format="GIF", save_all=True, append_images=frames[1:], duration=80, loop=0)
    return path


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Reset the cached settings so env changes in one test do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """Create a storage root with a mix of images and other files.

    Layout::

        tmp_path/
            secret.txt              outside the root
            files-other/leak.txt    sibling sharing the root's name as prefix
            files/
                animated.gif        300x300, 3 frames
                both.jpg / both.png 10x10, same stem
                broken.png          not an image
                doc.pdf
                landscape.jpg       1600x900
                notes.txt
                photo.png           400x200
                sub/deep.jpg        50x50
    """
    root = tmp_path / "files"
    root.mkdir()

    make_image(root / "photo.png", (400, 200), "PNG")
    make_image(root / "landscape.jpg", (1600, 900), "JPEG", color="blue")
    make_image(root / "both.jpg", (10, 10), "JPEG")
    make_image(root / "both.png", (10, 10), "PNG")
    make_image(root / "sub" / "deep.jpg", (50, 50), "JPEG")
    make_animated_gif(root / "animated.gif", (300, 300), ["red", "green", "blue"])
    (root / "broken.png").write_bytes(b"this is not a png")
    (root / "doc.pdf").write_bytes(b"%PDF-1.4\n%fake pdf body\n")
    (root / "notes.txt").write_bytes(b"hello")

    (tmp_path / "secret.txt").write_bytes(b"top secret")
    (tmp_path / "files-other").mkdir()
    (tmp_path / "files-other" / "leak.txt").write_bytes(b"leaked")

    return root


@pytest.fixture
def settings(storage_root: Path) -> Settings:
    """Settings pointing at the test storage root."""
    return Settings(root_path=str(storage_root), environment="testing")


@pytest.fixture
def file_service(settings: Settings) -> FileRetrievalService:
    return FileRetrievalService(settings)
