"""Pytest fixtures and configuration for photo-portfolio tests.

This module provides shared fixtures for building catalogs, source images,
renderers and settings in temporary directories.
"""

import tempfile
from collections.abc import Callable, Generator
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from photo_portfolio.catalog import EXPECTED_HEADER

# --- Helpers ---


def make_jpeg(path: Path, size: tuple[int, int] = (64, 48), color: str = "red") -> Path:
    """Write a solid-color JPEG to path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=color).save(path, format="JPEG")
    return path


def catalog_text(rows: list[str]) -> str:
    """Return CSV text with the expected header and a trailing newline."""
    return "\n".join([EXPECTED_HEADER, *rows]) + "\n"


# --- Temporary Directory Fixtures ---


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def originals_dir(temp_dir: Path) -> Path:
    """Create a temporary source image directory."""
    path = temp_dir / "originals"
    path.mkdir()
    return path


@pytest.fixture
def resized_dir(temp_dir: Path) -> Path:
    """Return a path for the derivative tree (not created)."""
    return temp_dir / "resized"


@pytest.fixture
def build_dir(temp_dir: Path) -> Path:
    """Return a path for the site output (not created)."""
    return temp_dir / "build"


# --- Sample Data Fixtures ---


@pytest.fixture
def write_catalog(originals_dir: Path) -> Callable[..., Path]:
    """Return a function that writes metadata.csv and, optionally, its images."""

    def _write(rows: list[str], create_images: bool = True) -> Path:
        csv_path = originals_dir / "metadata.csv"
        csv_path.write_text(catalog_text(rows))
        if create_images:
            for row in rows:
                filename = row.split(",", 1)[0]
                if filename and filename != "filename":
                    make_jpeg(originals_dir / filename)
        return csv_path

    return _write


@pytest.fixture
def scenario_rows() -> list[str]:
    """Three records: two landscapes and one uncategorized."""
    return [
        "a.jpg,Sunset A,2023,Malibu,Canon R5,RF 24-70mm,,,Golden hour,sunset beach,Landscapes",
        "b.jpg,Beach B,2024,Santa Monica,Canon R5,RF 50mm,,,Waves,beach,Landscapes",
        "c.jpg,Street C,2023-2024,Tokyo,Leica M6,Summicron 35,Portra 400,D-76,Night,sunset,",
    ]


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Create sample JPEG bytes for testing."""
    img = Image.new("RGB", (100, 100), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


# --- Settings Override Fixtures ---


@pytest.fixture
def mock_settings(temp_dir: Path, originals_dir: Path, monkeypatch):
    """Override settings with test directories."""
    monkeypatch.setenv("ORIGINALS_DIR", str(originals_dir))
    monkeypatch.setenv("RESIZED_DIR", str(temp_dir / "resized"))
    monkeypatch.setenv("BUILD_DIR", str(temp_dir / "build"))
    monkeypatch.setenv("DERIVATIVE_WORKERS", "1")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    from photo_portfolio.config import Settings

    return Settings()
