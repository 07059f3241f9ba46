"""
Tests for configuration module.

Tests Settings class, environment variable loading, and property methods.
"""

from pathlib import Path

from photo_portfolio.config import Settings


class TestSettings:
    """Test Settings class."""

    def test_default_values(self, monkeypatch):
        """Test that default values are set correctly."""
        # Clear env vars that might override defaults from .env file
        for name in ("ORIGINALS_DIR", "RESIZED_DIR", "BUILD_DIR", "CACHE_STRATEGY", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.originals_dir == "originals"
        assert settings.resized_dir == "resized"
        assert settings.build_dir == "build"
        assert settings.site_title == "Photography Portfolio"
        assert settings.image_quality == 85
        assert settings.cache_strategy == "timestamp"
        assert settings.link_image_dirs is True
        assert settings.log_level == "INFO"
        assert settings.log_json is False

    def test_originals_path_property(self):
        """Test originals_path property returns Path object."""
        settings = Settings(originals_dir="./my/originals")

        assert isinstance(settings.originals_path, Path)
        assert str(settings.originals_path) == "my/originals"

    def test_metadata_path_defaults_into_originals(self):
        """Test that the catalog defaults to metadata.csv beside the images."""
        settings = Settings(originals_dir="photos", metadata_file=None)

        assert settings.metadata_path == Path("photos") / "metadata.csv"

    def test_metadata_path_override(self):
        """Test that an explicit catalog path wins."""
        settings = Settings(originals_dir="photos", metadata_file="data/catalog.csv")

        assert settings.metadata_path == Path("data/catalog.csv")

    def test_output_path_properties(self):
        """Test resized_path and build_path return Path objects."""
        settings = Settings(resized_dir="./out/resized", build_dir="./out/site")

        assert str(settings.resized_path) == "out/resized"
        assert str(settings.build_path) == "out/site"

    def test_optional_overrides_unset(self):
        """Test that template and static overrides are None by default."""
        settings = Settings(templates_dir=None, static_dir=None)

        assert settings.templates_path is None
        assert settings.static_path is None

    def test_logging_settings(self):
        """Test logging settings."""
        settings = Settings(log_level="DEBUG", log_json=True)

        assert settings.log_level == "DEBUG"
        assert settings.log_json is True


class TestSettingsFromEnv:
    """Test Settings loading from environment variables."""

    def test_load_from_env(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("ORIGINALS_DIR", "/srv/photos")
        monkeypatch.setenv("SITE_TITLE", "Film Diary")
        monkeypatch.setenv("DERIVATIVE_WORKERS", "8")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        settings = Settings()

        assert settings.originals_dir == "/srv/photos"
        assert settings.site_title == "Film Diary"
        assert settings.derivative_workers == 8
        assert settings.log_level == "WARNING"

    def test_env_overrides_defaults(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("CACHE_STRATEGY", "hash")
        monkeypatch.setenv("LINK_IMAGE_DIRS", "false")

        settings = Settings()

        assert settings.cache_strategy == "hash"
        assert settings.link_image_dirs is False
