"""Configuration management using pydantic-settings.

Loads from environment variables and .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Build settings loaded from environment variables and .env file.

    Attributes:
        originals_dir: Directory holding the source JPEGs and metadata.csv.
        metadata_file: Catalog path; defaults to <originals_dir>/metadata.csv.
        resized_dir: Root of the derivative tree (one subdirectory per tier).
        build_dir: Output directory for the rendered site.
        templates_dir: Optional override for the packaged page templates.
        static_dir: Optional override for the packaged static assets.
        site_title: Site name shown in every page header.
        image_quality: JPEG compression quality (1-100) for derivatives.
        derivative_workers: Thread pool size for derivative generation.
        cache_strategy: Derivative cache validation, "timestamp" or "hash".
        link_image_dirs: Symlink resized/ and originals/ into the build dir.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format.
        log_file: Optional file to write logs to.

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Inputs
    originals_dir: str = "originals"
    metadata_file: str | None = None

    # Outputs
    resized_dir: str = "resized"
    build_dir: str = "build"

    # Presentation
    templates_dir: str | None = None
    static_dir: str | None = None
    site_title: str = "Photography Portfolio"

    # Derivatives
    image_quality: int = 85
    derivative_workers: int = 4
    cache_strategy: str = "timestamp"  # timestamp | hash
    link_image_dirs: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None

    @property
    def originals_path(self) -> Path:
        """Return the source image directory as a Path object."""
        return Path(self.originals_dir)

    @property
    def metadata_path(self) -> Path:
        """Return the catalog CSV path.

        Returns:
            Path: metadata_file when set, otherwise metadata.csv inside
            the originals directory.

        """
        if self.metadata_file:
            return Path(self.metadata_file)
        return self.originals_path / "metadata.csv"

    @property
    def resized_path(self) -> Path:
        """Return the derivative tree root as a Path object."""
        return Path(self.resized_dir)

    @property
    def build_path(self) -> Path:
        """Return the site output directory as a Path object."""
        return Path(self.build_dir)

    @property
    def templates_path(self) -> Path | None:
        """Return the template override directory, if configured."""
        return Path(self.templates_dir) if self.templates_dir else None

    @property
    def static_path(self) -> Path | None:
        """Return the static asset override directory, if configured."""
        return Path(self.static_dir) if self.static_dir else None


# Global settings instance
settings = Settings()
