"""
Derivative generation.

Produces one resized JPEG per source image and size tier, reusing existing
derivatives the cache strategy considers valid.
"""

import os
import tempfile
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from loguru import logger
from PIL import Image as PILImage
from PIL import ImageOps, UnidentifiedImageError
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from ..errors import DerivativeEncodeError, InvalidSourceImageError
from .base import (
    DEFAULT_TIERS,
    CacheStrategy,
    DerivativeReport,
    DerivativeResult,
    DerivativeStatus,
    SizeTier,
    TimestampStrategy,
)

console = Console()

JPEG_EXTENSIONS = {".jpg", ".jpeg"}


def discover_sources(directory: Path | str) -> list[Path]:
    """List the JPEG files directly inside directory, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in JPEG_EXTENSIONS
    )


def open_source(source: Path) -> PILImage.Image:
    """
    Decode a source image and apply its EXIF orientation.

    Raises:
        InvalidSourceImageError: If the file cannot be decoded
    """
    try:
        with PILImage.open(source) as img:
            img.load()
            oriented = ImageOps.exif_transpose(img)
            return oriented.convert("RGB") if oriented.mode != "RGB" else oriented
    except (
        UnidentifiedImageError,
        PILImage.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        raise InvalidSourceImageError(source, str(e)) from e


def resize_to_fit(img: PILImage.Image, tier: SizeTier) -> PILImage.Image:
    """Shrink img into the tier's bounding box, preserving aspect ratio and never upscaling."""
    resized = img.copy()
    resized.thumbnail(tier.box, PILImage.Resampling.LANCZOS)
    # comments and ICC profiles ride along in info; derivatives carry pixels only
    resized.info.clear()
    return resized


def save_jpeg(img: PILImage.Image, output_path: Path, quality: int) -> None:
    """
    Encode img as a progressive 4:2:0 JPEG without metadata.

    The file is written beside output_path and moved into place, so a failed
    encode never leaves a partial derivative behind.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=output_path.parent, prefix=f".{output_path.stem}-", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            img.save(
                f,
                format="JPEG",
                quality=quality,
                optimize=True,
                progressive=True,
                subsampling="4:2:0",
            )
        # mkstemp creates 0600; derivatives are served as-is
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class DerivativePipeline:
    """Generates and caches resized copies of source images."""

    def __init__(
        self,
        output_dir: Path | str,
        tiers: Iterable[SizeTier] = DEFAULT_TIERS,
        quality: int = 85,
        strategy: CacheStrategy | None = None,
        max_workers: int = 1,
    ):
        """
        Initialize the pipeline.

        Args:
            output_dir: Root of the derivative tree (one subdirectory per tier)
            tiers: Size tiers to produce for every source
            quality: JPEG quality (1-100)
            strategy: Cache validation strategy (defaults to timestamps)
            max_workers: Number of sources processed concurrently
        """
        self.output_dir = Path(output_dir)
        self.tiers = tuple(tiers)
        self.quality = quality
        self.strategy = strategy or TimestampStrategy()
        self.max_workers = max(1, max_workers)

        logger.debug(
            "DerivativePipeline initialized: dir={}, tiers={}, quality={}, workers={}",
            self.output_dir,
            [t.name for t in self.tiers],
            quality,
            self.max_workers,
        )

    def derivative_path(self, source: Path, tier: SizeTier) -> Path:
        """Return the output path of source's derivative for tier."""
        return self.output_dir / tier.name / source.name

    def process_image(self, source: Path | str) -> list[DerivativeResult]:
        """
        Ensure every tier of one source image is up to date.

        The source is only decoded when at least one tier is stale. A source
        that cannot be decoded fails all of its stale tiers; a failure while
        encoding one tier does not affect the others.

        Args:
            source: Source image path

        Returns:
            One DerivativeResult per tier, in tier order
        """
        source = Path(source)
        results: dict[str, DerivativeResult] = {}
        stale: list[SizeTier] = []

        for tier in self.tiers:
            output_path = self.derivative_path(source, tier)
            if self.strategy.is_valid(source, output_path):
                logger.debug("Skipping {} of {} (already up to date)", tier.name, source.name)
                results[tier.name] = DerivativeResult(
                    source=source,
                    tier=tier.name,
                    output_path=output_path,
                    status=DerivativeStatus.SKIPPED,
                )
            else:
                stale.append(tier)

        if stale:
            try:
                img = open_source(source)
            except InvalidSourceImageError as e:
                logger.error("{}", e)
                for tier in stale:
                    results[tier.name] = DerivativeResult(
                        source=source,
                        tier=tier.name,
                        output_path=self.derivative_path(source, tier),
                        status=DerivativeStatus.FAILED,
                        error=str(e),
                        invalid_source=True,
                    )
                return [results[t.name] for t in self.tiers]

            try:
                for tier in stale:
                    results[tier.name] = self._encode_tier(img, source, tier)
            finally:
                img.close()

        return [results[t.name] for t in self.tiers]

    def _encode_tier(self, img: PILImage.Image, source: Path, tier: SizeTier) -> DerivativeResult:
        output_path = self.derivative_path(source, tier)
        try:
            resized = resize_to_fit(img, tier)
            save_jpeg(resized, output_path, self.quality)
        except (OSError, ValueError) as e:
            error = DerivativeEncodeError(source, tier.name, str(e))
            logger.error("{}", error)
            return DerivativeResult(
                source=source,
                tier=tier.name,
                output_path=output_path,
                status=DerivativeStatus.FAILED,
                error=str(error),
            )

        self.strategy.record(source, output_path)
        logger.debug(
            "Created {} version of {} ({}x{})",
            tier.name,
            source.name,
            resized.width,
            resized.height,
        )
        return DerivativeResult(
            source=source,
            tier=tier.name,
            output_path=output_path,
            status=DerivativeStatus.CREATED,
            width=resized.width,
            height=resized.height,
        )

    def run(self, sources: Iterable[Path | str]) -> DerivativeReport:
        """
        Process every source image, continuing past individual failures.

        Args:
            sources: Source image paths

        Returns:
            DerivativeReport with results in source order
        """
        sources = [Path(s) for s in sources]
        report = DerivativeReport()

        if not sources:
            logger.warning("No source images to process")
            return report

        logger.info("Processing {} images into {} tiers", len(sources), len(self.tiers))
        for tier in self.tiers:
            (self.output_dir / tier.name).mkdir(parents=True, exist_ok=True)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Resizing images...", total=len(sources))

            def process(source: Path) -> list[DerivativeResult]:
                try:
                    return self.process_image(source)
                finally:
                    progress.advance(task)

            if self.max_workers > 1:
                with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                    per_source = list(executor.map(process, sources))
            else:
                per_source = [process(source) for source in sources]

        self.strategy.flush()

        for source, results in zip(sources, per_source):
            report.results.extend(results)
            if any(r.invalid_source for r in results):
                report.invalid_sources.append(source)

        logger.info(
            "Processing complete: {} images, {} created, {} up to date, {} errors",
            report.processed,
            report.created,
            report.skipped,
            report.errors,
        )
        return report
