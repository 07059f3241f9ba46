"""
Data models and cache validation for image derivatives.

Provides Pydantic models for size tiers and per-derivative results, and the
strategies that decide whether an existing derivative can be reused.
"""

import hashlib
import json
import threading
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class SizeTier(BaseModel):
    """A named bounding box that originals are shrunk into."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Tier name, also the output subdirectory")
    width: int = Field(gt=0, description="Maximum output width in pixels")
    height: int = Field(gt=0, description="Maximum output height in pixels")

    @property
    def box(self) -> tuple[int, int]:
        return (self.width, self.height)


DEFAULT_TIERS: tuple[SizeTier, ...] = (
    SizeTier(name="thumb", width=600, height=1080),
    SizeTier(name="small", width=1200, height=1080),
    SizeTier(name="medium", width=1800, height=1600),
    SizeTier(name="large", width=2400, height=1800),
    SizeTier(name="xlarge", width=3200, height=2400),
)


class DerivativeStatus(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


class DerivativeResult(BaseModel):
    """Outcome for one (source image, tier) pair."""

    source: Path = Field(description="Source image path")
    tier: str = Field(description="Tier name")
    output_path: Path = Field(description="Derivative file path")
    status: DerivativeStatus
    width: int | None = Field(default=None, description="Output width when created")
    height: int | None = Field(default=None, description="Output height when created")
    error: str | None = Field(default=None, description="Error message if generation failed")
    invalid_source: bool = Field(default=False, description="Source could not be decoded")


class DerivativeReport(BaseModel):
    """Aggregated results of one pipeline run."""

    results: list[DerivativeResult] = Field(default_factory=list)
    invalid_sources: list[Path] = Field(
        default_factory=list,
        description="Sources that could not be decoded; all their tiers were skipped",
    )

    def _count(self, status: DerivativeStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def created(self) -> int:
        return self._count(DerivativeStatus.CREATED)

    @property
    def skipped(self) -> int:
        return self._count(DerivativeStatus.SKIPPED)

    @property
    def errors(self) -> int:
        return self._count(DerivativeStatus.FAILED)

    @property
    def processed(self) -> int:
        """Number of distinct sources that were decoded successfully or fully cached."""
        sources = {r.source for r in self.results}
        return len(sources - set(self.invalid_sources))

    @property
    def failures(self) -> list[DerivativeResult]:
        return [r for r in self.results if r.status == DerivativeStatus.FAILED]


class CacheStrategy(ABC):
    """Decides whether an existing derivative can be reused for a source."""

    @abstractmethod
    def is_valid(self, source: Path, derivative: Path) -> bool:
        """
        Check whether derivative is up to date with source.

        Args:
            source: Original image
            derivative: Candidate derivative file

        Returns:
            True if the derivative can be kept as-is
        """
        pass

    def record(self, source: Path, derivative: Path) -> None:
        """Note that derivative was just regenerated from source."""
        pass

    def flush(self) -> None:
        """Persist any state gathered during a run."""
        pass


class TimestampStrategy(CacheStrategy):
    """A derivative is valid if it exists, is non-empty and is not older than its source.

    Touching a source forces regeneration even without a content change, and a
    restored source carrying an old timestamp can leave a stale derivative.
    """

    def is_valid(self, source: Path, derivative: Path) -> bool:
        try:
            derived = derivative.stat()
        except FileNotFoundError:
            return False
        if derived.st_size == 0:
            return False
        return derived.st_mtime >= source.stat().st_mtime


class HashManifest(BaseModel):
    """Source digests recorded per derivative, keyed by path relative to the tree root."""

    digests: dict[str, str] = Field(default_factory=dict)


class ContentHashStrategy(CacheStrategy):
    """A derivative is valid if the manifest records the source's current SHA-256."""

    def __init__(self, root: Path | str, manifest_name: str = "manifest.json"):
        self.root = Path(root)
        self.manifest_path = self.root / manifest_name
        self._lock = threading.Lock()
        self._digest_cache: dict[Path, str] = {}
        self.manifest = self._load_manifest()

    def _load_manifest(self) -> HashManifest:
        if self.manifest_path.exists():
            try:
                manifest = HashManifest.model_validate(json.loads(self.manifest_path.read_text()))
                logger.debug("Loaded hash manifest with {} entries", len(manifest.digests))
                return manifest
            except (ValueError, OSError) as e:
                logger.warning("Could not load hash manifest, starting fresh: {}", e)
        return HashManifest()

    def _relative(self, derivative: Path) -> str:
        try:
            return derivative.relative_to(self.root).as_posix()
        except ValueError:
            return derivative.as_posix()

    def digest(self, source: Path) -> str:
        """Return the SHA-256 of source, computed once per run."""
        with self._lock:
            cached = self._digest_cache.get(source)
        if cached is not None:
            return cached
        h = hashlib.sha256()
        with source.open("rb") as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b""):
                h.update(chunk)
        value = h.hexdigest()
        with self._lock:
            self._digest_cache[source] = value
        return value

    def is_valid(self, source: Path, derivative: Path) -> bool:
        if not derivative.is_file() or derivative.stat().st_size == 0:
            return False
        with self._lock:
            recorded = self.manifest.digests.get(self._relative(derivative))
        return recorded is not None and recorded == self.digest(source)

    def record(self, source: Path, derivative: Path) -> None:
        digest = self.digest(source)
        with self._lock:
            self.manifest.digests[self._relative(derivative)] = digest

    def flush(self) -> None:
        """Save the manifest to disk."""
        with self._lock:
            self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
            self.manifest_path.write_text(self.manifest.model_dump_json(indent=2))
        logger.debug("Saved hash manifest to {}", self.manifest_path)
