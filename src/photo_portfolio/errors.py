"""
Exception hierarchy for catalog loading and derivative generation.

Catalog errors are fatal and raised before any output is written.
Derivative errors are recoverable and collected into the run report.
"""

from pathlib import Path


class PortfolioError(Exception):
    """Base class for all build errors."""


class CatalogError(PortfolioError):
    """The metadata table cannot be turned into a catalog."""


class SchemaError(CatalogError):
    """Header row or row shape does not match the expected columns."""

    def __init__(
        self,
        message: str,
        expected: str | None = None,
        actual: str | None = None,
        bad_rows: list[int] | None = None,
    ):
        self.expected = expected
        self.actual = actual
        self.bad_rows = bad_rows or []
        details = [message]
        if expected is not None:
            details.append(f"  Expected: {expected}")
            details.append(f"  Found:    {actual}")
        if self.bad_rows:
            details.append("  Lines: " + ", ".join(str(n) for n in self.bad_rows))
        super().__init__("\n".join(details))


class TruncationError(CatalogError):
    """The metadata file does not end with a line terminator."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"{path} is missing a newline at the end; "
            "the last record could be dropped. "
            f"To fix: echo '' >> {path}"
        )


class MissingImageError(CatalogError):
    """One or more catalog records reference files absent from the image store."""

    def __init__(self, missing: list[str], originals_dir: Path):
        self.missing = list(missing)
        self.originals_dir = originals_dir
        listing = "\n".join(f"  - {name}" for name in self.missing)
        super().__init__(
            f"Found {len(self.missing)} missing image file(s) in {originals_dir}:\n{listing}"
        )


class DuplicateKeyError(CatalogError):
    """Two or more records derive the same photo key."""

    def __init__(self, duplicates: dict[str, list[str]]):
        self.duplicates = duplicates
        listing = "\n".join(
            f"  - {key}: {', '.join(names)}" for key, names in duplicates.items()
        )
        super().__init__(f"Duplicate photo keys in catalog:\n{listing}")


class DerivativeError(PortfolioError):
    """A derivative could not be produced."""

    def __init__(self, source: Path, message: str):
        self.source = source
        super().__init__(message)


class InvalidSourceImageError(DerivativeError):
    """The source image cannot be decoded; all of its tiers are skipped."""

    def __init__(self, source: Path, reason: str):
        super().__init__(source, f"Invalid image {source.name}: {reason}")


class DerivativeEncodeError(DerivativeError):
    """Encoding a single tier failed; other tiers continue."""

    def __init__(self, source: Path, tier: str, reason: str):
        self.tier = tier
        super().__init__(source, f"Failed to create {tier} version of {source.name}: {reason}")
