"""
Catalog loader.

Reads metadata.csv, validates its structure and the image store, and
returns an ordered Catalog. Validation collects every problem of a kind
before raising so one report names them all.
"""

import csv
import io
from pathlib import Path

from loguru import logger

from ..errors import DuplicateKeyError, MissingImageError, SchemaError, TruncationError
from .base import CSV_COLUMNS, EXPECTED_HEADER, Catalog, PhotoRecord


def parse_tags(raw: str) -> tuple[str, ...]:
    """Split a tags field on whitespace, dropping empties and repeats.

    Args:
        raw: Space-separated tag string from the catalog

    Returns:
        Tags in order of first appearance
    """
    seen: dict[str, None] = {}
    for token in raw.split():
        token = token.strip()
        if token:
            seen.setdefault(token, None)
    return tuple(seen)


def validate_header(text: str) -> None:
    """Check that the first line exactly matches the expected column sequence."""
    first_line = text.split("\n", 1)[0].rstrip("\r")
    if first_line != EXPECTED_HEADER:
        raise SchemaError(
            "CSV header doesn't match expected format",
            expected=EXPECTED_HEADER,
            actual=first_line,
        )


def validate_trailing_newline(text: str, path: Path) -> None:
    """Reject files whose last record is not terminated."""
    if not text.endswith("\n"):
        raise TruncationError(path)


def _is_placeholder(filename: str) -> bool:
    return not filename or filename == CSV_COLUMNS[0]


UNSAFE_LABEL_CHARS = ("/", "\\")


def _has_unsafe_label(category: str, tags: tuple[str, ...]) -> bool:
    return any(ch in label for label in (category, *tags) for ch in UNSAFE_LABEL_CHARS)


def parse_records(text: str) -> list[PhotoRecord]:
    """Parse CSV text (header included) into photo records.

    Raises:
        SchemaError: If any row has more columns than the header.
        DuplicateKeyError: If two filenames share a key.
    """
    reader = csv.reader(io.StringIO(text))
    next(reader, None)

    records: list[PhotoRecord] = []
    bad_rows: list[int] = []
    unsafe_rows: list[int] = []
    filenames_by_key: dict[str, list[str]] = {}

    for row in reader:
        line_num = reader.line_num
        if not any(field.strip() for field in row):
            continue
        if len(row) > len(CSV_COLUMNS):
            bad_rows.append(line_num)
            continue
        row = [field.strip() for field in row]
        row += [""] * (len(CSV_COLUMNS) - len(row))
        fields = dict(zip(CSV_COLUMNS, row))

        filename = fields["filename"]
        if _is_placeholder(filename):
            logger.debug("Skipping placeholder row at line {}", line_num)
            continue

        tags = parse_tags(fields["tags"])
        if _has_unsafe_label(fields["category"], tags):
            unsafe_rows.append(line_num)

        key = Path(filename).stem
        filenames_by_key.setdefault(key, []).append(filename)
        records.append(
            PhotoRecord(
                key=key,
                filename=filename,
                title=fields["title"],
                year=fields["year"],
                location=fields["location"],
                camera=fields["camera"],
                lens=fields["lens"],
                film=fields["film"],
                developer=fields["developer"],
                description=fields["description"],
                tags=tags,
                category=fields["category"],
            )
        )

    if bad_rows:
        raise SchemaError(
            f"Rows have more than {len(CSV_COLUMNS)} columns (quote values containing commas)",
            bad_rows=bad_rows,
        )

    if unsafe_rows:
        raise SchemaError(
            "Category and tag labels cannot contain path separators",
            bad_rows=unsafe_rows,
        )

    duplicates = {key: names for key, names in filenames_by_key.items() if len(names) > 1}
    if duplicates:
        raise DuplicateKeyError(duplicates)

    return records


def find_missing_images(records: list[PhotoRecord], originals_dir: Path) -> list[str]:
    """Return the filename of every record with no file in the image store."""
    return [r.filename for r in records if not (originals_dir / r.filename).is_file()]


def load_catalog(csv_path: Path | str, originals_dir: Path | str) -> Catalog:
    """
    Load and validate the metadata table.

    Args:
        csv_path: Path to metadata.csv
        originals_dir: Directory holding the source images

    Returns:
        Catalog in source-file order

    Raises:
        FileNotFoundError: If the CSV file does not exist
        SchemaError: If the header or row shape is wrong
        TruncationError: If the file lacks a trailing newline
        DuplicateKeyError: If two records derive the same key
        MissingImageError: If any referenced image is absent (lists all of them)
    """
    csv_path = Path(csv_path)
    originals_dir = Path(originals_dir)

    if not csv_path.is_file():
        raise FileNotFoundError(
            f"Metadata file {csv_path} not found. "
            f"Create it with the columns: {EXPECTED_HEADER}"
        )

    logger.info("Validating CSV metadata: {}", csv_path)
    try:
        text = csv_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise SchemaError(f"{csv_path} is not valid UTF-8 (byte offset {e.start}): {e.reason}") from e

    validate_header(text)
    validate_trailing_newline(text, csv_path)
    records = parse_records(text)

    missing = find_missing_images(records, originals_dir)
    if missing:
        for name in missing:
            logger.error("Image not found: {}", name)
        raise MissingImageError(missing, originals_dir)

    logger.info("Loaded {} records from {}", len(records), csv_path)
    return Catalog(records)
