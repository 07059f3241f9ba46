"""
Data models for the photo catalog.

Provides Pydantic models for photo records, the ordered catalog and the
label indices derived from it.
"""

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

CSV_COLUMNS = (
    "filename",
    "title",
    "year",
    "location",
    "camera",
    "lens",
    "film",
    "developer",
    "description",
    "tags",
    "category",
)
EXPECTED_HEADER = ",".join(CSV_COLUMNS)


class PhotoRecord(BaseModel):
    """One row of the metadata table."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Filename without extension, unique per catalog")
    filename: str = Field(description="Source image filename in the originals directory")
    title: str = Field(description="Display title")
    year: str = Field(default="", description="Free-form year or range, e.g. 2023-2024")
    location: str = ""
    camera: str = ""
    lens: str = ""
    film: str = ""
    developer: str = ""
    description: str = ""
    tags: tuple[str, ...] = Field(default=(), description="Tags in first-appearance order")
    category: str = Field(default="", description="Single optional category label")

    @property
    def location_year(self) -> str:
        """Location and year joined for display, or whichever one is set."""
        if self.location and self.year:
            return f"{self.location}, {self.year}"
        return self.location or self.year


class Catalog:
    """Ordered, immutable sequence of photo records.

    Source-file order is the navigation order for prev/next links and the
    default listing order everywhere.
    """

    def __init__(self, records: list[PhotoRecord] | tuple[PhotoRecord, ...] = ()):
        self._records = tuple(records)
        self._positions = {record.key: i for i, record in enumerate(self._records)}

    def __iter__(self) -> Iterator[PhotoRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, position: int) -> PhotoRecord:
        return self._records[position]

    def __contains__(self, key: object) -> bool:
        return key in self._positions

    @property
    def records(self) -> tuple[PhotoRecord, ...]:
        return self._records

    def keys(self) -> list[str]:
        """Return every record key in catalog order."""
        return [record.key for record in self._records]

    def get(self, key: str) -> PhotoRecord:
        """Return the record for a key.

        Raises:
            KeyError: If no record has this key.
        """
        return self._records[self._positions[key]]

    def index_of(self, key: str) -> int:
        return self._positions[key]

    def neighbours(self, key: str) -> tuple[PhotoRecord | None, PhotoRecord | None]:
        """Return the records immediately before and after key, or None at the ends."""
        i = self._positions[key]
        prev_record = self._records[i - 1] if i > 0 else None
        next_record = self._records[i + 1] if i + 1 < len(self._records) else None
        return prev_record, next_record

    def featured(self, count: int) -> list[PhotoRecord]:
        return list(self._records[:count])


class CatalogIndex(BaseModel):
    """Category and tag indices mapping each label to member keys in catalog order."""

    categories: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Mapping from category label to photo keys",
    )
    tags: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Mapping from tag to photo keys",
    )

    def add_category(self, label: str, key: str) -> None:
        """Append a key to a category's member list."""
        self.categories.setdefault(label, []).append(key)

    def add_tag(self, tag: str, key: str) -> None:
        """Append a key to a tag's member list."""
        self.tags.setdefault(tag, []).append(key)

    def category_labels(self, sort: bool = False) -> list[str]:
        """Return category labels, in first-encounter order unless sort is set."""
        labels = list(self.categories)
        return sorted(labels) if sort else labels

    def tag_labels(self) -> list[str]:
        return list(self.tags)
