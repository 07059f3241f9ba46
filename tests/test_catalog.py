"""Tests for catalog loading and index building.

Tests header and newline validation, record parsing, missing-image
reporting, and category/tag index order.
"""

import pytest
from conftest import catalog_text, make_jpeg

from photo_portfolio.catalog import (
    EXPECTED_HEADER,
    Catalog,
    PhotoRecord,
    build_index,
    find_slug_collisions,
    load_catalog,
    parse_tags,
    slugify,
)
from photo_portfolio.errors import (
    DuplicateKeyError,
    MissingImageError,
    SchemaError,
    TruncationError,
)


def record(key: str, category: str = "", tags: tuple[str, ...] = ()) -> PhotoRecord:
    return PhotoRecord(key=key, filename=f"{key}.jpg", title=key.upper(), category=category, tags=tags)


class TestParseTags:
    """Test tag field parsing."""

    def test_splits_on_whitespace(self):
        """Test that tags are split on any whitespace."""
        assert parse_tags("sunset  beach\tocean") == ("sunset", "beach", "ocean")

    def test_empty_field(self):
        """Test that an empty field yields no tags."""
        assert parse_tags("") == ()
        assert parse_tags("   ") == ()

    def test_duplicates_removed_keeping_first(self):
        """Test that repeated tags collapse to the first occurrence."""
        assert parse_tags("beach sunset beach") == ("beach", "sunset")


class TestLoadCatalog:
    """Test load_catalog function."""

    def test_load_success(self, write_catalog, originals_dir, scenario_rows):
        """Test loading a valid catalog keeps file order."""
        csv_path = write_catalog(scenario_rows)

        catalog = load_catalog(csv_path, originals_dir)

        assert catalog.keys() == ["a", "b", "c"]
        a = catalog.get("a")
        assert a.filename == "a.jpg"
        assert a.title == "Sunset A"
        assert a.tags == ("sunset", "beach")
        assert a.category == "Landscapes"
        assert catalog.get("c").category == ""
        assert catalog.get("c").year == "2023-2024"

    def test_header_mismatch(self, originals_dir):
        """Test that a wrong header raises SchemaError with both headers."""
        csv_path = originals_dir / "metadata.csv"
        csv_path.write_text("filename,title,year\na.jpg,A,2024\n")

        with pytest.raises(SchemaError) as exc_info:
            load_catalog(csv_path, originals_dir)

        assert exc_info.value.expected == EXPECTED_HEADER
        assert exc_info.value.actual == "filename,title,year"

    def test_crlf_header_accepted(self, originals_dir):
        """Test that Windows line endings do not break header validation."""
        make_jpeg(originals_dir / "a.jpg")
        csv_path = originals_dir / "metadata.csv"
        csv_path.write_bytes(f"{EXPECTED_HEADER}\r\na.jpg,A,2024,,,,,,,,\r\n".encode())

        catalog = load_catalog(csv_path, originals_dir)

        assert catalog.keys() == ["a"]

    def test_missing_trailing_newline(self, originals_dir):
        """Test that an unterminated last record raises TruncationError."""
        make_jpeg(originals_dir / "a.jpg")
        csv_path = originals_dir / "metadata.csv"
        csv_path.write_text(catalog_text(["a.jpg,A,2024,,,,,,,,"]).rstrip("\n"))

        with pytest.raises(TruncationError):
            load_catalog(csv_path, originals_dir)

    def test_missing_images_all_reported(self, write_catalog, originals_dir):
        """Test that every missing image is named in one error."""
        csv_path = write_catalog(
            [
                "a.jpg,A,2024,,,,,,,,",
                "missing.jpg,Missing,2024,,,,,,,,",
                "gone.jpg,Gone,2024,,,,,,,,",
            ],
            create_images=False,
        )
        make_jpeg(originals_dir / "a.jpg")

        with pytest.raises(MissingImageError) as exc_info:
            load_catalog(csv_path, originals_dir)

        assert exc_info.value.missing == ["missing.jpg", "gone.jpg"]
        assert "missing.jpg" in str(exc_info.value)

    def test_invalid_utf8(self, originals_dir):
        """Test that undecodable bytes raise SchemaError naming the file and offset."""
        make_jpeg(originals_dir / "a.jpg")
        csv_path = originals_dir / "metadata.csv"
        csv_path.write_bytes(f"{EXPECTED_HEADER}\na.jpg,Caf".encode() + b"\xe9,2024,,,,,,,,\n")

        with pytest.raises(SchemaError) as exc_info:
            load_catalog(csv_path, originals_dir)

        offset = len(EXPECTED_HEADER) + len("\na.jpg,Caf")
        assert f"byte offset {offset}" in str(exc_info.value)
        assert "metadata.csv" in str(exc_info.value)

    def test_file_not_found(self, originals_dir):
        """Test that a missing catalog raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_catalog(originals_dir / "metadata.csv", originals_dir)

    def test_skips_placeholder_rows(self, write_catalog, originals_dir):
        """Test that stray header-like and empty-key rows are skipped."""
        csv_path = write_catalog(
            [
                "a.jpg,A,2024,,,,,,,,",
                EXPECTED_HEADER,
                ",Untitled,2024,,,,,,,,",
                "",
                "b.jpg,B,2024,,,,,,,,",
            ]
        )

        catalog = load_catalog(csv_path, originals_dir)

        assert catalog.keys() == ["a", "b"]

    def test_quoted_commas(self, write_catalog, originals_dir):
        """Test that quoted fields may contain commas."""
        csv_path = write_catalog(['a.jpg,"Hello, World",2024,"Paris, France",,,,,"One, two",,'])

        catalog = load_catalog(csv_path, originals_dir)

        assert catalog.get("a").title == "Hello, World"
        assert catalog.get("a").location == "Paris, France"
        assert catalog.get("a").description == "One, two"

    def test_short_rows_padded(self, write_catalog, originals_dir):
        """Test that rows with fewer columns get empty trailing fields."""
        csv_path = write_catalog(["a.jpg,Only Title"])

        catalog = load_catalog(csv_path, originals_dir)

        assert catalog.get("a").title == "Only Title"
        assert catalog.get("a").tags == ()
        assert catalog.get("a").category == ""

    def test_too_many_columns(self, write_catalog, originals_dir):
        """Test that rows with extra columns raise SchemaError with line numbers."""
        csv_path = write_catalog(["a.jpg,A,2024,,,,,,desc,tag,cat,extra"])

        with pytest.raises(SchemaError) as exc_info:
            load_catalog(csv_path, originals_dir)

        assert exc_info.value.bad_rows == [2]

    def test_duplicate_keys(self, write_catalog, originals_dir):
        """Test that two files with the same stem are rejected."""
        csv_path = write_catalog(["a.jpg,A,2024,,,,,,,,", "a.jpeg,A again,2024,,,,,,,,"])

        with pytest.raises(DuplicateKeyError) as exc_info:
            load_catalog(csv_path, originals_dir)

        assert exc_info.value.duplicates == {"a": ["a.jpg", "a.jpeg"]}

    def test_path_separator_in_label(self, write_catalog, originals_dir):
        """Test that labels which would escape the site root are rejected."""
        csv_path = write_catalog(["a.jpg,A,2024,,,,,,,,Black/White"])

        with pytest.raises(SchemaError):
            load_catalog(csv_path, originals_dir)

    def test_empty_catalog(self, write_catalog, originals_dir):
        """Test that a header-only catalog loads as empty."""
        csv_path = write_catalog([])

        catalog = load_catalog(csv_path, originals_dir)

        assert len(catalog) == 0


class TestCatalog:
    """Test Catalog navigation helpers."""

    def test_neighbours(self):
        """Test prev/next at the ends and in the middle."""
        catalog = Catalog([record("a"), record("b"), record("c")])

        assert catalog.neighbours("a") == (None, catalog.get("b"))
        assert catalog.neighbours("b") == (catalog.get("a"), catalog.get("c"))
        assert catalog.neighbours("c") == (catalog.get("b"), None)

    def test_featured_fewer_than_count(self):
        """Test that featured returns everything when the catalog is small."""
        catalog = Catalog([record("a"), record("b")])

        assert [r.key for r in catalog.featured(6)] == ["a", "b"]

    def test_location_year(self):
        """Test combined location and year display."""
        assert PhotoRecord(key="a", filename="a.jpg", title="A", location="Oslo", year="2020").location_year == "Oslo, 2020"
        assert PhotoRecord(key="a", filename="a.jpg", title="A", location="Oslo").location_year == "Oslo"
        assert PhotoRecord(key="a", filename="a.jpg", title="A", year="2020").location_year == "2020"
        assert PhotoRecord(key="a", filename="a.jpg", title="A").location_year == ""


class TestBuildIndex:
    """Test build_index function."""

    def test_scenario_membership(self):
        """Test category and tag membership in catalog order."""
        catalog = Catalog(
            [
                record("a", "Landscapes", ("sunset", "beach")),
                record("b", "Landscapes", ("beach",)),
                record("c", "", ("sunset",)),
            ]
        )

        index = build_index(catalog)

        assert index.categories == {"Landscapes": ["a", "b"]}
        assert index.tags == {"sunset": ["a", "c"], "beach": ["a", "b"]}

    def test_labels_keep_first_encounter_order(self):
        """Test that labels are not sorted by the index."""
        catalog = Catalog([record("a", "Zebra"), record("b", "Apple"), record("c", "Zebra")])

        index = build_index(catalog)

        assert index.category_labels() == ["Zebra", "Apple"]
        assert index.category_labels(sort=True) == ["Apple", "Zebra"]
        assert index.categories["Zebra"] == ["a", "c"]

    def test_empty_catalog(self):
        """Test that an empty catalog produces empty indices."""
        index = build_index(Catalog())

        assert index.categories == {}
        assert index.tags == {}


class TestSlugify:
    """Test slug generation."""

    def test_lowercase_and_dashes(self):
        """Test lowercase conversion and space replacement."""
        assert slugify("Black and White") == "black-and-white"

    def test_collisions_detected(self):
        """Test that labels differing only in case are reported."""
        collisions = find_slug_collisions(["Street", "street", "Portraits"])

        assert collisions == {"street": ["Street", "street"]}
