"""
Photo catalog package.

Loads the metadata table and derives the category and tag indices.
"""

from .base import CSV_COLUMNS, EXPECTED_HEADER, Catalog, CatalogIndex, PhotoRecord
from .index import build_index, find_slug_collisions, slugify
from .loader import load_catalog, parse_tags

__all__ = [
    "CSV_COLUMNS",
    "EXPECTED_HEADER",
    "Catalog",
    "CatalogIndex",
    "PhotoRecord",
    "build_index",
    "find_slug_collisions",
    "load_catalog",
    "parse_tags",
    "slugify",
]
