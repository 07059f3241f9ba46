"""
Category and tag indices derived from the catalog.

Indices are rebuilt from scratch for every build and hold only photo
keys, never copies of record fields.
"""

from loguru import logger

from .base import Catalog, CatalogIndex


def slugify(label: str) -> str:
    """Lowercase a label and replace spaces with dashes."""
    return label.lower().replace(" ", "-")


def build_index(catalog: Catalog) -> CatalogIndex:
    """
    Build category and tag indices in a single pass over the catalog.

    Member lists keep catalog order and labels keep first-encounter order;
    no sorting is applied.

    Args:
        catalog: Loaded catalog

    Returns:
        CatalogIndex with categories and tags populated
    """
    index = CatalogIndex()
    for record in catalog:
        if record.category:
            index.add_category(record.category, record.key)
        for tag in record.tags:
            index.add_tag(tag, record.key)

    logger.debug(
        "Built index: {} categories, {} tags",
        len(index.categories),
        len(index.tags),
    )
    return index


def find_slug_collisions(labels: list[str]) -> dict[str, list[str]]:
    """Return slugs produced by more than one distinct label."""
    by_slug: dict[str, list[str]] = {}
    for label in labels:
        by_slug.setdefault(slugify(label), []).append(label)
    return {slug: names for slug, names in by_slug.items() if len(names) > 1}
