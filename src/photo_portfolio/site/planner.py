"""
Site planner.

Enumerates every page of the site, builds a fresh render scope for each,
and writes the rendered output tree from scratch.
"""

import shutil
from datetime import date
from pathlib import Path

from loguru import logger
from markupsafe import Markup
from pydantic import BaseModel, Field

from ..catalog import Catalog, CatalogIndex, PhotoRecord, find_slug_collisions
from ..images import DEFAULT_TIERS
from ..rendering import RenderScope, TemplateRenderer
from .assets import copy_static
from .pages import (
    PHOTO_DIR,
    Page,
    PageKind,
    category_filename,
    photo_filename,
    site_url,
    tag_filename,
)

FEATURED_COUNT = 6
ALL_PHOTOS_LABEL = "All Photos"
RESIZED_URL_DIR = "resized"


class SiteReport(BaseModel):
    """Summary of one site generation run."""

    output_dir: Path
    pages: dict[PageKind, int] = Field(default_factory=dict)
    written: list[str] = Field(default_factory=list)
    slug_collisions: dict[str, list[str]] = Field(default_factory=dict)
    static_assets: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.written)


class SitePlanner:
    """Plans and renders the full page set for a catalog."""

    def __init__(
        self,
        catalog: Catalog,
        index: CatalogIndex,
        renderer: TemplateRenderer,
        output_dir: Path | str,
        site_title: str = "Photography Portfolio",
        static_dir: Path | None = None,
        current_year: int | None = None,
    ):
        self.catalog = catalog
        self.index = index
        self.renderer = renderer
        self.output_dir = Path(output_dir)
        self.site_title = site_title
        self.static_dir = static_dir
        self.current_year = current_year or date.today().year

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self) -> list[Page]:
        """
        Enumerate every page in write order.

        Photo pages come first in catalog order, then the root gallery,
        category galleries and tag galleries in first-encounter order, then
        the index. Labels whose slugs collide are all planned; the later page
        overwrites the earlier file.

        Returns:
            Pages to render
        """
        pages = [Page.photo(record.key) for record in self.catalog]
        pages.append(Page.gallery())
        pages.extend(Page.category(label) for label in self.index.category_labels())
        pages.extend(Page.tag(label) for label in self.index.tag_labels())
        pages.append(Page.index())
        return pages

    def slug_collisions(self) -> dict[str, list[str]]:
        """Return colliding output files mapped to the labels that produce them."""
        collisions = {}
        for labels in find_slug_collisions(self.index.category_labels()).values():
            collisions[category_filename(labels[0])] = labels
        for labels in find_slug_collisions(self.index.tag_labels()).values():
            collisions[tag_filename(labels[0])] = labels
        return collisions

    # ------------------------------------------------------------------
    # Shared fragments
    # ------------------------------------------------------------------

    def derivative_url(self, base_path: str, tier: str, record: PhotoRecord) -> str:
        return site_url(base_path, f"{RESIZED_URL_DIR}/{tier}/{record.filename}")

    def navigation_items(self, base_path: str) -> Markup:
        """Render the nav menu: All Photos, then categories sorted alphabetically."""
        items = [
            Markup('<li><a href="{}">{}</a></li>').format(
                site_url(base_path, "gallery.html"), ALL_PHOTOS_LABEL
            )
        ]
        for label in self.index.category_labels(sort=True):
            items.append(
                Markup('<li><a href="{}">{}</a></li>').format(
                    site_url(base_path, category_filename(label)), label
                )
            )
        return Markup("").join(items)

    def tag_links(self, base_path: str, record: PhotoRecord) -> Markup:
        """Render one list item per tag, each linking to its tag gallery."""
        return Markup("").join(
            Markup('<li><a href="{}">{}</a></li>').format(
                site_url(base_path, tag_filename(tag)), tag
            )
            for tag in record.tags
        )

    def gallery_item(self, base_path: str, record: PhotoRecord) -> Markup:
        """Render the gallery card for one record."""
        scope = RenderScope(
            BASE_PATH=base_path,
            ITEM_KEY=record.key,
            ITEM_URL=site_url(base_path, photo_filename(record.key)),
            ITEM_THUMB_URL=self.derivative_url(base_path, "thumb", record),
            ITEM_FILENAME=record.filename,
            ITEM_TITLE=record.title,
            ITEM_LOCATION=record.location,
            ITEM_YEAR=record.year,
            ITEM_TAGS=" ".join(record.tags),
            ITEM_LOCATION_YEAR=record.location_year,
        )
        return self.renderer.render("gallery-item.html.tmpl", scope)

    def gallery_items(self, base_path: str, keys: list[str]) -> Markup:
        return Markup("").join(self.gallery_item(base_path, self.catalog.get(k)) for k in keys)

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def _base_scope(
        self,
        page: Page,
        title: str,
        description: str = "",
        og_record: PhotoRecord | None = None,
    ) -> RenderScope:
        base = page.base_path
        return RenderScope(
            SITE_TITLE=self.site_title,
            CURRENT_YEAR=str(self.current_year),
            BASE_PATH=base,
            NAVIGATION_ITEMS=self.navigation_items(base),
            PAGE_TITLE=title,
            PAGE_DESCRIPTION=description,
            OG_IMAGE=self.derivative_url(base, "large", og_record) if og_record else "",
            ADDITIONAL_SCRIPTS=Markup(""),
        )

    def scope_for(self, page: Page) -> RenderScope:
        """Build a fresh scope holding everything one page needs."""
        if page.kind == PageKind.PHOTO:
            return self._photo_scope(page)
        if page.kind == PageKind.INDEX:
            return self._index_scope(page)
        return self._gallery_scope(page)

    def _photo_scope(self, page: Page) -> RenderScope:
        record = self.catalog.get(page.key)
        prev_record, next_record = self.catalog.neighbours(record.key)
        base = page.base_path

        scope = self._base_scope(page, record.title, record.description, og_record=record)
        values: dict = {
            "ADDITIONAL_SCRIPTS": Markup('<script src="{}"></script>').format(
                site_url(base, "image-nav.js")
            ),
            "IMAGE_KEY": record.key,
            "IMAGE_FILENAME": record.filename,
            "IMAGE_TITLE": record.title,
            "IMAGE_YEAR": record.year,
            "IMAGE_YEAR_DISPLAY": record.year,
            "IMAGE_DESCRIPTION": record.description,
            "IMAGE_LOCATION": record.location,
            "IMAGE_CAMERA": record.camera,
            "IMAGE_LENS": record.lens,
            "IMAGE_FILM": record.film,
            "IMAGE_DEVELOPER": record.developer,
            "IMAGE_CATEGORY": record.category,
            "IMAGE_LOCATION_YEAR": record.location_year,
            "IMAGE_TAGS": self.tag_links(base, record),
            "PREV_IMAGE_URL": "#",
            "PREV_CLASS": " disabled",
            "NEXT_IMAGE_URL": "#",
            "NEXT_CLASS": " disabled",
        }
        for tier in DEFAULT_TIERS:
            values[f"IMAGE_URL_{tier.name.upper()}"] = self.derivative_url(base, tier.name, record)

        if prev_record is not None:
            values["PREV_IMAGE_URL"] = site_url(base, photo_filename(prev_record.key))
            values["PREV_CLASS"] = ""
        if next_record is not None:
            values["NEXT_IMAGE_URL"] = site_url(base, photo_filename(next_record.key))
            values["NEXT_CLASS"] = ""

        if record.category:
            values["CATEGORY_URL"] = site_url(base, category_filename(record.category))
            values["CATEGORY_LABEL"] = record.category
        else:
            values["CATEGORY_URL"] = site_url(base, "gallery.html")
            values["CATEGORY_LABEL"] = ALL_PHOTOS_LABEL

        return scope.with_values(values)

    def _gallery_scope(self, page: Page) -> RenderScope:
        if page.kind == PageKind.CATEGORY:
            keys = self.index.categories[page.label]
            title = gallery_title = page.label
            description = f"Photos in {page.label}"
        elif page.kind == PageKind.TAG:
            keys = self.index.tags[page.label]
            title = gallery_title = page.label
            description = f"Photos tagged {page.label}"
        else:
            keys = self.catalog.keys()
            title, gallery_title = "Gallery", ALL_PHOTOS_LABEL
            description = f"All photos from {self.site_title}"

        og_record = self.catalog.get(keys[0]) if keys else None
        scope = self._base_scope(page, title, description, og_record=og_record)
        return scope.with_values(
            GALLERY_TITLE=gallery_title,
            GALLERY_COUNT=len(keys),
            GALLERY_ITEMS=self.gallery_items(page.base_path, keys),
            PAGINATION=Markup('<span class="current">1</span>'),
        )

    def _index_scope(self, page: Page) -> RenderScope:
        featured = self.catalog.featured(FEATURED_COUNT)
        og_record = featured[0] if featured else None
        scope = self._base_scope(page, "Home", f"Photography by {self.site_title}", og_record)
        return scope.with_values(
            FEATURED_IMAGES=self.gallery_items(page.base_path, [r.key for r in featured]),
            PHOTO_COUNT=len(self.catalog),
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render(self, page: Page) -> Markup:
        """Render one page to a complete HTML document."""
        return self.renderer.render_page(page.template, self.scope_for(page))

    def build(self) -> SiteReport:
        """
        Regenerate the entire output tree.

        Returns:
            SiteReport with per-kind page counts and written paths
        """
        logger.info("Preparing build directory {}", self.output_dir)
        if self.output_dir.exists():
            shutil.rmtree(self.output_dir)
        (self.output_dir / PHOTO_DIR).mkdir(parents=True)

        report = SiteReport(output_dir=self.output_dir)
        report.static_assets = copy_static(self.output_dir, self.static_dir)

        report.slug_collisions = self.slug_collisions()
        for filename, labels in report.slug_collisions.items():
            logger.warning(
                "Labels {} all map to {}; the last one in catalog order wins",
                labels,
                filename,
            )

        for page in self.plan():
            html = self.render(page)
            target = self.output_dir / page.output_path
            target.write_text(str(html), encoding="utf-8")
            report.written.append(page.output_path)
            report.pages[page.kind] = report.pages.get(page.kind, 0) + 1
            logger.debug("Generated {}", page.output_path)

        logger.info(
            "HTML generation complete: {} photo pages, {} category galleries, {} tag galleries",
            report.pages.get(PageKind.PHOTO, 0),
            report.pages.get(PageKind.CATEGORY, 0),
            report.pages.get(PageKind.TAG, 0),
        )
        return report
