"""
Page model for the generated site.

Every page knows its output path relative to the site root and the base
path that internal links on it must be built from.
"""

from enum import Enum
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from ..catalog import slugify

PHOTO_DIR = "images"


class PageKind(str, Enum):
    INDEX = "index"
    GALLERY = "gallery"
    CATEGORY = "category"
    TAG = "tag"
    PHOTO = "photo"


TEMPLATES = {
    PageKind.INDEX: "index.html.tmpl",
    PageKind.GALLERY: "gallery.html.tmpl",
    PageKind.CATEGORY: "gallery.html.tmpl",
    PageKind.TAG: "gallery.html.tmpl",
    PageKind.PHOTO: "image.html.tmpl",
}


class Page(BaseModel):
    """One rendered output file."""

    model_config = ConfigDict(frozen=True)

    kind: PageKind
    output_path: str = Field(description="Path relative to the site root, '/'-separated")
    label: str | None = Field(default=None, description="Category or tag label")
    key: str | None = Field(default=None, description="Photo key for photo pages")

    @property
    def base_path(self) -> str:
        """Relative path from this page back to the site root."""
        depth = self.output_path.count("/")
        return "/".join([".."] * depth) if depth else "."

    @property
    def template(self) -> str:
        return TEMPLATES[self.kind]

    @classmethod
    def index(cls) -> "Page":
        return cls(kind=PageKind.INDEX, output_path="index.html")

    @classmethod
    def gallery(cls) -> "Page":
        return cls(kind=PageKind.GALLERY, output_path="gallery.html")

    @classmethod
    def category(cls, label: str) -> "Page":
        return cls(kind=PageKind.CATEGORY, output_path=category_filename(label), label=label)

    @classmethod
    def tag(cls, label: str) -> "Page":
        return cls(kind=PageKind.TAG, output_path=tag_filename(label), label=label)

    @classmethod
    def photo(cls, key: str) -> "Page":
        return cls(kind=PageKind.PHOTO, output_path=photo_filename(key), key=key)


def category_filename(label: str) -> str:
    return f"gallery-{slugify(label)}.html"


def tag_filename(label: str) -> str:
    return f"tag-{slugify(label)}.html"


def photo_filename(key: str) -> str:
    return f"{PHOTO_DIR}/{key}.html"


def site_url(base_path: str, relative: str) -> str:
    """Join a page's base path with a root-relative path, percent-encoding unsafe characters."""
    return f"{base_path}/{quote(relative)}"
