"""
Site generation package.

Plans the page set for a catalog and writes the rendered output tree.
"""

from .assets import copy_static, link_image_dirs
from .pages import Page, PageKind, site_url
from .planner import FEATURED_COUNT, SitePlanner, SiteReport

__all__ = [
    "FEATURED_COUNT",
    "Page",
    "PageKind",
    "SitePlanner",
    "SiteReport",
    "copy_static",
    "link_image_dirs",
    "site_url",
]
