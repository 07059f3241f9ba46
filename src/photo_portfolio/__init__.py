"""
Photo Portfolio static site generator.

Turns a CSV photo catalog and a directory of JPEGs into a linked static
website with multi-resolution image derivatives.

Usage:
    # Full build
    photo-portfolio build

    # Resize images only
    photo-portfolio images

    # Generate HTML only
    photo-portfolio html
"""

__version__ = "0.1.0"

from .catalog import Catalog, CatalogIndex, PhotoRecord, build_index, load_catalog
from .images import DerivativePipeline
from .pipeline import run_build
from .rendering import RenderScope, TemplateRenderer
from .site import SitePlanner

__all__ = [
    "Catalog",
    "CatalogIndex",
    "DerivativePipeline",
    "PhotoRecord",
    "RenderScope",
    "SitePlanner",
    "TemplateRenderer",
    "build_index",
    "load_catalog",
    "run_build",
]
