"""
Build orchestration.

Loads the catalog, refreshes image derivatives and regenerates the site.
Catalog errors propagate before anything is written; derivative failures
are collected in the report.
"""

from loguru import logger
from pydantic import BaseModel, Field

from .catalog import Catalog, build_index, load_catalog
from .config import Settings
from .images import DerivativePipeline, DerivativeReport, create_cache_strategy
from .logging import timed
from .rendering import TemplateRenderer
from .site import SitePlanner, SiteReport, link_image_dirs


class BuildReport(BaseModel):
    """Outcome of a build run."""

    records: int = 0
    derivatives: DerivativeReport | None = None
    site: SiteReport | None = None
    timings: dict[str, float] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when no derivative failed."""
        return self.derivatives is None or self.derivatives.errors == 0


def load(settings: Settings) -> Catalog:
    """Load and validate the catalog configured in settings."""
    return load_catalog(settings.metadata_path, settings.originals_path)


def generate_derivatives(
    catalog: Catalog,
    settings: Settings,
    workers: int | None = None,
) -> DerivativeReport:
    """Ensure every tier of every catalog image is up to date."""
    strategy = create_cache_strategy(settings.cache_strategy, root=settings.resized_path)
    pipeline = DerivativePipeline(
        output_dir=settings.resized_path,
        quality=settings.image_quality,
        strategy=strategy,
        max_workers=workers or settings.derivative_workers,
    )
    sources = [settings.originals_path / record.filename for record in catalog]
    return pipeline.run(sources)


def generate_site(catalog: Catalog, settings: Settings) -> SiteReport:
    """Render the complete site for catalog into the build directory."""
    index = build_index(catalog)
    renderer = TemplateRenderer(settings.templates_path)
    planner = SitePlanner(
        catalog=catalog,
        index=index,
        renderer=renderer,
        output_dir=settings.build_path,
        site_title=settings.site_title,
        static_dir=settings.static_path,
    )
    report = planner.build()
    if settings.link_image_dirs:
        link_image_dirs(settings.build_path, settings.resized_path, settings.originals_path)
    return report


def run_build(
    settings: Settings,
    images: bool = True,
    html: bool = True,
    workers: int | None = None,
) -> BuildReport:
    """
    Run a full or partial build.

    Args:
        settings: Build configuration
        images: Refresh image derivatives
        html: Regenerate the site
        workers: Override for the derivative thread pool size

    Returns:
        BuildReport with per-step results and timings

    Raises:
        CatalogError: If the catalog fails validation (nothing is written)
        FileNotFoundError: If the catalog file is missing
    """
    report = BuildReport()

    with timed("Catalog validation", report.timings):
        catalog = load(settings)
    report.records = len(catalog)

    if images:
        with timed("Image resizing", report.timings):
            report.derivatives = generate_derivatives(catalog, settings, workers)

    if html:
        with timed("HTML generation", report.timings):
            report.site = generate_site(catalog, settings)

    logger.info("Build finished in {:.1f} seconds", sum(report.timings.values()))
    return report
