"""
Static asset copying and image tree linking for the build directory.
"""

import os
import shutil
from pathlib import Path

from loguru import logger

PACKAGED_STATIC = Path(__file__).resolve().parent.parent / "static"


def copy_static(output_dir: Path, static_dir: Path | None = None) -> list[str]:
    """
    Copy stylesheet and scripts into the site root.

    Args:
        output_dir: Site root
        static_dir: Asset directory; defaults to the packaged assets

    Returns:
        Names of the copied top-level entries
    """
    static_dir = static_dir or PACKAGED_STATIC
    if not static_dir.is_dir():
        logger.warning("Static directory {} does not exist, skipping", static_dir)
        return []

    shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)
    copied = sorted(p.name for p in static_dir.iterdir())
    logger.debug("Copied static assets: {}", copied)
    return copied


def link_image_dirs(build_dir: Path, *targets: Path) -> list[Path]:
    """
    Symlink image directories into the build directory so relative image links resolve.

    Existing links are replaced. Failures are logged and skipped.

    Args:
        build_dir: Site root
        *targets: Directories to link, each under its own name

    Returns:
        Links that were created
    """
    created = []
    for target in targets:
        if not target.exists():
            logger.debug("Not linking missing directory {}", target)
            continue
        link = build_dir / target.name
        relative = os.path.relpath(target.resolve(), build_dir.resolve())
        try:
            if link.is_symlink():
                link.unlink()
            elif link.exists():
                logger.warning("{} exists and is not a symlink, leaving it", link)
                continue
            link.symlink_to(relative, target_is_directory=True)
            created.append(link)
            logger.debug("Linked {} -> {}", link, relative)
        except OSError as e:
            logger.warning("Could not link {}: {}", link, e)
    return created
