"""
Image derivative package.

Generates multi-resolution JPEG derivatives with pluggable cache validation.
"""

from pathlib import Path

from .base import (
    DEFAULT_TIERS,
    CacheStrategy,
    ContentHashStrategy,
    DerivativeReport,
    DerivativeResult,
    DerivativeStatus,
    SizeTier,
    TimestampStrategy,
)
from .derivatives import DerivativePipeline, discover_sources


def create_cache_strategy(
    strategy_type: str = "timestamp",
    root: str | Path = "./resized",
) -> CacheStrategy:
    """
    Factory function to create a derivative cache strategy.

    Args:
        strategy_type: "timestamp" (modification times) or "hash" (source SHA-256)
        root: Derivative tree root, where the hash manifest is kept

    Returns:
        Configured CacheStrategy instance

    Raises:
        ValueError: If strategy_type is not recognized
    """
    if strategy_type == "timestamp":
        return TimestampStrategy()
    elif strategy_type == "hash":
        return ContentHashStrategy(root=root)
    else:
        raise ValueError(f"Unknown cache strategy: {strategy_type}")


__all__ = [
    "DEFAULT_TIERS",
    "CacheStrategy",
    "ContentHashStrategy",
    "DerivativePipeline",
    "DerivativeReport",
    "DerivativeResult",
    "DerivativeStatus",
    "SizeTier",
    "TimestampStrategy",
    "create_cache_strategy",
    "discover_sources",
]
