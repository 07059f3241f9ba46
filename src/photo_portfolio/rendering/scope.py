"""
Render scope: the immutable name-to-value table a template is expanded against.

Plain strings are HTML-escaped when expanded; markupsafe.Markup values are
trusted HTML fragments and inserted verbatim.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from markupsafe import Markup, escape

ScopeValue = str | Markup | int


class RenderScope(Mapping[str, Markup]):
    """Immutable mapping whose lookups always yield safe Markup."""

    def __init__(self, values: Mapping[str, ScopeValue] | None = None, **kwargs: ScopeValue):
        merged = dict(values or {})
        merged.update(kwargs)
        self._values = MappingProxyType(merged)

    def __getitem__(self, name: str) -> Markup:
        return escape(self._values[name])

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def raw(self, name: str) -> ScopeValue:
        """Return the stored value without escaping."""
        return self._values[name]

    def with_values(self, values: Mapping[str, ScopeValue] | None = None, **kwargs: ScopeValue) -> "RenderScope":
        """Return a new scope with values added or replaced."""
        merged = dict(self._values)
        merged.update(values or {})
        merged.update(kwargs)
        return RenderScope(merged)

    def __repr__(self) -> str:
        return f"RenderScope({dict(self._values)!r})"
