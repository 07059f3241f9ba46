"""
Template expansion.

Templates are plain text with $NAME or ${NAME} placeholders. Expansion is a
single pass: substituted values are never scanned for placeholders again, so
a literal "$TITLE" inside a catalog description stays text. Unresolved
names expand to the empty string.
"""

import string
from pathlib import Path

from loguru import logger
from markupsafe import Markup

from .scope import RenderScope

PACKAGED_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"
BASE_TEMPLATE = "base.html"


class _LenientScope(dict):
    """Lookup table that resolves unknown names to an empty string."""

    def __init__(self, scope: RenderScope, template_name: str):
        super().__init__()
        self.scope = scope
        self.template_name = template_name

    def __missing__(self, name: str) -> Markup:
        if name in self.scope:
            return self.scope[name]
        logger.debug("Unresolved placeholder ${} in {}", name, self.template_name)
        return Markup("")


def expand(template_text: str, scope: RenderScope, template_name: str = "<string>") -> Markup:
    """
    Expand placeholders in template_text against scope.

    Args:
        template_text: Template body
        scope: Values to substitute; plain strings are escaped
        template_name: Name used in log messages

    Returns:
        Rendered text marked safe
    """
    rendered = string.Template(template_text).safe_substitute(_LenientScope(scope, template_name))
    return Markup(rendered)


class TemplateRenderer:
    """Loads templates from a directory and renders pages inside the base layout."""

    def __init__(self, templates_dir: Path | str | None = None):
        """
        Initialize the renderer.

        Args:
            templates_dir: Directory of templates; defaults to the packaged set
        """
        self.templates_dir = Path(templates_dir) if templates_dir else PACKAGED_TEMPLATES
        self._cache: dict[str, str] = {}
        logger.debug("TemplateRenderer using {}", self.templates_dir)

    def load(self, name: str) -> str:
        """Return the text of a template, reading it once."""
        if name not in self._cache:
            path = self.templates_dir / name
            if not path.is_file():
                raise FileNotFoundError(f"Template not found: {path}")
            self._cache[name] = path.read_text(encoding="utf-8")
        return self._cache[name]

    def render(self, name: str, scope: RenderScope) -> Markup:
        """Expand a single template."""
        return expand(self.load(name), scope, template_name=name)

    def render_page(self, page_template: str, scope: RenderScope) -> Markup:
        """
        Render a page fragment and wrap it in the base layout.

        The fragment is bound as MAIN_CONTENT on a fresh scope; its text is
        nested as-is and not expanded a second time.

        Args:
            page_template: Name of the page body template
            scope: Page scope

        Returns:
            Complete HTML document
        """
        fragment = self.render(page_template, scope)
        return self.render(BASE_TEMPLATE, scope.with_values(MAIN_CONTENT=fragment))
