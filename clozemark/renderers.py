"""Formula renderers with a built-in registry and user overrides.

A renderer is any object with ``render(payload, display_mode) -> str``.
Users can drop ``<clozemark_dir>/renderers/<name>.py`` defining a
``Renderer`` class to plug in a different engine.
"""

import importlib.util
import pathlib

from clozemark.formula import escape_html
from clozemark.models import BLOCK


class FormulaError(ValueError):
    """Raised by a renderer when a formula cannot be rendered."""


def check_braces(tex: str):
    """Raise FormulaError unless every unescaped { has a matching }."""
    depth = 0
    i = 0
    while i < len(tex):
        ch = tex[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise FormulaError(f"unexpected '}}' at offset {i}")
        i += 1
    if depth:
        raise FormulaError(f"{depth} unclosed '{{'")


class MathJaxRenderer:
    """Escaped TeX in MathJax delimiters; typesetting happens in the browser."""

    def render(self, payload: str, display_mode: str) -> str:
        check_braces(payload)
        tex = escape_html(payload)
        if display_mode == BLOCK:
            return f'<div class="math display">\\[{tex}\\]</div>'
        return f'<span class="math inline">\\({tex}\\)</span>'


class PlainRenderer:
    """TeX source shown verbatim, for plain-text previews."""

    def render(self, payload: str, display_mode: str) -> str:
        tex = escape_html(payload)
        if display_mode == BLOCK:
            return f'<pre class="math display"><code>{tex}</code></pre>'
        return f'<code class="math inline">{tex}</code>'


_BUILTIN_RENDERERS = {
    "mathjax": MathJaxRenderer,
    "plain": PlainRenderer,
}


def get_renderer(name: str, clozemark_dir: pathlib.Path | None = None):
    # Check user override first
    if clozemark_dir is not None:
        renderer_path = clozemark_dir / "renderers" / f"{name}.py"
        if renderer_path.exists():
            spec = importlib.util.spec_from_file_location(
                f"clozemark_renderer_{name}", str(renderer_path))
            mod = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(mod)
            return mod.Renderer()

    if name in _BUILTIN_RENDERERS:
        return _BUILTIN_RENDERERS[name]()

    raise FileNotFoundError(f"Renderer not found: {name}")
