"""Formula substitution: replace TeX delimiter spans with rendered HTML.

Block forms (\\[..\\] and $$..$$) are resolved over the whole text first.
The inline pass (\\(..\\) and $..$) then runs only on the literal text left
between block outputs, so inline markers never match inside rendered HTML.

The renderer is any object with ``render(payload, display_mode) -> str``.
It may raise or return a failed RenderResult; either way the span becomes an
escaped error marker and the rest of the text is unaffected.
"""

import html

from clozemark.markers import BLOCK_FORMULA_STYLES, INLINE_FORMULA_STYLES
from clozemark.models import RenderResult, Span
from clozemark.spans import resolve, scan

ERROR_MARKER = '<span class="formula-error">[Formula Error: {payload}]</span>'


def substitute(text: str, renderer) -> str:
    """Return text with every formula span replaced by renderer output."""
    blocks = scan(text, BLOCK_FORMULA_STYLES)
    rendered = [render_span(span, renderer) for span in blocks]

    result = []
    last_end = 0
    for span, output in zip(blocks, rendered):
        result.append(_substitute_inline(text[last_end:span.start], renderer))
        result.append(output)
        last_end = span.end
    result.append(_substitute_inline(text[last_end:], renderer))
    return "".join(result)


def _substitute_inline(text: str, renderer) -> str:
    return resolve(text, scan(text, INLINE_FORMULA_STYLES),
                   lambda span: render_span(span, renderer))


def render_span(span: Span, renderer) -> str:
    payload = span.payload.strip()
    result = try_render(renderer, payload, span.display_mode)
    if result.ok:
        return result.html
    return error_marker(payload)


def try_render(renderer, payload: str, display_mode: str) -> RenderResult:
    """Call the renderer, folding exceptions and odd returns into a RenderResult."""
    try:
        output = renderer.render(payload, display_mode)
    except Exception as e:
        return RenderResult(error=str(e) or type(e).__name__)
    if isinstance(output, RenderResult):
        return output
    if output is None:
        return RenderResult(error="renderer returned no output")
    return RenderResult(html=str(output))


def error_marker(payload: str) -> str:
    return ERROR_MARKER.format(payload=escape_html(payload))


def escape_html(text: str) -> str:
    """Escape & < > " and ' for safe embedding in HTML text or attributes."""
    return html.escape(text, quote=True)
