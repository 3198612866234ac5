"""Span scanning: walk text left to right and pull out typed delimiter spans.

Each MarkerStyle acts as a recognizer: given a cursor position it either
returns a Span (and the cursor jumps to its end) or declines. Declined or
malformed markup is left as literal text; nothing here raises.
"""

from typing import Callable

from clozemark.markers import ANNOTATION_STYLES, MarkerStyle
from clozemark.models import ANNOTATION, FORMULA, Span


def scan(text: str, styles=ANNOTATION_STYLES) -> list[Span]:
    """Scan text for spans of the given marker styles.

    Args:
        text: Source text.
        styles: Marker styles in priority order. At each position the first
                style that recognizes a span wins.

    Returns spans ordered by start offset, never overlapping.
    """
    spans = []
    closes: dict[MarkerStyle, tuple[int, int]] = {}
    pos = 0
    while pos < len(text):
        span = None
        for style in styles:
            span = _recognize(text, pos, style, closes)
            if span is not None:
                break
        if span is None:
            pos += 1
        else:
            spans.append(span)
            pos = span.end
    return spans


def _recognize(text: str, pos: int, style: MarkerStyle,
               closes: dict[MarkerStyle, tuple[int, int]]) -> Span | None:
    if not text.startswith(style.open_token, pos):
        return None
    if style.exclusive and not _is_isolated(text, pos, style.open_token):
        return None

    inner_start = pos + len(style.open_token)
    close = _cached_close(text, inner_start, style, closes)
    if close == -1:
        return None
    # An escaped copy of the close character before the close was already
    # consumed as payload, so escaping styles only check the following side.
    if style.exclusive and not _is_isolated(text, close, style.close_token,
                                            check_before=not style.escapes):
        return None
    if close == inner_start and not style.allow_empty:
        return None
    end = close + len(style.close_token)

    if style.kind == ANNOTATION:
        m = style.group_key_pattern.fullmatch(text, inner_start, close)
        if m is None:
            return None
        return Span(kind=ANNOTATION, start=pos, end=end,
                    payload=m.group(2), group_key=int(m.group(1)))

    return Span(kind=FORMULA, start=pos, end=end,
                payload=text[inner_start:close], display_mode=style.display_mode)


def _is_isolated(text: str, pos: int, token: str, check_before: bool = True) -> bool:
    """True when the token at pos does not touch another copy of its character.

    `$$` inside `$$$` is not a token, nor is `$` inside `$$`.
    """
    ch = token[0]
    if check_before and pos > 0 and text[pos - 1] == ch:
        return False
    after = pos + len(token)
    return after >= len(text) or text[after] != ch


def _cached_close(text: str, start: int, style: MarkerStyle,
                  closes: dict[MarkerStyle, tuple[int, int]]) -> int:
    """_find_close, reusing the previous search for this style when it still applies.

    Without nesting, the first close at or after a later start is the same
    close (or the same absence of one) as long as that start does not pass it.
    Keeps a scan over many unterminated opens linear.
    """
    if style.allows_nesting:
        return _find_close(text, start, style)
    cached = closes.get(style)
    if cached is not None:
        searched_from, close = cached
        if start >= searched_from and (close == -1 or close >= start):
            return close
    close = _find_close(text, start, style)
    closes[style] = (start, close)
    return close


def _find_close(text: str, start: int, style: MarkerStyle) -> int:
    """Offset of the close token matching an open whose interior begins at start.

    Returns -1 when the span is unterminated. Shortest match: the first
    close token at nesting depth zero wins.
    """
    if not style.escapes and not style.allows_nesting:
        return text.find(style.close_token, start)

    depth = 0
    i = start
    while i < len(text):
        if style.escapes and text[i] == "\\":
            if i + 1 >= len(text):
                return -1
            i += 2
            continue
        if text.startswith(style.close_token, i):
            if depth == 0:
                return i
            depth -= 1
            i += len(style.close_token)
            continue
        if style.allows_nesting and text.startswith(style.open_token, i):
            depth += 1
            i += len(style.open_token)
            continue
        i += 1
    return -1


def spans_of_kind(spans: list[Span], kind: str) -> list[Span]:
    return [s for s in spans if s.kind == kind]


def resolve(text: str, spans: list[Span], replace: Callable[[Span], str]) -> str:
    """Rebuild text in one pass, substituting every span with replace(span).

    Spans must be ordered and non-overlapping, as `scan` returns them.
    Text between spans is copied unchanged.
    """
    result = []
    last_end = 0
    for span in spans:
        result.append(text[last_end:span.start])
        result.append(replace(span))
        last_end = span.end
    result.append(text[last_end:])
    return "".join(result)
