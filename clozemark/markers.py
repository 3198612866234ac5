"""Marker styles: the delimiter pairs the span scanner recognises.

Each style list is ordered by priority. At any cursor position the scanner
tries styles front to back, so a longer token that shares a prefix with a
shorter one (``$$`` vs ``$``) must come first in the list.

Syntax:
    {{c1::payload}}     — cloze annotation, group 1
    \\[ ... \\]           — block formula
    $$ ... $$           — block formula
    \\( ... \\)           — inline formula
    $ ... $             — inline formula (never touching another $)
"""

import re
from dataclasses import dataclass

from clozemark.models import ANNOTATION, BLOCK, FORMULA, INLINE

CLOZE_INNER_RE = re.compile(r'c([0-9]+)::([^}]+)')


@dataclass(frozen=True)
class MarkerStyle:
    name: str
    open_token: str
    close_token: str
    kind: str
    display_mode: str | None = None
    allows_nesting: bool = False
    # Annotation styles only: capture 1 is the group key, capture 2 the payload.
    group_key_pattern: re.Pattern | None = None
    # Token must be a run of exactly its own length of a single character.
    exclusive: bool = False
    # A backslash inside the span consumes the following character.
    escapes: bool = False
    allow_empty: bool = True


CLOZE = MarkerStyle(
    name="cloze", open_token="{{", close_token="}}", kind=ANNOTATION,
    group_key_pattern=CLOZE_INNER_RE,
)

BRACKET_BLOCK = MarkerStyle(
    name="bracket_block", open_token="\\[", close_token="\\]",
    kind=FORMULA, display_mode=BLOCK,
)
DOLLAR_BLOCK = MarkerStyle(
    name="dollar_block", open_token="$$", close_token="$$",
    kind=FORMULA, display_mode=BLOCK, exclusive=True,
)
PAREN_INLINE = MarkerStyle(
    name="paren_inline", open_token="\\(", close_token="\\)",
    kind=FORMULA, display_mode=INLINE,
)
DOLLAR_INLINE = MarkerStyle(
    name="dollar_inline", open_token="$", close_token="$",
    kind=FORMULA, display_mode=INLINE,
    exclusive=True, escapes=True, allow_empty=False,
)

ANNOTATION_STYLES = (CLOZE,)
BLOCK_FORMULA_STYLES = (BRACKET_BLOCK, DOLLAR_BLOCK)
INLINE_FORMULA_STYLES = (PAREN_INLINE, DOLLAR_INLINE)
