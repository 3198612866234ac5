"""Cloze cards: one card per annotation group, built from notes.

A note is a markdown file (or any text) split into paragraph blocks by blank
lines. Every block with at least one annotation yields one card per group
key. Card text is authored HTML and is passed through as-is; formulas are
rendered only when a card face is rendered.
"""

from clozemark.cloze import PLACEHOLDER, aggregate, highlight
from clozemark.config import split_frontmatter
from clozemark.formula import substitute
from clozemark.markers import ANNOTATION_STYLES
from clozemark.models import Card
from clozemark.spans import scan

DISPLAY_TEXT_LENGTH = 200


def build_cards(text: str, source_line: int = 1, tags=(),
                placeholder: str = PLACEHOLDER) -> list[Card]:
    """Build the cards for one block of annotated text, ordered by group key."""
    spans = scan(text, ANNOTATION_STYLES)
    cards = []
    for group in aggregate(text, spans, placeholder=placeholder):
        cards.append(Card(
            key=f"cloze_L{source_line}_c{group.group_key}",
            group_key=group.group_key,
            front=group.masked_view,
            back=highlight(text, group.group_key),
            hidden=group.rendered_summary,
            display_text=group.masked_view[:DISPLAY_TEXT_LENGTH],
            source_line=source_line,
            tags=list(tags),
            text=text,
        ))
    return cards


def segment_blocks(body: str, body_start_line: int = 1) -> list[tuple[str, int]]:
    """Split body into paragraph blocks. Returns [(block_text, start_line), ...]."""
    blocks = []
    current_lines: list[str] = []
    current_start = body_start_line

    for i, line in enumerate(body.split("\n")):
        if line.strip() == "":
            if current_lines:
                blocks.append(("\n".join(current_lines), current_start))
                current_lines = []
        else:
            if not current_lines:
                current_start = body_start_line + i
            current_lines.append(line)

    if current_lines:
        blocks.append(("\n".join(current_lines), current_start))
    return blocks


def parse_note(text: str, config: dict | None = None) -> list[Card]:
    """Parse all cloze cards from a note's text.

    Frontmatter is stripped; ``tags`` from config (a list or a comma
    separated string) are copied onto every card.
    """
    config = config or {}
    tags = config.get("tags", [])
    if isinstance(tags, str):
        tags = [t.strip() for t in tags.split(",") if t.strip()]
    placeholder = config.get("placeholder", PLACEHOLDER)

    _meta, body, body_start_line = split_frontmatter(text)
    cards = []
    for block_text, block_start_line in segment_blocks(body, body_start_line):
        cards.extend(build_cards(block_text, block_start_line, tags, placeholder))
    return cards


def render_front(card: Card, renderer) -> str:
    """Front of card: hidden group masked, formulas rendered."""
    return f"<div>{substitute(card.front, renderer)}</div>"


def render_back(card: Card, renderer) -> str:
    """Back of card: hidden group highlighted, formulas rendered."""
    return f"<div>{substitute(card.back, renderer)}</div>"
