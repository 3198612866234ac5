"""Cloze deletion groups from annotated text.

Syntax:
    {{c1::answer}}      — annotation in group 1
    {{c1::a}} {{c1::b}} — same group, blanked together on one card
    {{c2::answer}}      — separate group, separate card

Example:
    "The capital of {{c1::France}} is {{c2::Paris}}."
    card 1: "The capital of [...] is Paris."
    card 2: "The capital of France is [...]."
"""

from typing import Iterable

from clozemark.markers import ANNOTATION_STYLES
from clozemark.models import ANNOTATION, AnnotationGroup, Span
from clozemark.spans import resolve, scan, spans_of_kind

PLACEHOLDER = "[...]"
SUMMARY_SEPARATOR = ", "
DEFAULT_PAYLOAD = "answer"


def aggregate(text: str, spans: list[Span] | None = None,
              placeholder: str = PLACEHOLDER) -> list[AnnotationGroup]:
    """Group annotation spans by key and build one masked view per group.

    Args:
        text: Source text the spans were scanned from.
        spans: Spans from `scan`. Scanned with the cloze style when omitted.
               Formula spans are ignored.
        placeholder: Replacement for the hidden group's annotations.

    Returns groups sorted by group key, empty when there are no annotations.
    """
    if spans is None:
        spans = scan(text, ANNOTATION_STYLES)
    annotations = spans_of_kind(spans, ANNOTATION)

    payloads: dict[int, list[str]] = {}
    for span in annotations:
        payloads.setdefault(span.group_key, []).append(span.payload)

    groups = []
    for key in sorted(payloads):
        masked = resolve(text, annotations,
                         lambda s, key=key: placeholder if s.group_key == key else s.payload)
        groups.append(AnnotationGroup(
            group_key=key,
            payloads=payloads[key],
            rendered_summary=SUMMARY_SEPARATOR.join(payloads[key]),
            masked_view=masked,
        ))
    return groups


def reveal(text: str) -> str:
    """Answer side: every annotation resolved to its payload."""
    return resolve(text, scan(text, ANNOTATION_STYLES), lambda s: s.payload)


def highlight(text: str, group_key: int, before: str = "<mark>", after: str = "</mark>") -> str:
    """Resolve all annotations, wrapping those of group_key in before/after."""
    return resolve(
        text, scan(text, ANNOTATION_STYLES),
        lambda s: f"{before}{s.payload}{after}" if s.group_key == group_key else s.payload)


def group_keys(text: str) -> set[int]:
    return {s.group_key for s in scan(text, ANNOTATION_STYLES)}


def next_group_key(existing_keys: Iterable[int]) -> int:
    """Key for a new annotation: one past the highest key in use, or 1."""
    return max(existing_keys, default=0) + 1


def has_annotation(text: str) -> bool:
    return bool(scan(text, ANNOTATION_STYLES))


def insert_annotation(text: str, start: int, end: int,
                      group_key: int | None = None) -> tuple[str, tuple[int, int]]:
    """Wrap text[start:end] in cloze markup.

    Without group_key the selection starts a new group. A blank selection
    inserts a placeholder payload and selects it so it can be typed over.

    Returns (new_text, (selection_start, selection_end)).
    """
    start, end = sorted((start, end))
    if group_key is None:
        group_key = next_group_key(group_keys(text))
    prefix = f"{{{{c{group_key}::"
    selected = text[start:end]

    if not selected.strip():
        markup = prefix + DEFAULT_PAYLOAD + "}}"
        cursor = start + len(prefix)
        return text[:start] + markup + text[end:], (cursor, cursor + len(DEFAULT_PAYLOAD))

    markup = prefix + selected + "}}"
    cursor = start + len(markup)
    return text[:start] + markup + text[end:], (cursor, cursor)


def preview_text(text: str, limit: int = 50) -> str:
    """Short list preview: annotations shown as [payload], cut at limit chars."""
    return resolve(text, scan(text, ANNOTATION_STYLES), lambda s: f"[{s.payload}]")[:limit]


def truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def badge_text(group_key: int, summary: str, limit: int = 20) -> str:
    """Group label for chips and menus, e.g. ``c1: mitochondria, powerh...``."""
    return f"c{group_key}: {truncate(summary, limit)}"
