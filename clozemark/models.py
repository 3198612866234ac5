"""Shared data classes used across the scanner, aggregator, and renderers."""

from dataclasses import dataclass, field

ANNOTATION = "annotation"
FORMULA = "formula"

BLOCK = "block"
INLINE = "inline"


@dataclass(frozen=True)
class Span:
    """A located, typed match produced by one scanner pass."""
    kind: str                        # ANNOTATION or FORMULA
    start: int                       # offset of the open token
    end: int                         # offset just past the close token
    payload: str
    group_key: int | None = None     # annotations only
    display_mode: str | None = None  # formulas only: BLOCK or INLINE


@dataclass
class AnnotationGroup:
    group_key: int
    payloads: list[str]
    rendered_summary: str
    masked_view: str


@dataclass(frozen=True)
class RenderResult:
    html: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.html is not None


@dataclass
class Card:
    key: str
    group_key: int
    front: str
    back: str
    hidden: str = ""
    display_text: str = ""
    source_line: int = 1
    tags: list[str] = field(default_factory=list)
    text: str = ""
