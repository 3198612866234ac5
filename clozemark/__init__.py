"""clozemark — cloze deletion and formula markup engine."""

__version__ = "0.1.0"

from clozemark.cloze import aggregate, insert_annotation, next_group_key
from clozemark.formula import substitute
from clozemark.models import AnnotationGroup, Card, RenderResult, Span
from clozemark.spans import scan

__all__ = [
    "AnnotationGroup", "Card", "RenderResult", "Span",
    "aggregate", "insert_annotation", "next_group_key", "scan", "substitute",
]
