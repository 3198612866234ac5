"""Tests for clozemark.spans and the default marker styles."""

import time

import pytest

from clozemark.markers import (
    ANNOTATION_STYLES, BLOCK_FORMULA_STYLES, INLINE_FORMULA_STYLES, MarkerStyle,
)
from clozemark.models import ANNOTATION, BLOCK, FORMULA, INLINE, Span
from clozemark.spans import resolve, scan, spans_of_kind

ALL_STYLES = ANNOTATION_STYLES + BLOCK_FORMULA_STYLES + INLINE_FORMULA_STYLES


# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------

class TestScanAnnotations:
    def test_two_groups(self):
        spans = scan("The capital of {{c1::France}} is {{c2::Paris}}.")
        assert spans[0] == Span(kind=ANNOTATION, start=15, end=29,
                                payload="France", group_key=1)
        assert spans[1].payload == "Paris"
        assert spans[1].group_key == 2

    def test_multidigit_key(self):
        spans = scan("{{c12::multi digit}}")
        assert spans[0].group_key == 12
        assert spans[0].payload == "multi digit"

    def test_payload_not_trimmed(self):
        assert scan("{{c1:: spaced }}")[0].payload == " spaced "

    def test_unterminated_is_literal(self):
        assert scan("Unbalanced {{c1::oops") == []

    def test_empty_payload_is_literal(self):
        assert scan("{{c1::}}") == []

    def test_uppercase_c_is_literal(self):
        assert scan("{{C1::x}}") == []

    def test_non_ascii_digit_key_is_literal(self):
        assert scan("{{c\u0661::x}}") == []
        assert scan("{{c\uff11::x}}") == []

    def test_single_brace_in_payload_is_literal(self):
        assert scan("{{c1::a}b}}") == []

    def test_non_matching_interior_skipped(self):
        spans = scan("{{x}} {{c1::a}}")
        assert len(spans) == 1
        assert spans[0].start == 6

    def test_declined_open_does_not_hide_later_annotation(self):
        spans = scan("{{x {{c1::a}}")
        assert len(spans) == 1
        assert spans[0].start == 4
        assert spans[0].payload == "a"

    def test_extra_braces_stay_literal(self):
        spans = scan("{{{c1::a}}}")
        assert (spans[0].start, spans[0].end) == (1, 10)

    def test_no_markup(self):
        assert scan("plain text") == []
        assert scan("") == []


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------

class TestScanFormulas:
    def test_dollar_block(self):
        spans = scan("$$x^2$$ and $y$", BLOCK_FORMULA_STYLES)
        assert spans == [Span(kind=FORMULA, start=0, end=7, payload="x^2", display_mode=BLOCK)]

    def test_single_dollar_never_matches_inside_double(self):
        spans = scan("$$x^2$$ and $y$", INLINE_FORMULA_STYLES)
        assert [s.payload for s in spans] == ["y"]
        assert spans[0].display_mode == INLINE

    def test_bracket_forms(self):
        spans = scan(r"\[a+b\] then \(c\)", BLOCK_FORMULA_STYLES + INLINE_FORMULA_STYLES)
        assert [(s.payload, s.display_mode) for s in spans] == [("a+b", BLOCK), ("c", INLINE)]

    def test_shortest_close(self):
        spans = scan(r"\[a\] \[b\]", BLOCK_FORMULA_STYLES)
        assert [s.payload for s in spans] == ["a", "b"]

    def test_block_may_span_lines(self):
        spans = scan("$$\na\nb\n$$", BLOCK_FORMULA_STYLES)
        assert spans[0].payload == "\na\nb\n"

    def test_unterminated_is_literal(self):
        assert scan(r"\[x", BLOCK_FORMULA_STYLES) == []
        assert scan("price: $5", INLINE_FORMULA_STYLES) == []

    def test_close_touching_dollar_declines(self):
        assert scan("$a$$b$", INLINE_FORMULA_STYLES) == []

    def test_triple_dollar_runs_are_literal(self):
        assert scan("$$$x$$$", BLOCK_FORMULA_STYLES) == []
        assert scan("$$$x$$$", INLINE_FORMULA_STYLES) == []
        assert scan("$$a$$$", BLOCK_FORMULA_STYLES) == []

    def test_escaped_dollar_inside_inline(self):
        spans = scan(r"$a\$b$", INLINE_FORMULA_STYLES)
        assert spans[0].payload == r"a\$b"

    def test_escaped_dollar_right_before_close(self):
        assert scan(r"$x\$$", INLINE_FORMULA_STYLES)[0].payload == r"x\$"
        assert scan(r"$\$$", INLINE_FORMULA_STYLES)[0].payload == r"\$"
        assert scan(r"a $\$$$ b", INLINE_FORMULA_STYLES) == []

    def test_trailing_backslash_declines(self):
        assert scan("$a\\", INLINE_FORMULA_STYLES) == []

    def test_empty_inline_declines(self):
        assert scan("a $$ b", INLINE_FORMULA_STYLES) == []

    def test_empty_block_allowed(self):
        assert scan(r"\[\]", BLOCK_FORMULA_STYLES)[0].payload == ""


class TestCustomStyles:
    def test_nesting_matches_balanced_close(self):
        paren = MarkerStyle(name="paren", open_token="(", close_token=")",
                            kind=FORMULA, display_mode=INLINE, allows_nesting=True)
        spans = scan("(a(b)c) d", (paren,))
        assert spans[0].payload == "a(b)c"
        assert spans[0].end == 7

    def test_priority_order_decides(self):
        short = MarkerStyle(name="short", open_token="<", close_token=">", kind=FORMULA,
                            display_mode=INLINE)
        long = MarkerStyle(name="long", open_token="<<", close_token=">>", kind=FORMULA,
                           display_mode=BLOCK)
        assert scan("<<x>>", (long, short))[0].display_mode == BLOCK
        assert scan("<<x>>", (short, long))[0].payload == "<x"


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text", [
    "The capital of {{c1::France}} is {{c2::Paris}}.",
    "{{c1::$x$}} and $$y$$ and \\(z\\)",
    "$$a$$$b$ $c$ {{c2::d}}{{c1::e}}",
    "{{{{c1::a}}}} $ $$ $$$ \\[ \\] \\( \\)",
    "{{c1::a $$ b}} $$ c }} $$",
    "",
])
def test_spans_ordered_and_disjoint(text):
    spans = scan(text, ALL_STYLES)
    for a, b in zip(spans, spans[1:]):
        assert a.start < b.start
        assert a.end <= b.start
    for s in spans:
        assert 0 <= s.start < s.end <= len(text)


def test_spans_of_kind():
    spans = scan("{{c1::a}} $b$", ALL_STYLES)
    assert [s.payload for s in spans_of_kind(spans, ANNOTATION)] == ["a"]
    assert [s.payload for s in spans_of_kind(spans, FORMULA)] == ["b"]


def test_resolve_replaces_every_span_once():
    text = "x {{c1::a}} y {{c2::b}} z"
    assert resolve(text, scan(text), lambda s: s.payload.upper()) == "x A y B z"


def test_resolve_without_spans_is_identity():
    assert resolve("unchanged", [], lambda s: "?") == "unchanged"


# ---------------------------------------------------------------------------
# Long inputs
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text, styles", [
    ("{{" * 100_000, ANNOTATION_STYLES),
    ("\\(" * 100_000, INLINE_FORMULA_STYLES),
    ("\\[" * 100_000, BLOCK_FORMULA_STYLES),
    ("a\\$" * 70_000, INLINE_FORMULA_STYLES),
])
def test_many_unterminated_opens_scan_quickly(text, styles):
    started = time.perf_counter()
    assert scan(text, styles) == []
    assert time.perf_counter() - started < 5


def test_repeated_opens_still_find_later_spans():
    text = "{{x {{c1::a}} {{c2::b}} $$ \\(y\\) $z$"
    spans = scan(text, ALL_STYLES)
    assert [s.payload for s in spans] == ["a", "b", "y", "z"]
