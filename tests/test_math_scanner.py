"""Unit tests for the single-pass TeX math scanner.

The scanner must recognise the four delimiter forms, never let inline ``$``
math cross a line break, and keep unterminated or empty spans as literal
text. Concatenating every segment always reproduces the input.
"""

from __future__ import annotations

import pytest

from texpages.mathspans import MathSpan, TextSegment, math_spans, scan_math


def _joined(text: str) -> str:
    return "".join(
        seg.raw if isinstance(seg, MathSpan) else seg.text for seg in scan_math(text)
    )


@pytest.mark.parametrize(
    ("text", "source", "raw", "display"),
    [
        ("a $$x^2$$ b", "x^2", "$$x^2$$", True),
        ("a \\[x_1\\] b", "x_1", "\\[x_1\\]", True),
        ("a $x_1$ b", "x_1", "$x_1$", False),
        ("a \\(x_1\\) b", "x_1", "\\(x_1\\)", False),
    ],
    ids=["dollar-display", "bracket-display", "dollar-inline", "paren-inline"],
)
def test_each_delimiter_form_is_recognised(
    text: str, source: str, raw: str, display: bool
) -> None:
    spans = math_spans(text)
    assert spans == [MathSpan(source=source, raw=raw, display=display, start=2)], (
        f"unexpected spans for {text!r}: {spans!r}"
    )


def test_segments_preserve_surrounding_text() -> None:
    segments = scan_math("before $a$ after")
    assert segments == [
        TextSegment("before "),
        MathSpan(source="a", raw="$a$", display=False, start=7),
        TextSegment(" after"),
    ]


def test_display_span_is_non_greedy_and_multiline() -> None:
    text = "$$\na + b\n$$ mid $$c$$"
    spans = math_spans(text)
    assert [span.source for span in spans] == ["\na + b\n", "c"]
    assert all(span.display for span in spans)


def test_inline_dollar_does_not_cross_newline() -> None:
    """A newline before the closing ``$`` makes the ``$`` literal text."""
    text = "cost $5\nand $x$ here"
    spans = math_spans(text)
    assert [span.raw for span in spans] == ["$x$"], (
        "the first dollar must not pair with one on the next line"
    )
    assert _joined(text) == text


def test_scanning_resumes_after_newline_fallback() -> None:
    text = "$a\n$b$"
    assert [span.source for span in math_spans(text)] == ["b"]


@pytest.mark.parametrize(
    "text",
    [
        "open $$x + y and nothing else",
        "open \\[x + y and nothing else",
        "open \\(x + y and nothing else",
        "open $x + y and nothing else",
    ],
    ids=["dollar-display", "bracket-display", "paren-inline", "dollar-inline"],
)
def test_unterminated_delimiters_are_literal(text: str) -> None:
    assert math_spans(text) == []
    assert scan_math(text) == [TextSegment(text)], (
        "unterminated delimiter text should come back as a single literal run"
    )


def test_unterminated_display_swallows_later_inline_math() -> None:
    """Fallback re-emits everything consumed, including later dollars."""
    text = "$$ never closed, then $x$"
    assert math_spans(text) == []
    assert _joined(text) == text


@pytest.mark.parametrize("text", ["$$$$", "\\(\\)", "\\[\\]"])
def test_empty_spans_are_literal(text: str) -> None:
    assert math_spans(text) == []
    assert _joined(text) == text


def test_adjacent_inline_spans() -> None:
    assert [span.source for span in math_spans("$a$$b$")] == ["a", "b"]


def test_other_backslashes_pass_through() -> None:
    text = "a \\alpha \\\\ b \\_c"
    assert scan_math(text) == [TextSegment(text)]


def test_internal_whitespace_is_preserved() -> None:
    text = "$$  \\frac{a}{b}\n\t+ c  $$"
    (span,) = math_spans(text)
    assert span.source == "  \\frac{a}{b}\n\t+ c  "
    assert span.raw == text


class TestSkipCode:
    """With ``skip_code`` markdown code keeps its dollar signs."""

    def test_code_span_is_literal(self) -> None:
        text = "Write `$x_1$` inline, then $y$."
        assert [span.raw for span in math_spans(text, skip_code=True)] == ["$y$"]
        assert [span.raw for span in math_spans(text)] == ["$x_1$", "$y$"]

    def test_double_backtick_span_may_contain_a_backtick(self) -> None:
        text = "See ``a ` $b$`` and $c$"
        assert [span.source for span in math_spans(text, skip_code=True)] == ["c"]

    @pytest.mark.parametrize("fence", ["```", "~~~"])
    def test_fenced_block_is_literal(self, fence: str) -> None:
        text = f"Before $a$\n\n{fence}bash\necho $HOME and $PATH\n{fence}\n\nAfter $b$"
        spans = math_spans(text, skip_code=True)
        assert [span.source for span in spans] == ["a", "b"], (
            f"dollars inside the {fence} fence must not become math"
        )

    def test_unclosed_fence_runs_to_end(self) -> None:
        text = "$a$\n\n```\n$b$ never closed\n"
        assert [span.source for span in math_spans(text, skip_code=True)] == ["a"]

    def test_indented_block_is_literal(self) -> None:
        text = "Shell:\n\n    echo $HOME $PATH\n    echo $USER\n\nThen $z$."
        assert [span.source for span in math_spans(text, skip_code=True)] == ["z"]

    def test_list_continuation_is_not_code(self) -> None:
        text = "- item\n\n    continued with $w$\n"
        assert [span.source for span in math_spans(text, skip_code=True)] == ["w"]

    def test_unclosed_backtick_keeps_scanning(self) -> None:
        text = "a stray ` then $q$"
        assert [span.source for span in math_spans(text, skip_code=True)] == ["q"]

    def test_segments_still_reproduce_the_input(self) -> None:
        text = "x `$a$` y\n\n```\n$b$\n```\n$c$"
        segments = scan_math(text, skip_code=True)
        joined = "".join(
            seg.raw if isinstance(seg, MathSpan) else seg.text for seg in segments
        )
        assert joined == text
        assert [seg.source for seg in segments if isinstance(seg, MathSpan)] == ["c"]
