r"""Locate TeX math spans inside markdown text.

Four delimiter forms are recognised in a single left-to-right pass:

* ``$$ ... $$`` and ``\[ ... \]`` for display math;
* ``$ ... $`` and ``\( ... \)`` for inline math.

Inline ``$`` math never crosses a line break. An opening delimiter without a
terminator, or a span with empty content, is not math: its characters are
kept as ordinary text. With ``skip_code`` the scanner also steps over
markdown code (backtick spans, fenced and indented blocks) so that code
samples keep their dollar signs.

Example
-------
>>> from texpages.mathspans.scanner import MathSpan, scan_math
>>> [seg for seg in scan_math("Let $x_1$ be") if isinstance(seg, MathSpan)]
[MathSpan(source='x_1', raw='$x_1$', display=False, start=4)]
"""

from __future__ import annotations

import dataclasses as dc
import re


@dc.dataclass(frozen=True, slots=True)
class TextSegment:
    """Run of text that is passed through unchanged."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class MathSpan:
    """A delimited math expression found in the source text.

    Attributes
    ----------
    source : str
        TeX between the delimiters, whitespace preserved.
    raw : str
        The span exactly as written, delimiters included.
    display : bool
        ``True`` for ``$$``/``\\[`` spans, ``False`` for inline spans.
    start : int
        Offset of the opening delimiter in the scanned text.
    """

    source: str
    raw: str
    display: bool
    start: int


Segment = TextSegment | MathSpan

_BRACKET_CLOSERS = {"(": ("\\)", False), "[": ("\\]", True)}

_FENCE_OPEN = re.compile(r"[ \t]*(`{3,}|~{3,})[^\n]*(?:\n|\Z)")
_INDENT = re.compile(r" {4}|\t")
_LIST_ITEM = re.compile(r"[ \t]*(?:[-*+]|\d+[.)])[ \t]")


class _Scanner:
    """Single-pass cursor over the text being scanned."""

    def __init__(self, text: str, *, skip_code: bool = False) -> None:
        self.text = text
        self.skip_code = skip_code
        self.pos = 0
        self.text_start = 0
        self.segments: list[Segment] = []

    def run(self) -> list[Segment]:
        text = self.text
        size = len(text)
        while self.pos < size:
            char = text[self.pos]
            nxt = text[self.pos + 1] if self.pos + 1 < size else ""
            if self.skip_code and self._skip_code_block():
                continue
            if self.skip_code and char == "`":
                self._code_span()
            elif char == "$" and nxt == "$":
                self._delimited(2, "$$", display=True)
            elif char == "$":
                self._inline_dollar()
            elif char == "\\" and nxt in _BRACKET_CLOSERS:
                closer, display = _BRACKET_CLOSERS[nxt]
                self._delimited(2, closer, display=display)
            else:
                self.pos += 1
        self._flush(size)
        return self.segments

    def _flush(self, end: int) -> None:
        """Emit pending text up to ``end``."""
        if end > self.text_start:
            self.segments.append(TextSegment(self.text[self.text_start : end]))
        self.text_start = end

    def _emit_span(
        self, open_len: int, content_end: int, close_len: int, *, display: bool
    ) -> None:
        """Record the span at the cursor, or keep it as text when empty."""
        start = self.pos
        end = content_end + close_len
        source = self.text[start + open_len : content_end]
        if source:
            self._flush(start)
            self.segments.append(
                MathSpan(
                    source=source,
                    raw=self.text[start:end],
                    display=display,
                    start=start,
                )
            )
            self.text_start = end
        self.pos = end

    def _delimited(self, open_len: int, closer: str, *, display: bool) -> None:
        """Consume a span closed by the first occurrence of ``closer``."""
        content_end = self.text.find(closer, self.pos + open_len)
        if content_end == -1:
            # Unterminated: everything from here on is literal text.
            self.pos = len(self.text)
            return
        self._emit_span(open_len, content_end, len(closer), display=display)

    def _inline_dollar(self) -> None:
        """Consume ``$...$`` unless a newline or end of input comes first."""
        text = self.text
        cursor = self.pos + 1
        size = len(text)
        while cursor < size and text[cursor] not in "$\n":
            cursor += 1
        if cursor >= size:
            self.pos = size
            return
        if text[cursor] == "\n":
            self.pos = cursor + 1
            return
        self._emit_span(1, cursor, 1, display=False)

    def _skip_code_block(self) -> bool:
        """Move past a fenced or indented code block starting at the cursor."""
        text = self.text
        if self.pos and text[self.pos - 1] != "\n":
            return False
        fence = _FENCE_OPEN.match(text, self.pos)
        if fence is not None:
            marker = fence.group(1)
            closing = re.compile(
                rf"^[ \t]*{re.escape(marker[0])}{{{len(marker)},}}[ \t]*$", re.MULTILINE
            )
            close = closing.search(text, fence.end())
            self.pos = len(text) if close is None else close.end()
            return True
        if not self._at_indented_code():
            return False
        while self.pos < len(text):
            end = text.find("\n", self.pos)
            end = len(text) if end == -1 else end + 1
            line = text[self.pos : end]
            if line.strip() and not _INDENT.match(line):
                break
            self.pos = end
        return True

    def _at_indented_code(self) -> bool:
        """Return True when the cursor line opens an indented code block.

        The line must be indented, follow a blank line (or start the text),
        and not continue a list item or an earlier indented paragraph.
        """
        text = self.text
        line_end = text.find("\n", self.pos)
        line = text[self.pos : line_end if line_end != -1 else len(text)]
        if not line.strip() or not _INDENT.match(line):
            return False
        previous = text[: self.pos].split("\n")[:-1]
        if not previous:
            return True
        if previous[-1].strip():
            return False
        for earlier in reversed(previous):
            if earlier.strip():
                return not (_LIST_ITEM.match(earlier) or _INDENT.match(earlier))
        return True

    def _code_span(self) -> None:
        """Move past a backtick code span, or just its opening run if unclosed."""
        text = self.text
        run_end = self.pos
        while run_end < len(text) and text[run_end] == "`":
            run_end += 1
        ticks = text[self.pos : run_end]
        close = re.compile(rf"(?<!`){ticks}(?!`)").search(text, run_end)
        paragraph_end = text.find("\n\n", run_end)
        if close is None or (paragraph_end != -1 and paragraph_end < close.start()):
            self.pos = run_end
            return
        self.pos = close.end()


def scan_math(text: str, *, skip_code: bool = False) -> list[Segment]:
    """Split ``text`` into literal text and math spans.

    Parameters
    ----------
    text : str
        Markdown body to scan.
    skip_code : bool, optional
        Leave backtick code spans and fenced or indented code blocks as
        literal text, so dollar signs in code samples are never math.

    Returns
    -------
    list[TextSegment | MathSpan]
        Segments in source order. Concatenating ``text``/``raw`` of every
        segment reproduces the input exactly; adjacent literal text is merged
        into a single :class:`TextSegment`.
    """
    return _Scanner(text, skip_code=skip_code).run()


def math_spans(text: str, *, skip_code: bool = False) -> list[MathSpan]:
    """Return only the math spans found in ``text``."""
    return [
        segment
        for segment in scan_math(text, skip_code=skip_code)
        if isinstance(segment, MathSpan)
    ]


__all__ = ["MathSpan", "Segment", "TextSegment", "math_spans", "scan_math"]
