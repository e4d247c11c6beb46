r"""
Segmentation Engine

Splits normalized text into an ordered list of text / inline-math /
block-math segments. Recognized syntaxes, in precedence order:

- Display math: $$...$$, \[...\]
- Inline math: $...$, \(...\)

The scan is an explicit left-to-right walk instead of one combined regex so
the precedence and escaping rules stay readable:

- the leftmost opener wins; at one position the order above decides
- every opener closes at the nearest closer with non-empty content between
- a ``$`` preceded by an odd number of backslashes is literal
- an opener without a closer is literal text, scanning resumes one
  character later (the engine never raises)
- an unclosed ``$$`` is literal as a whole: its dollars never fall back
  to opening inline math
- a closer search that fails is remembered, so a run of unclosed openers
  stays linear
"""

import logging
from typing import Dict, List, Optional, Tuple

from .models import Segment, SegmentKind

logger = logging.getLogger(__name__)


def _is_escaped(text: str, pos: int) -> bool:
    """True if the character at pos is preceded by an odd run of backslashes"""
    count = 0
    j = pos - 1
    while j >= 0 and text[j] == '\\':
        count += 1
        j -= 1
    return count % 2 == 1


class MathSegmenter:
    """Tokenizer for text with embedded math delimiters"""

    # (opener, closer, kind) - order is precedence
    DELIMITERS: Tuple[Tuple[str, str, SegmentKind], ...] = (
        ('$$', '$$', SegmentKind.BLOCK_MATH),
        ('\\[', '\\]', SegmentKind.BLOCK_MATH),
        ('$', '$', SegmentKind.INLINE_MATH),
        ('\\(', '\\)', SegmentKind.INLINE_MATH),
    )

    def __init__(self, trim_math: bool = True):
        """
        Args:
            trim_math: Strip surrounding whitespace from math content
        """
        self.trim_math = trim_math

    def split(self, text: str) -> List[Segment]:
        """
        Split text into segments, preserving document order.

        Args:
            text: Normalized input text

        Returns:
            Ordered list of Segment objects
        """
        segments: List[Segment] = []
        # closer -> earliest start offset known to have no closer after it
        exhausted: Dict[str, int] = {}
        text_start = 0
        i = 0
        n = len(text)

        while i < n:
            if text[i] not in '$\\':
                i += 1
                continue

            match = self._match_at(text, i, exhausted)
            if match is None:
                # An unclosed $$ is literal as a whole, never an inline opener
                i += 2 if text.startswith('$$', i) and not _is_escaped(text, i) else 1
                continue

            opener, closer, close_pos, kind = match
            end = close_pos + len(closer)
            raw = text[i + len(opener):close_pos]

            # Whitespace-only math has nothing to render; keep it as text
            if not raw.strip():
                i = end
                continue

            self._flush_text(segments, text, text_start, i)
            content = raw.strip() if self.trim_math else raw
            segments.append(Segment(kind, content, i, end, opener))
            text_start = i = end

        self._flush_text(segments, text, text_start, n)

        logger.debug(
            "Segmented %d chars into %d segments (%d math)",
            n, len(segments), sum(1 for s in segments if s.is_math)
        )
        return segments

    def _match_at(
        self, text: str, pos: int, exhausted: Dict[str, int]
    ) -> Optional[Tuple[str, str, int, SegmentKind]]:
        """Find the highest-precedence delimiter pair opening at pos"""
        for opener, closer, kind in self.DELIMITERS:
            if not text.startswith(opener, pos):
                continue
            if opener[0] == '$' and _is_escaped(text, pos):
                continue
            if opener == '$' and text.startswith('$$', pos):
                continue
            # At least one character of content before the closer
            close_pos = self._find_closer(text, closer, pos + len(opener) + 1, exhausted)
            if close_pos != -1:
                return opener, closer, close_pos, kind
        return None

    @staticmethod
    def _find_closer(text: str, closer: str, start: int, exhausted: Dict[str, int]) -> int:
        # A failed search from s rules out every later start, keeping the scan linear
        if start >= exhausted.get(closer, len(text) + 1):
            return -1
        pos = text.find(closer, start)
        if closer[0] == '$':
            while pos != -1 and _is_escaped(text, pos):
                pos = text.find(closer, pos + 1)
        if pos == -1:
            exhausted[closer] = min(start, exhausted.get(closer, start))
        return pos

    @staticmethod
    def _flush_text(segments: List[Segment], text: str, start: int, end: int) -> None:
        if end <= start:
            return
        content = text[start:end]

        # Block math renders as its own line; drop the line break that follows it
        if segments and segments[-1].kind is SegmentKind.BLOCK_MATH:
            if content.startswith('\r\n'):
                content = content[2:]
            elif content.startswith('\n'):
                content = content[1:]

        if content:
            segments.append(Segment(SegmentKind.TEXT, content, start, end))


def split_text_with_math(text: str, trim_math: bool = True) -> List[Segment]:
    """
    Convenience wrapper around MathSegmenter.

    Usage:
        >>> segments = split_text_with_math("Energy: $E=mc^2$ is famous.")
        >>> [s.kind.value for s in segments]
        ['text', 'inline', 'text']
    """
    return MathSegmenter(trim_math=trim_math).split(text)
