"""
Output Assembler

Joins text and rendered formulas back into one HTML string.

Escaping policy: text is always HTML-escaped here. The optional sanitizer
runs afterwards on the finished markup and never escapes again, so there is
exactly one escaping step.
"""

import logging
from typing import Iterable, Optional, Tuple

from config.constants import BLOCK_FORMULA_CLASS, INLINE_FORMULA_CLASS
from .errors import AssemblyError
from .models import RenderedFormula, Segment, SegmentKind

logger = logging.getLogger(__name__)


def escape_text(text: str) -> str:
    """Escape text content; newlines become line breaks"""
    return (
        text.replace('&', '&amp;')
            .replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('\n', '<br/>')
    )


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute"""
    return (
        value.replace('&', '&amp;')
             .replace('<', '&lt;')
             .replace('>', '&gt;')
             .replace('"', '&quot;')
             .replace("'", '&#39;')
    )


def formula_image_tag(segment: Segment, formula: RenderedFormula) -> str:
    css_class = BLOCK_FORMULA_CLASS if segment.kind is SegmentKind.BLOCK_MATH else INLINE_FORMULA_CLASS
    return (
        f'<img class="{css_class}" alt="{escape_attribute(formula.source_latex)}" '
        f'src="{escape_attribute(formula.image_ref)}" />'
    )


class OutputAssembler:
    """Builds the response HTML from (segment, formula) pairs"""

    def __init__(self, sanitizer=None):
        """
        Args:
            sanitizer: Optional object with ``clean(html) -> html``
        """
        self.sanitizer = sanitizer

    def assemble(self, pairs: Iterable[Tuple[Segment, Optional[RenderedFormula]]]) -> str:
        """
        Args:
            pairs: Segments in document order, each with its RenderedFormula
                (None for text segments)

        Returns:
            Final HTML string

        Raises:
            AssemblyError: A math segment has no rendered formula
        """
        out = []
        for segment, formula in pairs:
            if segment.kind is SegmentKind.TEXT:
                out.append(escape_text(segment.content))
                continue
            if formula is None:
                raise AssemblyError(f"No rendered image for {segment!r}")
            out.append(formula_image_tag(segment, formula))

        html = ''.join(out)
        if self.sanitizer is not None:
            html = self.sanitizer.clean(html)
        return html
