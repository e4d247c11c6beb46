"""
Data model shared by the segmentation, rendering and assembly stages.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional


class SegmentKind(Enum):
    """Classification of a scanned document fragment"""
    TEXT = "text"
    INLINE_MATH = "inline"
    BLOCK_MATH = "block"

    @property
    def is_math(self) -> bool:
        return self is not SegmentKind.TEXT

    @property
    def display_mode(self) -> bool:
        return self is SegmentKind.BLOCK_MATH


@dataclass(frozen=True)
class Segment:
    """
    One contiguous fragment of the normalized input.

    Attributes:
        kind: Text, inline math or block math
        content: Text as written, or the trimmed LaTeX source for math
        start: Offset of the source span in the normalized input
        end: End offset (exclusive); math spans include their delimiters
        delimiter: Opening delimiter for math ("$$", "\\[", "$", "\\("), None for text
    """
    kind: SegmentKind
    content: str
    start: int = 0
    end: int = 0
    delimiter: Optional[str] = None

    @property
    def is_math(self) -> bool:
        return self.kind.is_math

    def __repr__(self) -> str:
        preview = self.content[:40] + "..." if len(self.content) > 40 else self.content
        return f"Segment(kind={self.kind.value}, pos={self.start}-{self.end}, content={preview!r})"


@dataclass(frozen=True)
class StyleDescriptor:
    """Canonical visual parameters for every formula of one request"""
    font_family: str
    font_size: float
    color: str
    background: str
    padding: float
    scale: float
    is_transparent_background: bool

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and JSON output"""
        return asdict(self)


@dataclass
class RenderedFormula:
    """Result of rendering one math segment to an image"""
    source_latex: str
    display_mode: bool
    image_ref: str
    is_transparent_background: bool


@dataclass
class RenderResult:
    """Outcome of one pipeline run"""
    html: str
    segments: List[Segment] = field(default_factory=list)
    formulas: List[RenderedFormula] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {'html': self.html}
