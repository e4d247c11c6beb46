"""
MathSnap - text with embedded LaTeX to HTML with formula images

Pipeline stages:
- Delimiter normalization (double-escaped \\( \\) \\[ \\])
- Segmentation into text / inline math / block math
- Style resolution (font stack, size, color, background, padding, scale)
- Formula rendering (KaTeX or MathML markup, screenshotted by headless Chromium)
- Output assembly and allow-list sanitization
"""

from .errors import (
    MathSnapError,
    InvalidInputError,
    RequestTooLargeError,
    RenderError,
    RenderContainerMissingError,
    RenderSizingError,
    RasterizerError,
    RendererUnavailableError,
    AssemblyError,
    SanitizerError,
)
from .models import Segment, SegmentKind, StyleDescriptor, RenderedFormula, RenderResult
from .normalizer import normalize_delimiters
from .segmenter import MathSegmenter, split_text_with_math
from .style import resolve_style, normalize_font_family, is_transparent_background
from .assembler import OutputAssembler
from .pipeline import MathHtmlPipeline, build_pipeline, render_and_replace

__all__ = [
    # Errors
    'MathSnapError',
    'InvalidInputError',
    'RequestTooLargeError',
    'RenderError',
    'RenderContainerMissingError',
    'RenderSizingError',
    'RasterizerError',
    'RendererUnavailableError',
    'AssemblyError',
    'SanitizerError',
    # Model
    'Segment',
    'SegmentKind',
    'StyleDescriptor',
    'RenderedFormula',
    'RenderResult',
    # Stages
    'normalize_delimiters',
    'MathSegmenter',
    'split_text_with_math',
    'resolve_style',
    'normalize_font_family',
    'is_transparent_background',
    'OutputAssembler',
    'MathHtmlPipeline',
    'build_pipeline',
    'render_and_replace',
]

__version__ = '1.0.0'
