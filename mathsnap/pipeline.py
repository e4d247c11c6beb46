"""
Math-to-HTML pipeline.

    raw text -> normalize_delimiters -> MathSegmenter -> resolve_style
             -> FormulaRenderingAdapter (one raster session, sequential)
             -> OutputAssembler (-> HtmlSanitizer) -> html

Any rendering failure aborts the request: partial HTML with missing images
is never returned.

Usage:
    pipeline = build_pipeline()
    result = await pipeline.render("Energy: $E=mc^2$ is famous.", {"fontSize": 20})
    # result.html:
    # Energy: <img class="formula-inline" alt="E=mc^2" src="/images/<uuid>.png"> is famous.
"""

import logging
import time
from typing import Any, List, Mapping, Optional, Tuple

from .assembler import OutputAssembler
from .errors import InvalidInputError, MathSnapError
from .formula_adapter import FormulaRenderingAdapter
from .models import RenderedFormula, RenderResult, Segment
from .normalizer import normalize_delimiters
from .rasterizer import PlaywrightRasterizer, Rasterizer
from .renderers import MathRenderer, get_renderer
from .sanitizer import HtmlSanitizer
from .segmenter import MathSegmenter
from .storage import ImageStore
from .style import resolve_style

logger = logging.getLogger(__name__)


class MathHtmlPipeline:
    """Renders text with embedded math into HTML with formula images"""

    def __init__(
        self,
        renderer: MathRenderer,
        rasterizer: Rasterizer,
        store: ImageStore,
        sanitizer: Optional[HtmlSanitizer] = None,
        profile: str = "default",
        adapter: Optional[FormulaRenderingAdapter] = None,
    ):
        self.rasterizer = rasterizer
        self.profile = profile
        self.segmenter = MathSegmenter(trim_math=True)
        self.adapter = adapter or FormulaRenderingAdapter(renderer, store)
        self.assembler = OutputAssembler(sanitizer=sanitizer)

    async def render(self, text: Any, options: Optional[Mapping[str, Any]] = None) -> RenderResult:
        """
        Render one request.

        Args:
            text: Request text (must be a str)
            options: Style options (fontFamily, fontSize, color, background, padding, scale)

        Returns:
            RenderResult with the final html

        Raises:
            InvalidInputError: text is not a string
            RenderError: a formula could not be rendered
            SanitizerError: the sanitizer failed
        """
        if not isinstance(text, str):
            raise InvalidInputError("text must be a string")

        started = time.time()
        segments = self.segmenter.split(normalize_delimiters(text))
        style = resolve_style(options, profile=self.profile)

        try:
            pairs = await self._render_segments(segments, style)
            html = self.assembler.assemble(pairs)
        except MathSnapError as e:
            logger.error(f"Render failed: {type(e).__name__}: {e}")
            raise

        formulas = [formula for _, formula in pairs if formula is not None]
        logger.info(
            f"Rendered {len(segments)} segments ({len(formulas)} formulas) "
            f"in {time.time() - started:.2f}s"
        )
        return RenderResult(html=html, segments=segments, formulas=formulas)

    async def _render_segments(
        self, segments: List[Segment], style
    ) -> List[Tuple[Segment, Optional[RenderedFormula]]]:
        pairs: List[Tuple[Segment, Optional[RenderedFormula]]] = [(s, None) for s in segments]
        if not any(s.is_math for s in segments):
            return pairs

        # One session for the whole request; formulas share its viewport, so strictly in order
        async with self.rasterizer.session(scale=style.scale) as session:
            for index, segment in enumerate(segments):
                if segment.is_math:
                    pairs[index] = (segment, await self.adapter.render(segment, style, session))
        return pairs


def build_pipeline(settings=None, renderer_name: Optional[str] = None) -> MathHtmlPipeline:
    """
    Wire a pipeline from configuration.

    Args:
        settings: config.settings.Settings (defaults to the global instance)
        renderer_name: Override of settings.math_renderer
    """
    if settings is None:
        from config.settings import settings

    return MathHtmlPipeline(
        renderer=get_renderer(renderer_name or settings.math_renderer, settings),
        rasterizer=PlaywrightRasterizer.from_settings(settings),
        store=ImageStore(settings.image_dir, settings.image_url_prefix),
        sanitizer=HtmlSanitizer() if settings.sanitize_output else None,
        profile=settings.style_profile,
    )


async def render_and_replace(text: Any, options: Optional[Mapping[str, Any]] = None, settings=None) -> str:
    """Render text with the configured pipeline and return the html"""
    result = await build_pipeline(settings).render(text, options)
    return result.html
