"""
Formula Rendering Adapter

For one math segment: LaTeX -> markup (MathRenderer) -> styled page ->
PNG (RasterSession) -> stored image URL (ImageStore).

The adapter does not own the raster session; the pipeline opens one per
request and passes it in for every segment.
"""

import logging
from typing import Callable, Optional

from config.constants import RENDER_CONTAINER_SELECTOR
from .models import RenderedFormula, Segment, StyleDescriptor
from .rasterizer import RasterSession
from .renderers.base import MathRenderer
from .storage import ImageStore
from .stylesheet import get_stylesheet

logger = logging.getLogger(__name__)


def _px(value: float) -> str:
    return f"{value:g}px"


def build_formula_document(markup: str, style: StyleDescriptor, stylesheet: str = "") -> str:
    """
    Wrap rendered markup in a minimal page styled from the descriptor.

    Font size, color and family are set on ``.katex`` / ``math`` only, never
    forced onto children: KaTeX uses invisible metric glyphs internally and
    overriding them makes stray characters visible.
    """
    return f"""<!doctype html><html><head>
<meta charset="utf-8" />
<style>
{stylesheet}
body {{
  margin: 0;
  background: {style.background};
}}
.wrap {{
  display: inline-block;
  padding: {_px(style.padding)};
  line-height: 0;
}}
.wrap .katex-display {{ margin: 0 !important; }}
.wrap .katex {{ margin: 0 !important; }}
.wrap .katex, .wrap math {{
  font-size: {_px(style.font_size)};
  color: {style.color};
  font-family: {style.font_family};
}}
.wrap .katex .fontsize-ensurer {{ visibility: hidden; }}
</style>
</head><body>
<div class="wrap">{markup}</div>
</body></html>"""


class FormulaRenderingAdapter:
    """Renders math segments into stored images"""

    def __init__(
        self,
        renderer: MathRenderer,
        store: ImageStore,
        stylesheet_loader: Optional[Callable[[], str]] = None,
    ):
        """
        Args:
            renderer: LaTeX -> markup engine
            store: Destination of the PNG files
            stylesheet_loader: Returns the stylesheet text (defaults to the
                process-wide cache of renderer.stylesheet_path)
        """
        self.renderer = renderer
        self.store = store
        self._stylesheet_loader = stylesheet_loader or (
            lambda: get_stylesheet(renderer.stylesheet_path)
        )

    async def render(
        self,
        segment: Segment,
        style: StyleDescriptor,
        session: RasterSession,
    ) -> RenderedFormula:
        """
        Render one math segment.

        Raises:
            RenderContainerMissingError, RenderSizingError, RasterizerError,
            RendererUnavailableError: the whole request must fail
        """
        display_mode = segment.kind.display_mode
        markup = await self.renderer.render(segment.content, display_mode)
        document = build_formula_document(markup, style, self._stylesheet_loader())

        await session.load_markup(document)
        png = await session.capture_element(
            RENDER_CONTAINER_SELECTOR,
            omit_background=style.is_transparent_background,
        )
        image_ref = await self.store.save(png)

        logger.debug(f"Rendered {segment!r} -> {image_ref}")
        return RenderedFormula(
            source_latex=segment.content,
            display_mode=display_mode,
            image_ref=image_ref,
            is_transparent_background=style.is_transparent_background,
        )
