"""
Math-to-markup renderers.

    >>> from mathsnap.renderers import get_renderer
    >>> renderer = get_renderer("mathml")
"""

from .base import MathRenderer
from .katex import KatexRenderer
from .mathml import MathMLRenderer


def get_renderer(name: str, settings=None) -> MathRenderer:
    """
    Build a renderer by name.

    Args:
        name: "katex" or "mathml"
        settings: config.settings.Settings (defaults to the global instance)

    Raises:
        ValueError: Unknown renderer name
    """
    name = (name or "").lower()
    if name == "mathml":
        return MathMLRenderer()
    if name == "katex":
        if settings is None:
            from config.settings import settings
        return KatexRenderer(
            module_dir=settings.katex_module_dir,
            node_binary=settings.node_binary,
            timeout=settings.renderer_timeout_seconds,
            css_path=settings.get_katex_css_path(),
            trust=settings.katex_trust,
        )
    raise ValueError(f"Unsupported math renderer: {name}")


__all__ = [
    'MathRenderer',
    'KatexRenderer',
    'MathMLRenderer',
    'get_renderer',
]
