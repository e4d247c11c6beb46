"""
Math Renderer Base Interface

Defines the interface of the LaTeX-to-markup engines.
"""

from typing import Optional, Protocol
from pathlib import Path


class MathRenderer(Protocol):
    """
    LaTeX source -> HTML/MathML markup.

    Implementations must not fail on malformed LaTeX: they return
    best-effort markup (error spans) instead. They may only raise
    RendererUnavailableError when the engine itself cannot run.

    Implementations:
    - KatexRenderer (KaTeX through Node.js)
    - MathMLRenderer (latex2mathml, pure Python)
    """

    name: str

    async def render(self, latex: str, display_mode: bool = False) -> str:
        """
        Render one formula.

        Args:
            latex: LaTeX source without delimiters
            display_mode: True for block (display) math

        Returns:
            Markup string to embed in the formula page
        """
        ...

    @property
    def stylesheet_path(self) -> Optional[Path]:
        """Stylesheet the markup needs, or None"""
        ...
