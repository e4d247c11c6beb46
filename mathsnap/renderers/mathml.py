"""
MathML renderer backed by latex2mathml.

Pure Python alternative to KaTeX: no Node.js install needed, Chromium
renders the MathML natively. Coverage of LaTeX is narrower than KaTeX's.
"""

import html
import logging
from pathlib import Path
from typing import Optional

from latex2mathml.converter import convert

logger = logging.getLogger(__name__)


class MathMLRenderer:
    """LaTeX -> presentation MathML"""

    name = "mathml"

    @property
    def stylesheet_path(self) -> Optional[Path]:
        return None

    async def render(self, latex: str, display_mode: bool = False) -> str:
        try:
            return convert(latex, display="block" if display_mode else "inline")
        except Exception as e:  # latex2mathml raises a mix of its own and builtin errors
            logger.warning(f"latex2mathml could not convert {latex!r}: {e}")
            return f'<span class="math-error">{html.escape(latex)}</span>'
