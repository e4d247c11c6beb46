"""
Read-through cache for the renderer stylesheet (katex.min.css).

The text is read once per path and treated as a constant afterwards, so it
can be shared by concurrent requests without further locking.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class StylesheetCache:
    """Single-initialization holder for one stylesheet file"""

    def __init__(self, path: Optional[Path]):
        self.path = Path(path) if path else None
        self._text: Optional[str] = None
        self._lock = threading.Lock()

    def get(self) -> str:
        """Return the stylesheet text, reading it on first use"""
        if self._text is not None:
            return self._text
        with self._lock:
            if self._text is None:
                self._text = self._load()
        return self._text

    def _load(self) -> str:
        if self.path is None:
            return ""
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            # Formulas still render, just without KaTeX fonts/layout rules
            logger.warning(f"Stylesheet not readable ({self.path}): {e}")
            return ""
        logger.info(f"Loaded stylesheet {self.path} ({len(text)} chars)")
        return text


_caches: Dict[Optional[Path], StylesheetCache] = {}
_caches_lock = threading.Lock()


def get_stylesheet(path: Optional[Path]) -> str:
    """Process-wide cached stylesheet text for path ("" when path is None)"""
    key = Path(path) if path else None
    with _caches_lock:
        cache = _caches.get(key)
        if cache is None:
            cache = _caches[key] = StylesheetCache(key)
    return cache.get()
