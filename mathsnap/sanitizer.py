"""
Allow-list HTML sanitizer (nh3 / ammonia).

Baseline is nh3's default allow-list, extended with formula images
(``src``, ``alt``, ``class``), headings and line breaks. ``script`` and
``style`` elements, ``style`` attributes and ``on*`` event handlers are
never allowed, whatever the caller asks for.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional, Set

import nh3

from .errors import SanitizerError

logger = logging.getLogger(__name__)

EXTRA_TAGS = {"img", "br", "h1", "h2", "h3", "h4", "h5", "h6"}
EXTRA_ATTRIBUTES = {
    "img": {"src", "alt", "class"},
}
FORBIDDEN_TAGS = {"script", "style"}


def _is_forbidden_attribute(name: str) -> bool:
    name = name.lower()
    return name == "style" or name.startswith("on")


class HtmlSanitizer:
    """
    Usage:
        sanitizer = HtmlSanitizer()
        safe = sanitizer.clean('<img class="formula-inline" src="/images/x.png" onerror="x()">')
    """

    def __init__(
        self,
        extra_tags: Optional[Iterable[str]] = None,
        extra_attributes: Optional[Mapping[str, Iterable[str]]] = None,
        url_schemes: Optional[Iterable[str]] = None,
    ):
        tags: Set[str] = set(nh3.ALLOWED_TAGS) | EXTRA_TAGS | set(extra_tags or ())
        self.tags = tags - FORBIDDEN_TAGS

        attributes: Dict[str, Set[str]] = {
            tag: set(attrs) for tag, attrs in nh3.ALLOWED_ATTRIBUTES.items()
        }
        for source in (EXTRA_ATTRIBUTES, extra_attributes or {}):
            for tag, attrs in source.items():
                attributes.setdefault(tag, set()).update(attrs)
        self.attributes = {
            tag: {a for a in attrs if not _is_forbidden_attribute(a)}
            for tag, attrs in attributes.items()
            if tag not in FORBIDDEN_TAGS
        }
        # ammonia manages rel itself (link_rel) and rejects it in the allow-list
        if "a" in self.attributes:
            self.attributes["a"].discard("rel")

        self.url_schemes = set(url_schemes) if url_schemes is not None else set(nh3.ALLOWED_URL_SCHEMES)

    def clean(self, html: str) -> str:
        """
        Restrict html to the configured allow-list.

        Raises:
            SanitizerError: nh3 failed on the input
        """
        try:
            return nh3.clean(
                html,
                tags=self.tags,
                attributes=self.attributes,
                url_schemes=self.url_schemes,
            )
        except Exception as e:
            logger.error(f"Sanitizer failed: {e}")
            raise SanitizerError(str(e)) from e
