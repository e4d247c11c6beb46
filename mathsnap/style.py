"""
Style Descriptor Resolver

Turns the loosely typed ``options`` object of a render request into a
StyleDescriptor. Every field falls back to a documented default; nothing
in here raises.

Numeric rules:
    fontSize  non-numeric / non-finite / <= 0 -> profile default, else clamped to [1, 512]
    padding   non-numeric / non-finite        -> profile default, negative -> 0, capped at 256
    scale     non-numeric / non-finite / <= 0 -> 2, capped at 8
"""

import logging
import math
import re
from typing import Any, Mapping, Optional

from config.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_COLOR,
    DEFAULT_FONT_FAMILY,
    DEFAULT_SCALE,
    GENERIC_FONT_FAMILIES,
    MAX_FONT_SIZE,
    MAX_PADDING,
    MAX_SCALE,
    MIN_FONT_SIZE,
    STYLE_PROFILES,
)
from .models import StyleDescriptor

logger = logging.getLogger(__name__)

_PLAIN_FONT_NAME = re.compile(r'^[A-Za-z0-9_-]+$')
# Characters that would let a value escape its CSS declaration
_CSS_BREAKING = re.compile(r'[;{}<>\\]')

_ZERO_ALPHA_FUNCTION = re.compile(r'^(?:rgba|hsla)\(.*,(?:0*\.?0+|0+%|0*\.0+%)\)$')
_ZERO_ALPHA_HEX = re.compile(r'^#(?:[0-9a-f]{3}0|[0-9a-f]{6}00)$')


def normalize_font_family(value: Any) -> str:
    """
    Normalize a comma-separated font-family list.

    Generic families are lower-cased, fully quoted names kept as-is, and
    names with characters outside ``[A-Za-z0-9_-]`` wrapped in double quotes.

    Example:
        >>> normalize_font_family("Comic Sans MS, serif")
        '"Comic Sans MS", serif'
    """
    if not value:
        return DEFAULT_FONT_FAMILY

    parts = []
    for name in str(value).split(','):
        name = name.strip()
        if not name or _CSS_BREAKING.search(name):
            continue
        lower = name.lower()
        if lower in GENERIC_FONT_FAMILIES:
            parts.append(lower)
        elif len(name) >= 2 and name[0] == name[-1] and name[0] in '"\'' and name[0] not in name[1:-1]:
            parts.append(name)
        elif not _PLAIN_FONT_NAME.match(name):
            parts.append(f'"{name.strip(chr(34))}"')
        else:
            parts.append(name)

    return ', '.join(parts) if parts else DEFAULT_FONT_FAMILY


def is_transparent_background(value: Any) -> bool:
    """
    Decide whether a CSS background value has zero alpha.

    Recognizes ``transparent``, ``rgba(...,0)``, ``hsla(...,0)`` (alpha
    written as 0, 0.0 or 0%) and ``#RGBA`` / ``#RRGGBBAA`` with zero alpha.
    """
    if value is None:
        return False
    compact = re.sub(r'\s+', '', str(value)).lower()
    if compact == 'transparent':
        return True
    return bool(_ZERO_ALPHA_FUNCTION.match(compact) or _ZERO_ALPHA_HEX.match(compact))


def _to_number(value: Any) -> Optional[float]:
    """Parse ints, floats and numeric strings; anything else is None"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _css_value(value: Any, default: str) -> str:
    if not isinstance(value, str):
        return default
    value = value.strip()
    if not value or _CSS_BREAKING.search(value):
        return default
    return value


def _pick(options: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in options:
        return options[camel]
    return options.get(snake)


def resolve_style(options: Optional[Mapping[str, Any]] = None, profile: str = "default") -> StyleDescriptor:
    """
    Resolve raw request options into a StyleDescriptor.

    Args:
        options: Request options (camelCase or snake_case keys), may be None
        profile: Name of the default profile (see STYLE_PROFILES)

    Returns:
        Fully populated StyleDescriptor
    """
    if not isinstance(options, Mapping):
        options = {}

    defaults = STYLE_PROFILES.get(profile)
    if defaults is None:
        logger.warning(f"Unknown style profile '{profile}', using 'default'")
        defaults = STYLE_PROFILES['default']

    font_size = _to_number(_pick(options, 'fontSize', 'font_size'))
    if font_size is None or font_size <= 0:
        font_size = defaults['font_size']
    font_size = min(max(font_size, MIN_FONT_SIZE), MAX_FONT_SIZE)

    padding = _to_number(options.get('padding'))
    if padding is None:
        padding = defaults['padding']
    padding = min(max(padding, 0), MAX_PADDING)

    scale = _to_number(options.get('scale'))
    if scale is None or scale <= 0:
        scale = DEFAULT_SCALE
    scale = min(scale, MAX_SCALE)

    background = _css_value(options.get('background'), DEFAULT_BACKGROUND)

    return StyleDescriptor(
        font_family=normalize_font_family(_pick(options, 'fontFamily', 'font_family')),
        font_size=font_size,
        color=_css_value(options.get('color'), DEFAULT_COLOR),
        background=background,
        padding=padding,
        scale=scale,
        is_transparent_background=is_transparent_background(background),
    )
