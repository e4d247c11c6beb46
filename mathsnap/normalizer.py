r"""
Delimiter normalization.

Math delimiters frequently arrive double-escaped after passing through a
layer that escapes backslashes (JSON written by hand, template engines, ...):
``\\(x\\)`` instead of ``\(x\)``. Any run of backslashes directly in front
of one of ``( ) [ ]`` is collapsed to a single backslash before scanning.
"""

import re

from .errors import InvalidInputError

# Two or more backslashes followed by a bracket/paren delimiter character
_ESCAPED_DELIMITER = re.compile(r'\\{2,}(?=[()\[\]])')


def normalize_delimiters(text: str) -> str:
    """
    Rewrite double-escaped delimiters to their single-backslash form.

    Idempotent: ``normalize_delimiters(normalize_delimiters(s)) == normalize_delimiters(s)``.

    Args:
        text: Raw request text

    Returns:
        Text with ``\\(``, ``\\)``, ``\\[`` and ``\\]`` rewritten

    Raises:
        InvalidInputError: If text is not a string
    """
    if not isinstance(text, str):
        raise InvalidInputError(f"text must be a string, got {type(text).__name__}")
    return _ESCAPED_DELIMITER.sub(r'\\', text)
