"""Single-pass token substitution."""

from __future__ import annotations

import re
from collections.abc import Mapping

DEFAULT_MISSING_VALUE = ""


def stringify_value(value: object, missing_value: str = DEFAULT_MISSING_VALUE) -> str:
    """Render a dictionary value as template text.

    Booleans render as ``true``/``false``, integral floats without a
    fractional part, and None as ``missing_value``.
    """
    if value is None:
        return missing_value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def substitute(
    text: str,
    dictionary: Mapping[str, object],
    missing_value: str = DEFAULT_MISSING_VALUE,
) -> str:
    """Replace every token of the dictionary in text.

    All tokens are matched in one scan of the original text, so the result
    does not depend on dictionary order and replacement values are never
    scanned for further tokens.

    Args:
        text: Text containing ``{{TOKEN}}`` placeholders.
        dictionary: Placeholder text to value.
        missing_value: Text used for None values.

    Returns:
        The substituted text.
    """
    if not dictionary:
        return text

    # Longest first so a token that prefixes another cannot shadow it
    tokens = sorted(dictionary, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    values = {token: stringify_value(value, missing_value) for token, value in dictionary.items()}

    return pattern.sub(lambda match: values[match.group(0)], text)
