"""Flat placeholder substitution for prompt templates."""

import re
from collections.abc import Mapping
from typing import Any

# {name} where name is a word; anything else in braces is left alone
PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


def generate_prompt(template: str, params: Mapping[str, Any] | None = None) -> str:
    """Substitute ``{name}`` placeholders in a template.

    Placeholder rules:
      1. ``{name}`` is replaced with ``str(params[name])``; ``None`` renders
         as an empty string.
      2. Placeholders without an entry in ``params`` are left as-is.
      3. Substitution is a single pass. Inserted values are never rescanned,
         so a value containing ``{other}`` stays literal.

    Args:
        template: The raw template body.
        params: Mapping from placeholder name to value.

    Returns:
        The rendered text.
    """
    if not params:
        return template

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in params:
            return match.group(0)
        value = params[key]
        return "" if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(_replace, template)
