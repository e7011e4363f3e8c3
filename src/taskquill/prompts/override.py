"""Operator overrides applied to fully composed prompts.

An override rule is looked up by logical prompt name (e.g.
``UPDATE_TASK_CONTENT``) through an injected resolver, so generators stay
pure functions of their arguments. The default resolvers read environment
variables and the ``prompt_overrides`` config section.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = "MCP_PROMPT_"
APPEND_SUFFIX = "_APPEND"
SECTION_SEPARATOR = "\n\n"


def _replace(composed: str, text: str) -> str:
    return text


def _append(composed: str, text: str) -> str:
    return f"{composed}{SECTION_SEPARATOR}{text}"


def _prepend(composed: str, text: str) -> str:
    return f"{text}{SECTION_SEPARATOR}{composed}"


# Mode name -> (composed, override text) -> final text
OVERRIDE_STRATEGIES: dict[str, Callable[[str, str], str]] = {
    "replace": _replace,
    "append": _append,
    "prepend": _prepend,
}


@dataclass(frozen=True)
class OverrideRule:
    """An operator instruction for one logical prompt."""

    mode: str  # key of OVERRIDE_STRATEGIES
    text: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"mode": self.mode, "text": self.text}

    @classmethod
    def from_value(cls, value: Any) -> OverrideRule | None:
        """Create a rule from a config value.

        A bare string means replace. A mapping needs a string ``text`` and
        an optional ``mode`` (default replace). Anything else is None.
        """
        if isinstance(value, str):
            return cls(mode="replace", text=value)
        if not isinstance(value, dict):
            return None
        text = value.get("text")
        mode = value.get("mode", "replace")
        if not isinstance(text, str) or not isinstance(mode, str):
            return None
        return cls(mode=mode.lower(), text=text)


OverrideResolver = Callable[[str], OverrideRule | None]


def process_env_string(value: str) -> str:
    """Expand literal escape sequences written into environment values."""
    return value.replace("\\n", "\n").replace("\\t", "\t").replace("\\r", "\r")


def env_override_resolver(
    environ: Mapping[str, str] | None = None,
) -> OverrideResolver:
    """Build a resolver backed by ``MCP_PROMPT_<NAME>`` variables.

    ``MCP_PROMPT_<NAME>`` replaces the prompt; otherwise
    ``MCP_PROMPT_<NAME>_APPEND`` is appended to it.
    """
    env = os.environ if environ is None else environ

    def resolve(name: str) -> OverrideRule | None:
        replacement = env.get(f"{ENV_PREFIX}{name}")
        if replacement:
            return OverrideRule(mode="replace", text=process_env_string(replacement))
        appended = env.get(f"{ENV_PREFIX}{name}{APPEND_SUFFIX}")
        if appended:
            return OverrideRule(mode="append", text=process_env_string(appended))
        return None

    return resolve


def config_override_resolver(rules: Mapping[str, OverrideRule]) -> OverrideResolver:
    """Build a resolver backed by rules parsed from the config file."""

    def resolve(name: str) -> OverrideRule | None:
        return rules.get(name)

    return resolve


def chain_resolvers(*resolvers: OverrideResolver) -> OverrideResolver:
    """Combine resolvers; the first one returning a rule wins."""

    def resolve(name: str) -> OverrideRule | None:
        for resolver in resolvers:
            rule = resolver(name)
            if rule is not None:
                return rule
        return None

    return resolve


def no_overrides(name: str) -> OverrideRule | None:
    """Resolver that never overrides anything."""
    return None


def apply_override(
    composed: str,
    prompt_name: str,
    resolver: OverrideResolver | None = None,
) -> str:
    """Apply the override rule for ``prompt_name`` to composed text.

    Never fails: a missing resolver, a resolver error or a malformed rule
    all pass the composed text through unchanged.
    """
    if resolver is None:
        return composed

    try:
        rule = resolver(prompt_name)
    except Exception as exc:  # resolver is operator-supplied
        logger.warning("Override lookup for %s failed: %s", prompt_name, exc)
        return composed

    if rule is None:
        return composed

    if not isinstance(rule, OverrideRule) or not isinstance(rule.text, str):
        logger.warning("Ignoring malformed override for %s: %r", prompt_name, rule)
        return composed

    strategy = OVERRIDE_STRATEGIES.get(rule.mode)
    if strategy is None:
        logger.warning(
            "Ignoring override for %s with unknown mode '%s'", prompt_name, rule.mode
        )
        return composed

    logger.debug("Applying %s override to %s", rule.mode, prompt_name)
    return strategy(composed, rule.text)
