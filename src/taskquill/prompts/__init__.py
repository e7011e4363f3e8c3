"""Prompt generators, substitution and operator overrides."""

from taskquill.prompts.override import (
    OVERRIDE_STRATEGIES,
    OverrideResolver,
    OverrideRule,
    apply_override,
    chain_resolvers,
    config_override_resolver,
    env_override_resolver,
    no_overrides,
)
from taskquill.prompts.substitution import generate_prompt
from taskquill.prompts.update_task_content import (
    UpdateTaskContentParams,
    classify_outcome,
    get_update_task_content_prompt,
)

__all__ = [
    "OVERRIDE_STRATEGIES",
    "OverrideResolver",
    "OverrideRule",
    "UpdateTaskContentParams",
    "apply_override",
    "chain_resolvers",
    "classify_outcome",
    "config_override_resolver",
    "env_override_resolver",
    "generate_prompt",
    "get_update_task_content_prompt",
    "no_overrides",
]
