"""Configuration schema and validation for taskquill."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from taskquill.prompts.override import OverrideRule

logger = logging.getLogger(__name__)


@dataclass
class TaskquillConfig:
    """Taskquill configuration schema.

    None values indicate "not set" and will use defaults or be inherited.
    """

    # Template language folder (e.g. "en", "zh") or a custom folder name
    templates_use: str | None = None

    # Logical prompt name -> operator override
    prompt_overrides: dict[str, OverrideRule] = field(default_factory=dict)

    def merge(self, other: TaskquillConfig) -> TaskquillConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Override rules are merged per prompt name.
        Returns a new TaskquillConfig instance.
        """
        return TaskquillConfig(
            templates_use=(
                other.templates_use
                if other.templates_use is not None
                else self.templates_use
            ),
            prompt_overrides={**self.prompt_overrides, **other.prompt_overrides},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding unset values."""
        result: dict[str, Any] = {}
        if self.templates_use is not None:
            result["templates_use"] = self.templates_use
        if self.prompt_overrides:
            result["prompt_overrides"] = {
                name: rule.to_dict() for name, rule in self.prompt_overrides.items()
            }
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskquillConfig:
        """Create a TaskquillConfig from a dictionary.

        Unknown keys are ignored. Malformed override entries are skipped.
        """
        templates_use_raw = data.get("templates_use")
        templates_use = (
            str(templates_use_raw) if templates_use_raw is not None else None
        )

        prompt_overrides: dict[str, OverrideRule] = {}
        overrides_raw = data.get("prompt_overrides")
        if isinstance(overrides_raw, dict):
            for name, value in overrides_raw.items():
                rule = OverrideRule.from_value(value)
                if rule is None:
                    logger.warning("Skipping malformed prompt override: %s", name)
                    continue
                prompt_overrides[str(name).upper()] = rule

        return cls(templates_use=templates_use, prompt_overrides=prompt_overrides)


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = TaskquillConfig(templates_use="en")
