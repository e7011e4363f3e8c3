"""Template store interface and in-memory implementation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol


class TemplateNotFoundError(Exception):
    """Raised when a template name cannot be resolved by a store."""

    def __init__(self, name: str, searched: Iterable[str] = ()) -> None:
        self.name = name
        self.searched = tuple(searched)
        message = f"Template not found: {name}"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(message)


class TemplateStore(Protocol):
    """Maps a path-like template name to its raw body."""

    def load(self, name: str) -> str:
        """Return the raw template body for ``name``.

        Raises:
            TemplateNotFoundError: If no body exists for ``name``.
        """
        ...


class DictTemplateStore:
    """Template store backed by an in-memory mapping."""

    def __init__(self, templates: Mapping[str, str]) -> None:
        self._templates = dict(templates)

    def load(self, name: str) -> str:
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None

    def names(self) -> list[str]:
        """Return the sorted template names in this store."""
        return sorted(self._templates)
