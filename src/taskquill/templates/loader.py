"""Template loading and discovery."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from taskquill.templates.base import TemplateNotFoundError

logger = logging.getLogger(__name__)

# Constants
TEMPLATE_DIRNAME = "templates"
DEFAULT_LANGUAGE = "en"
TEMPLATE_SUFFIX = ".md"


def get_package_templates_path() -> Path:
    """Get path to package-bundled default templates."""
    return Path(__file__).parent / "default"


def get_global_templates_path() -> Path:
    """Get path to global user templates: ~/.taskquill/templates/."""
    return Path.home() / ".taskquill" / TEMPLATE_DIRNAME


def get_local_templates_path() -> Path:
    """Get path to project-specific templates: ./.taskquill/templates/."""
    return Path.cwd() / ".taskquill" / TEMPLATE_DIRNAME


def get_bundled_languages() -> list[str]:
    """Get the template languages shipped with the package."""
    package_path = get_package_templates_path()
    if not package_path.exists():
        return []
    return sorted(item.name for item in package_path.iterdir() if item.is_dir())


def get_template_search_paths(templates_use: str | None = None) -> list[Path]:
    """Return template search paths in priority order (highest first).

    Resolution order:
    1. Local project templates (./.taskquill/templates/<use>/)
    2. Global user templates (~/.taskquill/templates/<use>/)
    3. Bundled templates for <use>
    4. Bundled English templates (always last)

    Only existing directories are returned.
    """
    use = templates_use or DEFAULT_LANGUAGE
    candidates = [
        get_local_templates_path() / use,
        get_global_templates_path() / use,
        get_package_templates_path() / use,
        get_package_templates_path() / DEFAULT_LANGUAGE,
    ]

    paths: list[Path] = []
    for candidate in candidates:
        if candidate.is_dir() and candidate not in paths:
            paths.append(candidate)
    return paths


class FileTemplateStore:
    """Template store reading ``<root>/<name>`` from layered directories.

    Bodies are read verbatim on every call, so fragment templates keep
    their trailing line breaks and edits are picked up immediately.
    """

    def __init__(self, search_paths: list[Path]) -> None:
        self.search_paths = list(search_paths)

    @classmethod
    def for_language(cls, templates_use: str | None = None) -> FileTemplateStore:
        """Create a store using the standard search paths for a language."""
        return cls(get_template_search_paths(templates_use))

    def resolve(self, name: str) -> Path | None:
        """Return the highest-priority file for ``name``, if any."""
        for root in self.search_paths:
            candidate = root / name
            if candidate.is_file():
                return candidate
        return None

    def load(self, name: str) -> str:
        path = self.resolve(name)
        if path is None:
            raise TemplateNotFoundError(name, [str(p) for p in self.search_paths])
        logger.debug("Loading template %s from %s", name, path)
        return path.read_text(encoding="utf-8")

    def names(self) -> dict[str, Path]:
        """Map every resolvable template name to the file that wins for it."""
        resolved: dict[str, Path] = {}
        # Lowest priority first so higher layers overwrite
        for root in reversed(self.search_paths):
            for template_file in root.rglob(f"*{TEMPLATE_SUFFIX}"):
                if template_file.is_file():
                    name = template_file.relative_to(root).as_posix()
                    resolved[name] = template_file
        return dict(sorted(resolved.items()))


def copy_default_templates_to_user(
    overwrite: bool = False, local: bool = False
) -> list[str]:
    """Copy bundled template languages so operators can edit them.

    Args:
        overwrite: If True, overwrite existing languages. If False, skip existing.
        local: If True, copy to ./.taskquill/templates/ (project-local).
               If False, copy to ~/.taskquill/templates/ (global, default).

    Returns:
        List of language folder names that were copied.
    """
    package_path = get_package_templates_path()
    target = get_local_templates_path() if local else get_global_templates_path()
    target.mkdir(parents=True, exist_ok=True)

    copied: list[str] = []

    for language in get_bundled_languages():
        dest_dir = target / language

        if dest_dir.exists() and not overwrite:
            continue

        if dest_dir.exists():
            shutil.rmtree(dest_dir)

        shutil.copytree(package_path / language, dest_dir)
        copied.append(language)

    return copied
