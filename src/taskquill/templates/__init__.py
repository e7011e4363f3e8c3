"""Prompt template stores and discovery."""

from taskquill.templates.base import (
    DictTemplateStore,
    TemplateNotFoundError,
    TemplateStore,
)
from taskquill.templates.loader import (
    FileTemplateStore,
    copy_default_templates_to_user,
    get_bundled_languages,
    get_global_templates_path,
    get_local_templates_path,
    get_package_templates_path,
    get_template_search_paths,
)

__all__ = [
    "DictTemplateStore",
    "FileTemplateStore",
    "TemplateNotFoundError",
    "TemplateStore",
    "copy_default_templates_to_user",
    "get_bundled_languages",
    "get_global_templates_path",
    "get_local_templates_path",
    "get_package_templates_path",
    "get_template_search_paths",
]
