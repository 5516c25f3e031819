"""Add Fluent translations to .desktop entries and AppStream metainfo files."""

from .app import App
from .catalog import CatalogRegistry, LanguageTag, Message, load_registry
from .desktop import expand_desktop
from .errors import (CatalogError, L10nError, LocalizedFieldError,
                     MissingTagError, RedefinedFieldError, TemplateError)
from .metainfo import expand_metainfo

__version__ = "0.1.0"

__all__ = [
    "App", "CatalogRegistry", "LanguageTag", "Message", "load_registry",
    "expand_desktop", "expand_metainfo",
    "L10nError", "CatalogError", "TemplateError", "LocalizedFieldError",
    "RedefinedFieldError", "MissingTagError",
]
