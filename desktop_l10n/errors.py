"""Exceptions raised while loading catalogs or expanding templates."""


class L10nError(Exception):
    """Base class for every fatal desktop-l10n error."""


class CatalogError(L10nError):
    """A catalog directory or catalog file could not be loaded."""


class TemplateError(L10nError):
    """A template could not be read or does not have the expected shape."""


class LocalizedFieldError(TemplateError):
    """The template already has a localized variant of an auto-localized field."""


class RedefinedFieldError(TemplateError):
    """The template defines the same unlocalized field more than once."""


class MissingTagError(TemplateError):
    """The template lacks the element a field is anchored to."""
