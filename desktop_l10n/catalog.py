"""Load Fluent translation catalogs and resolve messages for every language."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from babel.core import parse_locale
from fluent.runtime import FluentBundle
from fluent.syntax import FluentParser, ast

from .errors import CatalogError

logger = logging.getLogger(__name__)

DEFAULT_I18N_DIR = "i18n"
CATALOG_SUFFIX = ".ftl"

_TAG_CHARS = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True, order=True)
class LanguageTag:
    """Normalized language identifier, e.g. ``pt-BR`` or ``sr-Latn``."""
    language: str
    script: str = ""
    region: str = ""
    variant: str = ""

    @classmethod
    def parse(cls, text: str) -> "LanguageTag":
        """Parse ``text``, accepting both ``-`` and ``_`` as separators.

        Raises ValueError for anything that is not a plain language tag.
        """
        if not _TAG_CHARS.fullmatch(text):
            raise ValueError(f"{text!r} is not a valid language tag")
        lang, region, script, variant = parse_locale(
            text.replace("_", "-"), sep="-")[:4]
        if not (2 <= len(lang) <= 3 or 5 <= len(lang) <= 8):
            raise ValueError(f"{text!r} has an invalid language subtag")
        return cls(lang, script or "", region or "", (variant or "").lower())

    def __str__(self) -> str:
        return "-".join(part for part in
                        (self.language, self.script, self.region, self.variant)
                        if part)

    @property
    def underscored(self) -> str:
        """Form used in desktop entry brackets and metainfo ``xml:lang``."""
        return str(self).replace("-", "_")


def catalog_filename(domain: str) -> str:
    return domain.replace("-", "_") + CATALOG_SUFFIX


def _line_of(source: str, offset: int) -> int:
    return source.count("\n", 0, offset) + 1


def _parse_catalog(path: Path, source: str) -> ast.Resource:
    """Parse FTL source, logging syntax errors instead of failing."""
    resource = FluentParser().parse(source)
    junk = [entry for entry in resource.body if isinstance(entry, ast.Junk)]
    if junk:
        errors = [annotation for entry in junk for annotation in entry.annotations]
        logger.warning("failed to parse %s with %d errors:", path, len(errors))
        for annotation in errors:
            line = _line_of(source, annotation.span.start) if annotation.span else "?"
            logger.warning(" - line %s: %s %s", line, annotation.code,
                           annotation.message)

    seen = set()
    for entry in resource.body:
        if not isinstance(entry, (ast.Message, ast.Term)):
            continue
        # Terms live in their own namespace, prefixed with "-" in FTL.
        key = ("-" if isinstance(entry, ast.Term) else "") + entry.id.name
        if key in seen:
            logger.warning("failed to add %s from %s: already defined",
                           key, path)
        seen.add(key)
    return resource


def _load_bundle(lang: LanguageTag, path: Path) -> FluentBundle:
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as err:
        raise CatalogError(f"failed to read catalog {path}: {err}") from err

    resource = _parse_catalog(path, source)
    # placeables must not be wrapped in U+2068/U+2069 in metadata files
    bundle = FluentBundle([str(lang)], use_isolating=False)
    bundle.add_resource(resource)
    logger.debug("loaded %d entries for %s from %s",
                 sum(isinstance(e, ast.Message) for e in resource.body), lang, path)
    return bundle


class CatalogRegistry:
    """Read-only set of Fluent bundles keyed by LanguageTag, in tag order."""

    def __init__(self, bundles: Mapping[LanguageTag, FluentBundle]):
        self._bundles = MappingProxyType(
            {lang: bundles[lang] for lang in sorted(bundles)})

    @classmethod
    def load(cls, i18n_dir, domain: str) -> "CatalogRegistry":
        return load_registry(i18n_dir, domain)

    def __iter__(self) -> Iterator[LanguageTag]:
        return iter(self._bundles)

    def __len__(self) -> int:
        return len(self._bundles)

    def __contains__(self, lang) -> bool:
        return lang in self._bundles

    @property
    def languages(self) -> list[LanguageTag]:
        return list(self._bundles)

    def bundle(self, lang: LanguageTag) -> FluentBundle:
        return self._bundles[lang]

    def resolve(self, message_id: str) -> dict[LanguageTag, str]:
        """Format ``message_id`` for every language that defines it.

        Languages without the message, or whose message has no value, are
        skipped. Formatting errors are logged and the degraded text is kept.
        """
        results = {}
        for lang, bundle in self._bundles.items():
            if not bundle.has_message(message_id):
                continue
            message = bundle.get_message(message_id)
            if message.value is None:
                continue
            value, errors = bundle.format_pattern(message.value)
            if errors:
                logger.warning("%d errors when formatting %s for lang %s:",
                               len(errors), message_id, lang)
                for err in errors:
                    logger.warning(" - %s", err)
            results[lang] = str(value)
        return results


def load_registry(i18n_dir, domain: str) -> CatalogRegistry:
    """Load ``<i18n_dir>/<lang>/<domain>.ftl`` for every language directory.

    Hyphens in ``domain`` become underscores in the file name.
    """
    i18n_dir = Path(i18n_dir)
    filename = catalog_filename(domain)
    try:
        with os.scandir(i18n_dir) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as err:
        raise CatalogError(f"failed to read {i18n_dir}: {err}") from err

    lang_files: dict[LanguageTag, Path] = {}
    for entry in entries:
        try:
            if not entry.is_dir():
                continue
        except OSError as err:
            raise CatalogError(f"failed to stat {entry.path}: {err}") from err
        try:
            entry.name.encode("utf-8")
        except UnicodeEncodeError as err:
            raise CatalogError(
                f"invalid UTF-8 in directory name {entry.name!r}") from err
        try:
            lang = LanguageTag.parse(entry.name)
        except ValueError as err:
            raise CatalogError(f"{entry.path}: {err}") from err
        path = Path(entry.path) / filename
        if lang in lang_files:
            logger.warning("ignoring %s: language %s already loaded from %s",
                           path, lang, lang_files[lang])
            continue
        lang_files[lang] = path

    bundles = {lang: _load_bundle(lang, path)
               for lang, path in sorted(lang_files.items())}
    return CatalogRegistry(bundles)


@dataclass(frozen=True)
class Message:
    """Reference to a message id shared by every catalog."""
    id: str

    def resolve(self, registry: CatalogRegistry) -> dict[LanguageTag, str]:
        return registry.resolve(self.id)

    def __str__(self) -> str:
        return self.id
