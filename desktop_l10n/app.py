"""Localizable description of one desktop application."""

from dataclasses import dataclass, replace

from .catalog import CatalogRegistry, Message
from .desktop import expand_desktop
from .metainfo import expand_metainfo


def _message(value) -> Message:
    return value if isinstance(value, Message) else Message(value)


@dataclass(frozen=True)
class App:
    """Messages used for an application's name, comment and keywords.

    Build it incrementally::

        app = App("app-name").with_comment("app-comment").with_keywords("app-keywords")

    The keywords message is expected to format to a ``;``-terminated list.
    """
    name: Message
    comment: Message | None = None
    keywords: Message | None = None

    def __post_init__(self):
        object.__setattr__(self, "name", _message(self.name))
        if self.comment is not None:
            object.__setattr__(self, "comment", _message(self.comment))
        if self.keywords is not None:
            object.__setattr__(self, "keywords", _message(self.keywords))

    def with_comment(self, value) -> "App":
        return replace(self, comment=_message(value))

    def with_keywords(self, value) -> "App":
        return replace(self, keywords=_message(value))

    def expand_desktop(self, template_path, registry: CatalogRegistry) -> str:
        return expand_desktop(template_path, self, registry)

    def expand_metainfo(self, template_path, registry: CatalogRegistry) -> str:
        return expand_metainfo(template_path, self, registry)
