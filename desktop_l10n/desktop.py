"""Inject translations into a .desktop template."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .errors import LocalizedFieldError, RedefinedFieldError, TemplateError

DESKTOP_SECTION = "Desktop Entry"

SECTION_RE = re.compile(r"^\[([^\[\]]+)\]\s*$")
ATTR_RE = re.compile(r"^([A-Za-z0-9-]+)(?:\[([^\]]*)\])?\s*=\s*(.*?)\s*$")


@dataclass
class Line:
    """One template line, kept verbatim in ``raw``."""
    raw: str
    section: str | None = None
    key: str | None = None
    param: str | None = None
    value: str | None = None


def parse_entry(path) -> Iterator[Line]:
    """Yield every line of a desktop entry file, classified.

    Raises TemplateError if the file can't be read or a line is malformed.
    """
    path = Path(path)
    try:
        # newline="" keeps \r\n so untouched lines are re-emitted exactly
        with open(path, "r", encoding="utf-8", newline="") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as err:
        raise TemplateError(f"failed to read template {path}: {err}") from err

    section = None
    for lineno, raw in enumerate(lines, 1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            yield Line(raw, section)
            continue
        m = SECTION_RE.match(stripped)
        if m:
            section = m.group(1)
            yield Line(raw, section)
            continue
        m = ATTR_RE.match(stripped)
        if not m:
            raise TemplateError(f"template {path}:{lineno}: invalid line {stripped!r}")
        if section is None:
            raise TemplateError(
                f"template {path}:{lineno}: key {m.group(1)} outside of a section")
        yield Line(raw, section, m.group(1), m.group(2), m.group(3))


_ESCAPES = str.maketrans({"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"})


def escape_value(value: str) -> str:
    """Escape a value so it stays on one ``Key=value`` line."""
    return value.translate(_ESCAPES)


def _line_ending(raw: str) -> str:
    if raw.endswith("\r\n"):
        return "\r\n"
    if raw.endswith("\r"):
        return "\r"
    return "\n"


def expand_desktop(template_path, app, registry) -> str:
    """Return the template with ``Key[lang]=value`` lines after Name, Comment
    and Keywords, for every language in ``registry``."""
    template_path = Path(template_path)
    fields = {
        "Name": app.name,
        "Comment": app.comment,
        "Keywords": app.keywords,
    }
    seen = set()
    out = []
    for line in parse_entry(template_path):
        out.append(line.raw)
        if line.key is None or line.section != DESKTOP_SECTION:
            continue
        message = fields.get(line.key)
        if message is None:
            continue
        if line.param is not None:
            raise LocalizedFieldError(
                f"template {template_path} has localized {line.key}[{line.param}]")
        if line.key in seen:
            raise RedefinedFieldError(
                f"template {template_path} has redefined {line.key}")
        seen.add(line.key)

        translations = message.resolve(registry)
        eol = _line_ending(line.raw)
        if translations and not line.raw.endswith(("\n", "\r")):
            out.append(eol)
        for lang, value in translations.items():
            out.append(f"{line.key}[{lang.underscored}]={escape_value(value)}{eol}")
    return "".join(out)
