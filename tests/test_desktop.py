"""Tests for .desktop template expansion."""
import re

import pytest

from desktop_l10n import (App, LocalizedFieldError, RedefinedFieldError,
                          TemplateError, expand_desktop, load_registry)
from desktop_l10n.desktop import escape_value, parse_entry

from conftest import DOMAIN, write_catalogs

TEMPLATE = """
    # Launcher for the greeter
    [Desktop Entry]
    Type=Application
    Name=Default
    Comment=Greets people
    Keywords=greet;hello;
    Exec=greeter %U

    [Desktop Action new-window]
    Name=New Window
    Exec=greeter --new-window
"""

LOCALIZED = re.compile(r"^(Name|Comment|Keywords)\[\w+\]=")


@pytest.fixture
def app():
    return App("app-name").with_comment("app-comment").with_keywords("app-keywords")


def _without_localized(text):
    return "".join(line for line in text.splitlines(keepends=True)
                   if not LOCALIZED.match(line))


class TestExpandDesktop:
    def test_name_lines_in_language_order(self, write_template, registry):
        path = write_template("app.desktop", "[Desktop Entry]\nName=Default\n")
        out = expand_desktop(path, App("app-name"), registry)
        assert out == "[Desktop Entry]\nName=Default\nName[en]=Hello\nName[fr]=Bonjour\n"

    def test_all_fields(self, write_template, registry, app):
        path = write_template("app.desktop", TEMPLATE)
        lines = expand_desktop(path, app, registry).splitlines()
        i = lines.index("Name=Default")
        assert lines[i + 1:i + 3] == ["Name[en]=Hello", "Name[fr]=Bonjour"]
        i = lines.index("Comment=Greets people")
        assert lines[i + 1:i + 3] == ["Comment[en]=A friendly greeter",
                                      "Comment[fr]=Un salut amical"]
        i = lines.index("Keywords=greet;hello;")
        assert lines[i + 1:i + 3] == ["Keywords[en]=alpha;beta;", "Exec=greeter %U"]

    def test_other_sections_untouched(self, write_template, registry, app):
        path = write_template("app.desktop", TEMPLATE)
        out = expand_desktop(path, app, registry)
        assert "Name=New Window\nExec=greeter --new-window\n" in out

    def test_unset_fields_pass_through(self, write_template, registry):
        path = write_template("app.desktop", TEMPLATE)
        out = expand_desktop(path, App("app-name"), registry)
        assert "Comment[" not in out
        assert "Keywords[" not in out

    def test_output_minus_localized_lines_equals_template(self, write_template, registry, app):
        path = write_template("app.desktop", TEMPLATE)
        out = expand_desktop(path, app, registry)
        assert _without_localized(out) == path.read_text(encoding="utf-8")

    def test_crlf_line_endings_preserved(self, tmp_path, registry):
        path = tmp_path / "app.desktop"
        path.write_bytes(b"[Desktop Entry]\r\nName=Default\r\nType=Application\r\n")
        out = expand_desktop(path, App("app-name"), registry)
        assert out == ("[Desktop Entry]\r\nName=Default\r\nName[en]=Hello\r\n"
                       "Name[fr]=Bonjour\r\nType=Application\r\n")

    def test_missing_final_newline(self, tmp_path, registry):
        path = tmp_path / "app.desktop"
        path.write_text("[Desktop Entry]\nName=Default", encoding="utf-8")
        out = expand_desktop(path, App("app-name"), registry)
        assert out == "[Desktop Entry]\nName=Default\nName[en]=Hello\nName[fr]=Bonjour\n"

    def test_spaces_around_equals(self, write_template, registry):
        path = write_template("app.desktop", "[Desktop Entry]\nName = Default\n")
        out = expand_desktop(path, App("app-name"), registry)
        assert out.endswith("Name = Default\nName[en]=Hello\nName[fr]=Bonjour\n")

    def test_localized_field_in_template(self, write_template, registry):
        path = write_template("app.desktop", "[Desktop Entry]\nName=Default\nName[de]=Hallo\n")
        with pytest.raises(LocalizedFieldError, match=r"Name\[de\]"):
            expand_desktop(path, App("app-name"), registry)

    def test_localized_unmanaged_field_allowed(self, write_template, registry):
        path = write_template("app.desktop", "[Desktop Entry]\nName=Default\nComment[de]=Hallo\n")
        out = expand_desktop(path, App("app-name"), registry)
        assert out.endswith("Comment[de]=Hallo\n")

    def test_rerun_on_output_fails(self, write_template, registry, app):
        path = write_template("app.desktop", TEMPLATE)
        out = write_template("out.desktop", expand_desktop(path, app, registry))
        with pytest.raises(LocalizedFieldError):
            expand_desktop(out, app, registry)

    def test_redefined_field(self, write_template, registry):
        path = write_template("app.desktop", "[Desktop Entry]\nName=One\nName=Two\n")
        with pytest.raises(RedefinedFieldError):
            expand_desktop(path, App("app-name"), registry)

    def test_malformed_line(self, write_template, registry):
        path = write_template("app.desktop", "[Desktop Entry]\nthis is not a key\n")
        with pytest.raises(TemplateError, match=":2:"):
            expand_desktop(path, App("app-name"), registry)

    def test_key_outside_section(self, write_template, registry):
        path = write_template("app.desktop", "Name=Default\n")
        with pytest.raises(TemplateError):
            expand_desktop(path, App("app-name"), registry)

    def test_missing_template(self, tmp_path, registry):
        with pytest.raises(TemplateError):
            expand_desktop(tmp_path / "missing.desktop", App("app-name"), registry)

    def test_message_missing_everywhere(self, write_template, registry):
        path = write_template("app.desktop", "[Desktop Entry]\nName=Default\n")
        out = expand_desktop(path, App("unknown"), registry)
        assert out == "[Desktop Entry]\nName=Default\n"

    def test_multiline_message_escaped(self, tmp_path, write_template):
        root = write_catalogs(tmp_path / "ml-i18n", {"en": "app-name =\n    one\n    two\n"})
        registry = load_registry(root, DOMAIN)
        path = write_template("app.desktop", "[Desktop Entry]\nName=Default\n")
        out = expand_desktop(path, App("app-name"), registry)
        assert out == "[Desktop Entry]\nName=Default\nName[en]=one\\ntwo\n"
        assert _without_localized(out) == "[Desktop Entry]\nName=Default\n"
        # the output must itself parse as a desktop entry
        out_path = write_template("out.desktop", out)
        assert [line.key for line in parse_entry(out_path) if line.key] == ["Name", "Name"]


class TestEscapeValue:
    def test_control_characters(self):
        assert escape_value("a\\b\tc\r\nd") == "a\\\\b\\tc\\r\\nd"

    def test_plain_text_unchanged(self):
        assert escape_value("alpha;beta;") == "alpha;beta;"
