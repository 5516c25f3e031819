"""Inject translations into an AppStream metainfo template."""

from pathlib import Path

from lxml import etree

from .errors import (LocalizedFieldError, MissingTagError, RedefinedFieldError,
                     TemplateError)

INDENT = "  "


def parse_template(path) -> etree._ElementTree:
    parser = etree.XMLParser(remove_blank_text=True)
    try:
        return etree.parse(str(path), parser)
    except OSError as err:
        raise TemplateError(f"failed to read template {path}: {err}") from err
    except etree.XMLSyntaxError as err:
        raise TemplateError(f"failed to parse template {path}: {err}") from err


def _localized(tag: str, lang, value: str) -> etree._Element:
    child = etree.Element(tag)
    # renamed to xml:lang once the tree is serialized
    child.set("lang", lang.underscored)
    child.text = value
    return child


def find_anchor(root, tag: str, template_path) -> int:
    """Return the index of the single unlocalized ``tag`` child of ``root``.

    A matching child with attributes fails first, then a second match;
    no match at all fails last.
    """
    index = None
    for i, child in enumerate(root):
        # comments and processing instructions have a non-string tag
        if not isinstance(child.tag, str) or child.tag != tag:
            continue
        if child.attrib:
            raise LocalizedFieldError(
                f"template {template_path} has localized tag {tag}")
        if index is not None:
            raise RedefinedFieldError(
                f"template {template_path} has redefined tag {tag}")
        index = i
    if index is None:
        raise MissingTagError(f"template {template_path} is missing tag {tag}")
    return index


def expand_locale(root, tag: str, message, registry, template_path):
    index = find_anchor(root, tag, template_path)
    for lang, value in message.resolve(registry).items():
        index += 1
        root.insert(index, _localized(tag, lang, value))


def expand_keywords(root, message, registry, template_path):
    keywords = root.find("keywords")
    if keywords is None:
        raise MissingTagError(f"template {template_path} is missing keywords")
    for lang, values in message.resolve(registry).items():
        parts = values.split(";")
        if parts[-1] == "":
            parts.pop()
        for value in parts:
            keywords.append(_localized("keyword", lang, value))


def expand_metainfo(template_path, app, registry) -> str:
    """Return the metainfo template with localized name, summary and
    keyword elements added for every language in ``registry``."""
    template_path = Path(template_path)
    tree = parse_template(template_path)
    root = tree.getroot()

    expand_locale(root, "name", app.name, registry, template_path)
    if app.comment is not None:
        expand_locale(root, "summary", app.comment, registry, template_path)
    if app.keywords is not None:
        expand_keywords(root, app.keywords, registry, template_path)

    etree.indent(tree, space=INDENT)
    data = etree.tostring(tree, pretty_print=True, xml_declaration=True,
                          encoding="UTF-8")
    # consumers only accept the namespaced form
    return data.decode("utf-8").replace(" lang=", " xml:lang=")
