import textwrap

import pytest

from desktop_l10n import load_registry

DOMAIN = "my-app"

CATALOGS = {
    "en": """
        app-name = Hello
        app-comment = A friendly greeter
        app-keywords = alpha;beta;
    """,
    "fr": """
        app-name = Bonjour
        app-comment = Un salut amical
    """,
}


def write_catalogs(root, catalogs, domain=DOMAIN):
    """Write ``{lang: ftl_source}`` as <root>/<lang>/<domain>.ftl."""
    root.mkdir(exist_ok=True)
    for lang, source in catalogs.items():
        lang_dir = root / lang
        lang_dir.mkdir()
        filename = domain.replace("-", "_") + ".ftl"
        (lang_dir / filename).write_text(textwrap.dedent(source).lstrip(),
                                        encoding="utf-8")
    return root


@pytest.fixture
def i18n_dir(tmp_path):
    return write_catalogs(tmp_path / "i18n", CATALOGS)


@pytest.fixture
def registry(i18n_dir):
    return load_registry(i18n_dir, DOMAIN)


@pytest.fixture
def write_template(tmp_path):
    def write(name, text, newline=None):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline=newline) as f:
            f.write(textwrap.dedent(text).lstrip())
        return path
    return write
