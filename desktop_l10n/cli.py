"""desktop-l10n command line: expand a .desktop or metainfo template."""

import argparse
import gettext
import logging
import os
import sys

from . import __version__
from .app import App
from .catalog import DEFAULT_I18N_DIR, load_registry
from .errors import L10nError

# i18n setup: desktop-l10n.mo is installed by packagers, not shipped here
LOCALEDIR = os.environ.get('DESKTOP_L10N_LOCALEDIR', '/usr/share/locale')
gettext.bindtextdomain('desktop-l10n', LOCALEDIR)
gettext.textdomain('desktop-l10n')
_ = gettext.gettext

ENV_I18N_DIR = "DESKTOP_L10N_I18N_DIR"
ENV_DOMAIN = "DESKTOP_L10N_DOMAIN"

EXPANDERS = {
    "desktop": App.expand_desktop,
    "metainfo": App.expand_metainfo,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="desktop-l10n",
        description=_("Add Fluent translations to a .desktop or metainfo template"),
    )
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("format", choices=sorted(EXPANDERS),
                        help=_("template format"))
    parser.add_argument("template", help=_("template file to expand"))
    parser.add_argument("--i18n-dir",
                        default=os.environ.get(ENV_I18N_DIR, DEFAULT_I18N_DIR),
                        help=_("directory holding one subdirectory per language"))
    parser.add_argument("--domain", default=os.environ.get(ENV_DOMAIN),
                        required=ENV_DOMAIN not in os.environ,
                        help=_("catalog name, loaded from <lang>/<domain>.ftl"))
    parser.add_argument("--name", required=True,
                        help=_("message id of the application name"))
    parser.add_argument("--comment", help=_("message id of the comment / summary"))
    parser.add_argument("--keywords", help=_("message id of the ;-separated keywords"))
    parser.add_argument("-o", "--output",
                        help=_("write to this file instead of stdout"))
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true",
                           help=_("log catalog loading details"))
    verbosity.add_argument("-q", "--quiet", action="store_true",
                           help=_("only log errors"))
    return parser


def _setup_logging(verbose: bool, quiet: bool):
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, stream=sys.stderr,
                        format="%(levelname)s: %(message)s")


def run(args) -> str:
    app = App(args.name)
    if args.comment:
        app = app.with_comment(args.comment)
    if args.keywords:
        app = app.with_keywords(args.keywords)
    registry = load_registry(args.i18n_dir, args.domain)
    return EXPANDERS[args.format](app, args.template, registry)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose, args.quiet)
    try:
        text = run(args)
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as out:
                out.write(text)
        else:
            sys.stdout.write(text)
    except (L10nError, OSError) as e:
        print(_("error: {error}").format(error=e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
