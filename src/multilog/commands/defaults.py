"""multilog defaults — write the baseline configuration document.

Prints the document to stdout, or writes it with ``--output``. The
result can be edited and passed to ``multilog check``.
"""

import argparse

from multilog.output import print_error, print_ok
from multilog.writer import MultiLoggerWriter


def register(subparsers, parents):
    """Register the 'defaults' subcommand."""
    p = subparsers.add_parser(
        "defaults",
        parents=parents,
        help="Print or save the default configuration document",
        description=(
            "Emit the baseline configuration: System and Error to files,\n"
            "Access disabled, console and syslog off, standard headers."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--output", "-o", metavar="PATH",
                   help="Write the document to PATH instead of stdout")
    p.set_defaults(func=run)


def build(args):
    """Default MultiLoggerWriter with --app-name/--log-dir applied."""
    mlw = MultiLoggerWriter().defaults()
    if args.app_name:
        mlw.app_name(args.app_name)
    if args.log_dir:
        mlw.log_dir(args.log_dir)
    return mlw


def run(args):
    mlw = build(args)
    if not args.output:
        print(mlw.get_config(), end="")
        return 0
    try:
        target = mlw.save_config(args.output)
    except OSError as e:
        print_error(f"cannot write {args.output}: {e}")
        return 1
    print_ok(f"wrote {target}")
    return 0
