"""multilog dump — print a configuration document as multilog reads it.

Unknown keys are dropped and missing keys filled in, so the output shows
exactly what init() would work from. A document that cannot be read
falls back to the defaults, with a warning on stderr.
"""

import argparse

from multilog.writer import MultiLoggerWriter


def register(subparsers, parents):
    """Register the 'dump' subcommand."""
    p = subparsers.add_parser(
        "dump",
        parents=parents,
        help="Print a configuration document after normalization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("config", metavar="CONFIG", help="Configuration document")
    p.set_defaults(func=run)


def run(args):
    mlw = MultiLoggerWriter(args.config)
    if args.app_name:
        mlw.app_name(args.app_name)
    if args.log_dir:
        mlw.log_dir(args.log_dir)
    print(mlw.get_config(), end="")
    return 0
