"""multilog check — initialize a configuration and write a probe line.

Restores CONFIG, runs init(), writes one line to each channel and reports
where each channel ended up. ``--save`` writes the configuration back out
after init(), with resolved directories, tags and flag bitmasks.
"""

import argparse

from multilog.options import Channel
from multilog.output import print_error, print_info, print_ok, print_warn
from multilog.sinks import DiscardSink
from multilog.writer import MultiLoggerWriter


def register(subparsers, parents):
    """Register the 'check' subcommand."""
    p = subparsers.add_parser(
        "check",
        parents=parents,
        help="Initialize a configuration and write a probe line per channel",
        description=(
            "Open every sink CONFIG enables, write a probe line to each\n"
            "channel, and report the sinks that actually opened."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("config", metavar="CONFIG", help="Configuration document")
    p.add_argument("--message", "-m", default="multilog check",
                   help="Probe text (default: %(default)s)")
    p.add_argument("--save", metavar="PATH",
                   help="Save the initialized configuration to PATH")
    p.set_defaults(func=run)


def run(args):
    mlw = MultiLoggerWriter(args.config)
    if args.app_name:
        mlw.app_name(args.app_name)
    if args.log_dir:
        mlw.log_dir(args.log_dir)
    mlw.init()

    try:
        for channel in Channel:
            sinks = mlw.writer(channel).sinks
            if all(isinstance(s, DiscardSink) for s in sinks):
                print_warn(f"{channel.value}: no sinks, output discarded")
                continue
            mlw.logger(channel).print(f"{args.message} ({channel.value})")
            print_ok(f"{channel.value}: {', '.join(repr(s) for s in sinks)}")

        if args.save:
            try:
                target = mlw.save_config(args.save)
            except OSError as e:
                print_error(f"cannot write {args.save}: {e}")
                return 1
            print_info(f"saved {target}")
    finally:
        mlw.close()
    return 0
