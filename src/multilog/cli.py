"""Main CLI entry point for multilog.

Two-pass argument parsing:
  1. First pass: extract global flags (--verbose, --quiet, --show)
  2. Second pass: dispatch to the subcommand with shared parent args

Global flags can appear before OR after the subcommand:
  multilog -v check app.json      # works
  multilog check app.json -v      # also works

Subcommands self-register via the register(subparsers, parents) convention.
"""

import argparse
import sys

from multilog._version import BASE_VERSION, VERSION


# ---------------------------------------------------------------------------
# Global flags (can precede the subcommand)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--verbose": {"aliases": ["-v"], "action": "count", "default": 0,
                  "help": "Increase diagnostic verbosity (-v, -vv, -vvv)"},
    "--quiet": {"aliases": ["-Q"], "action": "count", "default": 0,
                "help": "Decrease diagnostic verbosity (-Q ... -QQQQ=silent)"},
    "--show": {"nargs": "?", "action": "append", "metavar": "CHANNEL[:LEVEL]",
               "help": "Pin a diagnostic channel's level (bare --show lists channels)"},
}


def _extract_global_flags(argv):
    """Pull global flags from anywhere in argv.

    Returns (global_namespace, remaining_argv).
    """
    global_parser = argparse.ArgumentParser(add_help=False)
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        global_parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    return global_parser.parse_known_args(argv)


# ---------------------------------------------------------------------------
# Shared parent parser (inherited by all subcommands via parents=[])
# ---------------------------------------------------------------------------
def _build_common_parser():
    """Flags every subcommand accepts; they override the document."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--app-name", metavar="NAME",
                        help="Application name stored in the configuration")
    common.add_argument("--log-dir", metavar="PATH",
                        help="Log directory (relative names resolve under the app directory)")
    return common


def _discover_commands():
    """Import and return all command modules."""
    from multilog.commands import check, defaults, dump
    return [defaults, dump, check]


def _build_parser(commands, common_parser):
    """Build the main argparse parser with subcommand dispatch."""
    parser = argparse.ArgumentParser(
        prog="multilog",
        description="multilog: System, Access and Error channel logging",
        epilog=(
            "Run 'multilog <command> --help' for details on a specific command.\n"
            "\n"
            "Global flags (--verbose, --quiet, --show) can appear\n"
            "before or after the subcommand."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"multilog {BASE_VERSION} ({VERSION})",
    )

    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )
    for cmd_module in commands:
        cmd_module.register(subparsers, parents=[common_parser])

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for the multilog CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success).
    """
    if argv is None:
        argv = sys.argv[1:]

    global_args, remaining = _extract_global_flags(argv)

    if global_args.show and None in global_args.show:
        from multilog.diagnostics import format_channel_list
        print(format_channel_list())
        return 0

    from multilog.diagnostics import init_diagnostics
    verbosity = (global_args.verbose or 0) - (global_args.quiet or 0)
    channels = [s for s in (global_args.show or []) if s is not None]
    try:
        init_diagnostics(verbosity=verbosity, channels=channels)
    except ValueError as e:
        print(f"multilog: invalid --show value: {e}", file=sys.stderr)
        return 2

    common_parser = _build_common_parser()
    parser = _build_parser(_discover_commands(), common_parser)

    if not remaining:
        parser.print_help()
        return 0

    args = parser.parse_args(remaining)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return args.func(args) or 0
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
