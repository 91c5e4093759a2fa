"""Command-line entry point for logex.

Emits one record through the configured templates, for shell scripts and
for checking a config by eye:

  logex info "deploy finished"
  logex -v --tag deploy debug "artifact uploaded"
  logex --show deploy:VERBOSE -vv --tag deploy verbose "chatty detail"

-v lowers the threshold one level per flag, -Q raises it; past ASSERT
nothing is emitted at all. Like any other caller, the CLI checks the
gates itself before logging: the global threshold, plus the tag filter
when --tag is given.
"""

import argparse
import sys

from logex._version import BASE_VERSION, VERSION
from logex.config import configure_from_files
from logex.errors import LogexError
from logex.levels import LogLevel, coerce_level
from logex.manager import init_logger
from logex.sinks import StreamSink


def _build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="logex",
        description="logex — emit a caller-aware log record",
        epilog=(
            "Levels: verbose, debug, info, warn, error, assert.\n"
            "Config is read from --config (default ~/.logex/config.json)\n"
            "and the nearest .logex.json; flags win over both."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"logex {BASE_VERSION} ({VERSION})",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Lower the threshold one level (-v, -vv, ...)")
    parser.add_argument("--quiet", "-Q", action="count", default=0,
                        help="Raise the threshold one level (-Q, -QQ, ...)")
    parser.add_argument("--threshold", metavar="LEVEL", default=None,
                        help="Global threshold (default: from config, else info)")
    parser.add_argument("--show", action="append", metavar="TAG[:LEVEL]",
                        help="Tag filter override (repeatable)")
    parser.add_argument("--config", metavar="PATH", default=None,
                        help="Path to config file (default: ~/.logex/config.json)")
    parser.add_argument("--tag", default=None,
                        help="Tag passed to the tag template")
    parser.add_argument("--stdout", action="store_true", default=False,
                        help="Write records to stdout instead of stderr")
    parser.add_argument("level", help="Record level")
    parser.add_argument("message", nargs="*", help="Message words")
    return parser


def _shift_threshold(threshold, verbose, quiet):
    """Apply -v/-Q counts. Returns None past ASSERT (silent)."""
    rank = int(threshold) - verbose + quiet
    if rank > LogLevel.ASSERT:
        return None
    return LogLevel(max(rank, LogLevel.VERBOSE))


def main(argv=None):
    """Main entry point for the logex CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success, 1 = record failed, 2 = usage/config error).
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = _build_parser()
    args = parser.parse_args(argv)

    manager = init_logger(sink=StreamSink(sys.stdout if args.stdout else None))
    overrides = {}
    if args.threshold is not None:
        overrides["threshold"] = args.threshold
    try:
        config = configure_from_files(manager, config_path=args.config,
                                      **overrides)
        manager.tag_filter.apply_specs(args.show or [])
        level = coerce_level(args.level)
    except ValueError as e:
        print(f"logex: error: {e}", file=sys.stderr)
        return 2

    threshold = _shift_threshold(config.threshold, args.verbose, args.quiet)
    if threshold is None:
        return 0
    manager.set_threshold(threshold)

    if not manager.is_loggable(level):
        return 0
    if args.tag is not None and not manager.is_tag_loggable(args.tag, level):
        return 0

    try:
        manager.println(level, args.tag, " ".join(args.message))
    except LogexError as e:
        print(f"logex: error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
