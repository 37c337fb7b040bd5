"""Main CLI entry point for avcaps.

Implements a Docker-style two-pass argument parser:
  1. First pass: extract global flags (--loglevel, --report, --cpuflags, ...)
  2. Second pass: dispatch to subcommand with shared parent args

Global flags can appear before OR after the subcommand:
  avcaps --loglevel debug codecs      # works
  avcaps codecs -v +level+verbose     # also works

Diagnostics are configured before any subcommand runs: log level
first, then the report file (so the report threshold sees the final
level), then CPU options.

Subcommands self-register via register(subparsers, parents) convention.
"""

import argparse
import sys

from avcaps._version import __app_name__, version_banner
from avcaps.catalog import CatalogError
from avcaps.config import report_spec_from_env, resolve_config
from avcaps.cpuflags import set_cpucount, set_cpuflags
from avcaps.lib.log_lib import (
    InvalidDirective, ReportOpenFailed, get_output, init_output, init_report,
    parse_report_spec,
)
from avcaps.output import print_error


# ---------------------------------------------------------------------------
# Global flags (Docker-style: can precede the subcommand)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--loglevel": {"aliases": ["-v"], "metavar": "DIRECTIVE", "default": None,
                   "help": "Log flags and level, e.g. 'debug', '+level+verbose'"},
    "--report": {"action": "store_true", "default": None,
                 "help": "Write a diagnostic report file (%%p-%%t.log)"},
    "--cpuflags": {"metavar": "DIRECTIVE", "default": None,
                   "help": "Force CPU flags, e.g. --cpuflags=-avx2 or sse2+sse3"},
    "--cpucount": {"metavar": "N", "default": None,
                   "help": "Force the CPU count (-1 = auto)"},
    "--catalog": {"metavar": "PATH", "default": None,
                  "help": "Provider catalog JSON (default: built-in)"},
    "--config": {"metavar": "PATH", "default": None,
                 "help": "Path to config file (default: ~/.avcaps/config.json)"},
}


def _add_global_flags(parser):
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        parser.add_argument(flag, *kwargs.get("aliases", []), **kw)


def _extract_global_flags(argv):
    """Two-pass parse: pull global flags from anywhere in argv.

    Returns (global_namespace, remaining_argv).
    """
    global_parser = argparse.ArgumentParser(add_help=False)
    _add_global_flags(global_parser)
    global_args, remaining = global_parser.parse_known_args(argv)
    return global_args, remaining


# ---------------------------------------------------------------------------
# Shared parent parser (inherited by all subcommands via parents=[])
# ---------------------------------------------------------------------------
def _build_common_parser():
    """Build the shared argument parser inherited by every subcommand.

    Listing commands currently share no options beyond the global ones;
    the parent parser keeps the registration convention uniform.
    """
    return argparse.ArgumentParser(add_help=False)


# ---------------------------------------------------------------------------
# Subcommand discovery and registration
# ---------------------------------------------------------------------------
def _discover_commands():
    """Import and return all command modules.

    Each module in avcaps.commands must export:
      register(subparsers, parents): add its subcommands to the subparser
    and set func=<callable(args)> on each subcommand.
    """
    from avcaps.commands import codecs, formats, levels
    return [formats, codecs, levels]


def _build_parser(commands, common_parser):
    """Build the main argparse parser with subcommand dispatch."""
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="avcaps — media capability and diagnostics inspector",
        epilog=(
            "Run 'avcaps <command> --help' for details on a specific command.\n"
            "\n"
            "Global flags (--loglevel, --report, --cpuflags, --catalog, ...)\n"
            "can appear before or after the subcommand. The report can also\n"
            "be enabled with AVCAPS_REPORT=file=<template>:level=<n>."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=version_banner(),
    )

    # Add global flags to main parser too (for --help display)
    _add_global_flags(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # Let each command register itself
    for cmd_module in commands:
        cmd_module.register(subparsers, parents=[common_parser])

    return parser


# ---------------------------------------------------------------------------
# Diagnostics setup
# ---------------------------------------------------------------------------
def _start_report(setting, argv):
    """Activate the report file if the environment or config asks for one.

    A report that cannot be opened is logged and otherwise ignored.

    Raises:
        InvalidDirective: if the report specification is malformed
    """
    env_spec = report_spec_from_env()
    if env_spec is None and not setting:
        return None
    spec = env_spec if env_spec is not None else setting
    template, level = (None, None)
    if isinstance(spec, str):
        template, level = parse_report_spec(spec)

    report = init_report(get_output())
    try:
        report.activate(template, level, argv=[__app_name__] + list(argv))
    except ReportOpenFailed:
        pass  # already logged at error level; carry on without a report
    return report


def setup_diagnostics(cfg, argv):
    """Apply log level, report and CPU options from resolved config.

    Returns an exit code: 0 on success, 1 on invalid settings.
    """
    try:
        init_output(loglevel=cfg.get("loglevel"))
    except InvalidDirective as e:
        init_output()
        print_error(f"{e}. Run '{__app_name__} levels' for valid names.")
        return 1

    try:
        _start_report(cfg.get("report"), argv)
        if cfg.get("cpuflags"):
            set_cpuflags(cfg["cpuflags"])
        if cfg.get("cpucount") is not None:
            set_cpucount(str(cfg["cpucount"]))
    except InvalidDirective as e:
        print_error(str(e))
        return 1
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for avcaps CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success).
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pass 1: extract global flags from anywhere in the arg list
    global_args, remaining = _extract_global_flags(argv)
    cfg = resolve_config(global_args)

    code = setup_diagnostics(cfg, argv)
    if code:
        return code

    # Pass 2: parse subcommand + shared/specific args
    common_parser = _build_common_parser()
    commands = _discover_commands()
    parser = _build_parser(commands, common_parser)

    # If no args at all, print help
    if not remaining:
        parser.print_help()
        return 0

    args = parser.parse_args(remaining)

    # If subcommand selected but no handler, print help
    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    # Merge resolved config into the namespace for convenience
    for key, value in cfg.items():
        setattr(args, key, value)

    # Dispatch
    try:
        return args.func(args) or 0
    except (CatalogError, OSError) as e:
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    finally:
        get_output().flush_repeats()


if __name__ == "__main__":
    sys.exit(main())
