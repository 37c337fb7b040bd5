"""avcaps levels / cpu — diagnostics settings listings."""

import argparse

from avcaps.cpuflags import CPU_FLAGS, get_cpu_count, get_cpu_flags
from avcaps.output import format_level_list


def register(subparsers, parents):
    """Register the 'levels' and 'cpu' subcommands."""
    p = subparsers.add_parser(
        "levels",
        parents=parents,
        help="List log level names and log flags",
        description=(
            "List the symbolic log levels and flags accepted by --loglevel.\n"
            "\n"
            "Examples:\n"
            "  --loglevel debug           level only\n"
            "  --loglevel +level+verbose  add [level] prefixes, level verbose\n"
            "  --loglevel repeat+info     exactly the repeat flag, level info\n"
            "  --loglevel -8              numeric level"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.set_defaults(func=run_levels)

    p = subparsers.add_parser(
        "cpu",
        parents=parents,
        help="Show CPU flags and thread count in effect",
        description="Show CPU flags (after --cpuflags) and the CPU count.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.set_defaults(func=run_cpu)


def run_levels(args):
    """Print level names and log flags."""
    print(format_level_list())
    return 0


def run_cpu(args):
    """Print every known CPU flag with its state."""
    mask = get_cpu_flags()
    print("CPU flags:")
    for name, bit in CPU_FLAGS:
        print(f"  {'+' if mask & bit else '-'}{name}")
    print(f"CPU count: {get_cpu_count()}")
    return 0
