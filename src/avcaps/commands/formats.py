"""avcaps formats / muxers / demuxers / devices — container format listings.

All four listings are one sorted merge of the muxer and demuxer
registries; they differ only in which side is scanned and whether
non-device entries are visible.
"""

import argparse

from avcaps.catalog import load_catalog
from avcaps.merge import ShowMode, list_formats
from avcaps.output import format_legend, render_format_row


# name → (help, device_only, mode)
LISTINGS = {
    "formats": ("List available muxers and demuxers", False, ShowMode.DEFAULT),
    "muxers": ("List available muxers", False, ShowMode.MUXERS),
    "demuxers": ("List available demuxers", False, ShowMode.DEMUXERS),
    "devices": ("List available input and output devices", True, ShowMode.DEFAULT),
}


def register(subparsers, parents):
    """Register the format listing subcommands."""
    for name, (help_text, device_only, mode) in LISTINGS.items():
        p = subparsers.add_parser(
            name,
            parents=parents,
            help=help_text,
            description=help_text + ".",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        p.set_defaults(func=run, device_only=device_only, show_mode=mode)


def run(args):
    """Print the merged listing selected by the subcommand."""
    catalog = load_catalog(args.catalog)
    print(format_legend(args.device_only))
    for row in list_formats(catalog.demuxers, catalog.muxers,
                            device_only=args.device_only, mode=args.show_mode):
        print(render_format_row(row, args.device_only))
    return 0
