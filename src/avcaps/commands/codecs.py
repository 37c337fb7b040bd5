"""avcaps codecs / decoders / encoders — codec listings.

``codecs`` shows one row per codec identity. ``decoders`` and
``encoders`` show every implementation; given a NAME they show only the
implementation of that name, or all implementations of the codec of
that name.
"""

import argparse

from avcaps.catalog import load_catalog
from avcaps.descriptors import (
    find_implementations, list_implementations, summarize_descriptors,
)
from avcaps.output import (
    CODEC_LEGEND, get_output, implementation_legend, print_error,
    render_codec_summary, render_implementation_row,
)


def register(subparsers, parents):
    """Register the codec listing subcommands."""
    p = subparsers.add_parser(
        "codecs",
        parents=parents,
        help="List codecs known to this build",
        description="List codecs with decoding/encoding support and properties.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.set_defaults(func=run_codecs)

    for name, encoder in (("decoders", False), ("encoders", True)):
        p = subparsers.add_parser(
            name,
            parents=parents,
            help=f"List available {name}",
            description=(
                f"List available {name}. With NAME, show only the {name[:-1]}\n"
                f"of that name, or every {name[:-1]} for the codec of that name."
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        p.add_argument("name", nargs="?", metavar="NAME",
                       help=f"{name[:-1].capitalize()} or codec name")
        p.set_defaults(func=run_implementations, encoder=encoder)


def run_codecs(args):
    """Print the codec listing."""
    catalog = load_catalog(args.catalog)
    print(CODEC_LEGEND)
    for summary in summarize_descriptors(catalog.descriptors, catalog.codecs):
        print(render_codec_summary(summary))
    return 0


def run_implementations(args):
    """Print the encoder or decoder listing."""
    catalog = load_catalog(args.catalog)
    side = "encoders" if args.encoder else "decoders"

    if args.name:
        rows = find_implementations(args.name, catalog.descriptors,
                                    catalog.codecs, args.encoder)
        if not rows:
            if catalog.descriptors.find(args.name) is not None:
                print_error(f"Codec '{args.name}' is known, but no {side} "
                            f"for it are available.")
            else:
                print_error(f"Codec '{args.name}' is not recognized.")
            return 1
    else:
        rows = list(list_implementations(catalog.descriptors, catalog.codecs,
                                         args.encoder))

    get_output().debug("{count} {side} listed", count=len(rows), side=side)
    print(implementation_legend(args.encoder))
    for row in rows:
        print(render_implementation_row(row))
    return 0
