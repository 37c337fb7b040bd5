"""Output formatting utilities for avcaps.

Listings go to stdout; diagnostics go through the OutputManager. The
row formatters here are the render callbacks for the merge enumerator
and the descriptor sorter: they take one fully computed record and
return its text line.
"""

from avcaps.lib.log_lib import get_output
from avcaps.lib.log_lib import levels
from avcaps.merge import MergedRow
from avcaps.descriptors import CodecSummary, ImplementationRow
from avcaps.registry import CodecCaps, CodecProps


def print_error(msg):
    """Print an error message to stderr.

    Routes through OutputManager.error() so it also reaches the report.
    """
    get_output().error(f"ERROR: {msg}")


# ---------------------------------------------------------------------------
# Formats and devices
# ---------------------------------------------------------------------------
def format_legend(device_only=False):
    """Header block for the format/device listing."""
    placeholder = "" if device_only else "."
    lines = [
        f"{'Devices' if device_only else 'Formats'}:",
        f" D.{placeholder} = Demuxing supported",
        f" .E{placeholder} = Muxing supported",
    ]
    if not device_only:
        lines.append(" ..d = Is a device")
    lines.append(" ---")
    return "\n".join(lines)


def render_format_row(row: MergedRow, device_only=False):
    """One line of the format/device listing."""
    device = "" if device_only else ("d" if row.is_device else " ")
    return (f" {'D' if row.supports_input else ' '}"
            f"{'E' if row.supports_output else ' '}"
            f"{device} {row.name:<15} {row.description or ' '}")


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------
CODEC_LEGEND = "\n".join([
    "Codecs:",
    " D..... = Decoding supported",
    " .E.... = Encoding supported",
    " ..V... = Video codec",
    " ..A... = Audio codec",
    " ..S... = Subtitle codec",
    " ..D... = Data codec",
    " ..T... = Attachment codec",
    " ...I.. = Intra frame-only codec",
    " ....L. = Lossy compression",
    " .....S = Lossless compression",
    " -------",
])


def render_codec_summary(summary: CodecSummary):
    """One line of the codec listing."""
    desc = summary.descriptor
    props = desc.properties
    line = (f" {'D' if summary.decodable else '.'}"
            f"{'E' if summary.encodable else '.'}"
            f"{desc.media_type.char}"
            f"{'I' if props & CodecProps.INTRA_ONLY else '.'}"
            f"{'L' if props & CodecProps.LOSSY else '.'}"
            f"{'S' if props & CodecProps.LOSSLESS else '.'}"
            f" {desc.name:<20} {desc.long_name}")
    if summary.decoder_aliases:
        line += f" (decoders: {' '.join(summary.decoder_aliases)})"
    if summary.encoder_aliases:
        line += f" (encoders: {' '.join(summary.encoder_aliases)})"
    return line


def implementation_legend(encoder):
    """Header block for the encoder/decoder listing."""
    return "\n".join([
        f"{'Encoders' if encoder else 'Decoders'}:",
        " V..... = Video",
        " A..... = Audio",
        " S..... = Subtitle",
        " .F.... = Frame-level multithreading",
        " ..S... = Slice-level multithreading",
        " ...X.. = Codec is experimental",
        " ....B. = Supports draw_horiz_band",
        " .....D = Supports direct rendering method 1",
        " ------",
    ])


def render_implementation_row(row: ImplementationRow):
    """One line of the encoder/decoder listing."""
    caps = row.entry.capability_flags
    line = (f" {row.descriptor.media_type.char}"
            f"{'F' if caps & CodecCaps.FRAME_THREADS else '.'}"
            f"{'S' if caps & CodecCaps.SLICE_THREADS else '.'}"
            f"{'X' if caps & CodecCaps.EXPERIMENTAL else '.'}"
            f"{'B' if caps & CodecCaps.DRAW_HORIZ_BAND else '.'}"
            f"{'D' if caps & CodecCaps.DR1 else '.'}"
            f" {row.entry.name:<20} {row.entry.long_name}")
    if row.renamed:
        line += f" (codec {row.descriptor.name})"
    return line


# ---------------------------------------------------------------------------
# Log levels
# ---------------------------------------------------------------------------
def format_level_list():
    """Symbolic log levels and log flags for the 'levels' listing."""
    lines = ["Log levels:"]
    for name, value in levels.LEVEL_NAMES:
        lines.append(f"  {name:<8} {value:>3}")
    lines.append("Log flags:")
    for name, _ in levels.LOG_FLAGS:
        lines.append(f"  {name}")
    return "\n".join(lines)
