"""avcaps — media capability and diagnostics inspector.

Lists the codecs, container formats and devices a media build exposes,
and manages the tool's own diagnostics: log level directives, CPU flag
overrides and one-shot report files.
"""

from avcaps._version import __version__, __app_name__

__all__ = ["__version__", "__app_name__"]
