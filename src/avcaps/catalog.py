"""Provider catalog — the registries avcaps inspects.

A catalog is a JSON document listing muxers, demuxers, codec
descriptors, encoders and decoders. The package ships a built-in
catalog (``avcaps/data/catalog.json``); ``--catalog PATH`` or the
``catalog`` config key points at another one, e.g. a description
generated from a real build.

Schema (all lists optional)::

    {
      "version": 1,
      "muxers":   [{"name": "mp4", "long_name": "...", "category": "device_video_output"}],
      "demuxers": [...same shape...],
      "codecs":   [{"id": 27, "name": "h264", "type": "video",
                    "props": ["lossy"], "long_name": "..."}],
      "encoders": [{"name": "libx264", "codec": "h264", "caps": ["frame_threads"]}],
      "decoders": [...same shape as encoders...]
    }
"""

import json
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path
from typing import Optional

from avcaps.lib.log_lib import get_output
from avcaps.registry import (
    CanonicalDescriptor, Category, CodecCaps, CodecProps, ListDescriptorDomain,
    ListRegistry, MediaType, RegistryEntry,
)


class CatalogError(ValueError):
    """The catalog document is malformed."""


@dataclass
class Catalog:
    """The full set of registries for one build."""
    muxers: ListRegistry
    demuxers: ListRegistry
    descriptors: ListDescriptorDomain
    codecs: ListRegistry
    source: str = "<built-in>"


def _enum_member(enum_cls, value, what, source):
    try:
        return enum_cls[value.upper()]
    except (KeyError, AttributeError):
        raise CatalogError(f"{source}: unknown {what} {value!r}") from None


def _flag_set(enum_cls, values, what, source):
    result = enum_cls.NONE
    for value in values or []:
        result |= _enum_member(enum_cls, value, what, source)
    return result


def _format_entries(items, default_category, source):
    entries = []
    for item in items or []:
        category = default_category
        if item.get("category"):
            category = _enum_member(Category, item["category"], "category", source)
        entries.append(RegistryEntry(
            name=item["name"],
            category=category,
            long_name=item.get("long_name", ""),
        ))
    return entries


def _codec_entries(items, category, ids_by_name, source):
    entries = []
    for item in items or []:
        codec = item["codec"]
        if codec not in ids_by_name:
            raise CatalogError(
                f"{source}: {item['name']!r} implements unknown codec {codec!r}")
        entries.append(RegistryEntry(
            name=item["name"],
            category=category,
            capability_flags=_flag_set(CodecCaps, item.get("caps"), "capability", source),
            long_name=item.get("long_name", ""),
            codec_id=ids_by_name[codec],
        ))
    return entries


def build_catalog(data: dict, source: str = "<built-in>") -> Catalog:
    """Build registries from a parsed catalog document.

    Raises:
        CatalogError: on unknown enum names, missing keys or dangling
            codec references
    """
    try:
        descriptors = [
            CanonicalDescriptor(
                identity=int(item["id"]),
                name=item["name"],
                media_type=_enum_member(MediaType, item.get("type", "unknown"),
                                        "media type", source),
                properties=_flag_set(CodecProps, item.get("props"), "property", source),
                long_name=item.get("long_name", ""),
            )
            for item in data.get("codecs", [])
        ]
        ids_by_name = {d.name: d.identity for d in descriptors}

        codecs = (
            _codec_entries(data.get("encoders"), Category.ENCODER, ids_by_name, source)
            + _codec_entries(data.get("decoders"), Category.DECODER, ids_by_name, source)
        )
        muxers = _format_entries(data.get("muxers"), Category.MUXER, source)
        demuxers = _format_entries(data.get("demuxers"), Category.DEMUXER, source)
    except KeyError as e:
        raise CatalogError(f"{source}: entry is missing required key {e}") from None

    return Catalog(
        muxers=ListRegistry(muxers),
        demuxers=ListRegistry(demuxers),
        descriptors=ListDescriptorDomain(descriptors),
        codecs=ListRegistry(codecs),
        source=source,
    )


def load_catalog(path: Optional[str] = None) -> Catalog:
    """Load a catalog file, or the built-in catalog when path is None.

    Raises:
        CatalogError: if the file is not valid JSON or not a catalog
        OSError: if the file cannot be read
    """
    out = get_output()
    if path is None:
        text = (files("avcaps") / "data" / "catalog.json").read_text(encoding="utf-8")
        source = "<built-in>"
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"{source}: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"{source}: top level must be an object")

    catalog = build_catalog(data, source)
    out.debug("Loaded catalog {src}: {mux} muxers, {demux} demuxers, "
              "{desc} codecs, {impl} implementations",
              src=source, mux=len(catalog.muxers), demux=len(catalog.demuxers),
              desc=catalog.descriptors.count(), impl=len(catalog.codecs))
    return catalog
