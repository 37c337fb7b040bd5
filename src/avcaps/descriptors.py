"""Canonical codec descriptors, sorted and matched to implementations.

One codec identity (say h264) may be implemented by several encoders
and decoders with their own names (libx264, h264_vaapi, ...). The codec
listing shows one row per identity, ordered by (media type, name), with
D/E presence columns and the implementation names that differ from the
codec name.
"""

from dataclasses import dataclass, field
from typing import Iterator, List

from avcaps.lib.log_lib import trace
from avcaps.registry import (
    CanonicalDescriptor, ListDescriptorDomain, ListRegistry, RegistryEntry,
)


class DescriptorDomainError(RuntimeError):
    """A descriptor domain yielded a different number of entries than it counted."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"descriptor domain yielded {actual} entries, expected {expected}")


@dataclass
class CodecSummary:
    """One row of the codec listing.

    The alias lists hold the implementation names on that side that
    differ from the codec name, in registry order.
    """
    descriptor: CanonicalDescriptor
    decodable: bool = False
    encodable: bool = False
    decoder_aliases: List[str] = field(default_factory=list)
    encoder_aliases: List[str] = field(default_factory=list)


@dataclass
class ImplementationRow:
    """One row of the encoder or decoder listing."""
    entry: RegistryEntry
    descriptor: CanonicalDescriptor

    @property
    def renamed(self) -> bool:
        return self.entry.name != self.descriptor.name


def descriptor_sort_key(desc: CanonicalDescriptor):
    return (desc.media_type.sort_rank, desc.name)


@trace
def get_descriptors_sorted(domain: ListDescriptorDomain) -> List[CanonicalDescriptor]:
    """Materialize the descriptor domain and sort by (media type, name).

    Raises:
        DescriptorDomainError: if the domain's count() disagrees with
            what its cursor yields
    """
    count = domain.count()
    descriptors: List[CanonicalDescriptor] = []
    domain.reset()
    while True:
        desc = domain.next()
        if desc is None:
            break
        descriptors.append(desc)
    if len(descriptors) != count:
        raise DescriptorDomainError(count, len(descriptors))
    descriptors.sort(key=descriptor_sort_key)
    return descriptors


def iter_implementors(identity: int, registry: ListRegistry,
                      encoder: bool) -> Iterator[RegistryEntry]:
    """Forward scan for implementations of one identity on one side."""
    registry.reset()
    while True:
        entry = registry.next()
        if entry is None:
            return
        if entry.codec_id != identity:
            continue
        if entry.is_encoder if encoder else entry.is_decoder:
            yield entry


def _side(desc: CanonicalDescriptor, registry: ListRegistry, encoder: bool):
    names = [entry.name for entry in iter_implementors(desc.identity, registry, encoder)]
    return bool(names), [name for name in names if name != desc.name]


def summarize_descriptors(domain: ListDescriptorDomain,
                          implementors: ListRegistry) -> Iterator[CodecSummary]:
    """Yield one CodecSummary per non-deprecated descriptor, sorted."""
    for desc in get_descriptors_sorted(domain):
        if desc.deprecated:
            continue
        decodable, decoder_aliases = _side(desc, implementors, encoder=False)
        encodable, encoder_aliases = _side(desc, implementors, encoder=True)
        yield CodecSummary(
            descriptor=desc,
            decodable=decodable,
            encodable=encodable,
            decoder_aliases=decoder_aliases,
            encoder_aliases=encoder_aliases,
        )


def list_implementations(domain: ListDescriptorDomain, implementors: ListRegistry,
                         encoder: bool) -> Iterator[ImplementationRow]:
    """Yield every encoder (or decoder) grouped by sorted descriptor."""
    for desc in get_descriptors_sorted(domain):
        if desc.deprecated:
            continue
        for entry in iter_implementors(desc.identity, implementors, encoder):
            yield ImplementationRow(entry=entry, descriptor=desc)


def find_implementations(name: str, domain: ListDescriptorDomain,
                         implementors: ListRegistry,
                         encoder: bool) -> List[ImplementationRow]:
    """Look up implementations by implementation name or codec name.

    An exact implementation name wins; otherwise every implementation of
    the codec with that name is returned. Unknown names give [], and an
    implementation whose codec has no descriptor is skipped.
    """
    descriptors = {d.identity: d for d in get_descriptors_sorted(domain)}
    for entry in implementors:
        if entry.name != name or not (entry.is_encoder if encoder else entry.is_decoder):
            continue
        desc = descriptors.get(entry.codec_id)
        if desc is not None:
            return [ImplementationRow(entry=entry, descriptor=desc)]
    desc = domain.find(name)
    if desc is None:
        return []
    return [ImplementationRow(entry=entry, descriptor=desc)
            for entry in iter_implementors(desc.identity, implementors, encoder)]
