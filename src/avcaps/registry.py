"""Provider registries and canonical codec descriptors.

Registries are owned by the capability providers, not by avcaps. The
introspection code only walks them forward from the start, which is why
the interface is a resettable cursor rather than a sequence:

    registry.reset()
    while (entry := registry.next()) is not None:
        ...

``ListRegistry`` and ``ListDescriptorDomain`` back these cursors with a
plain list; the built-in catalog (``avcaps.catalog``) produces them.
"""

import enum
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence


DEPRECATED_MARKER = "_deprecated"


class Category(enum.IntEnum):
    """What kind of provider an entry is."""
    NONE = 0
    MUXER = 1
    DEMUXER = 2
    ENCODER = 3
    DECODER = 4
    DEVICE_VIDEO_OUTPUT = 40
    DEVICE_VIDEO_INPUT = 41
    DEVICE_AUDIO_OUTPUT = 42
    DEVICE_AUDIO_INPUT = 43
    DEVICE_OUTPUT = 44
    DEVICE_INPUT = 45

    @property
    def is_device(self) -> bool:
        return self.value >= Category.DEVICE_VIDEO_OUTPUT


class MediaType(enum.IntEnum):
    """Media type of a codec.

    Values are the stable wire numbers; listings order by sort_rank.
    """
    UNKNOWN = -1
    VIDEO = 0
    AUDIO = 1
    DATA = 2
    SUBTITLE = 3
    ATTACHMENT = 4

    @property
    def char(self) -> str:
        return _MEDIA_TYPE_CHARS[self]

    @property
    def sort_rank(self) -> int:
        """Position in codec listings: unknown, audio, video, then the rest."""
        return _MEDIA_TYPE_ORDER.index(self)


_MEDIA_TYPE_CHARS = {
    MediaType.VIDEO: 'V',
    MediaType.AUDIO: 'A',
    MediaType.DATA: 'D',
    MediaType.SUBTITLE: 'S',
    MediaType.ATTACHMENT: 'T',
    MediaType.UNKNOWN: '?',
}

_MEDIA_TYPE_ORDER = (
    MediaType.UNKNOWN,
    MediaType.AUDIO,
    MediaType.VIDEO,
    MediaType.DATA,
    MediaType.SUBTITLE,
    MediaType.ATTACHMENT,
)


class CodecProps(enum.IntFlag):
    """Properties of a codec identity."""
    NONE = 0
    INTRA_ONLY = 0x1
    LOSSY = 0x2
    LOSSLESS = 0x4


class CodecCaps(enum.IntFlag):
    """Capabilities of one concrete encoder or decoder."""
    NONE = 0
    FRAME_THREADS = 0x1
    SLICE_THREADS = 0x2
    EXPERIMENTAL = 0x4
    DRAW_HORIZ_BAND = 0x8
    DR1 = 0x10


@dataclass(frozen=True)
class RegistryEntry:
    """One named entry in a provider registry.

    Attributes:
        name: Unique within its registry
        category: Provider kind, used by device predicates
        capability_flags: Provider-specific bitset
        long_name: Human-readable description
        codec_id: Identity implemented, for encoder/decoder entries
    """
    name: str
    category: Category = Category.NONE
    capability_flags: int = 0
    long_name: str = ""
    codec_id: Optional[int] = None

    @property
    def is_encoder(self) -> bool:
        return self.category == Category.ENCODER

    @property
    def is_decoder(self) -> bool:
        return self.category == Category.DECODER


@dataclass(frozen=True)
class CanonicalDescriptor:
    """Logical codec identity, independent of its implementations."""
    identity: int
    name: str
    media_type: MediaType = MediaType.UNKNOWN
    properties: CodecProps = CodecProps.NONE
    long_name: str = ""

    @property
    def deprecated(self) -> bool:
        return DEPRECATED_MARKER in self.name


class ListRegistry:
    """Forward-only, resettable cursor over a list of entries."""

    def __init__(self, entries: Sequence[RegistryEntry] = ()):
        self._entries: List[RegistryEntry] = list(entries)
        self._pos = 0

    def reset(self) -> None:
        self._pos = 0

    def next(self) -> Optional[RegistryEntry]:
        if self._pos >= len(self._entries):
            return None
        entry = self._entries[self._pos]
        self._pos += 1
        return entry

    def __iter__(self) -> Iterator[RegistryEntry]:
        """Reset, then walk the registry once."""
        self.reset()
        while True:
            entry = self.next()
            if entry is None:
                return
            yield entry

    def __len__(self):
        return len(self._entries)


class ListDescriptorDomain:
    """Single-pass cursor over canonical descriptors."""

    def __init__(self, descriptors: Sequence[CanonicalDescriptor] = ()):
        self._descriptors: List[CanonicalDescriptor] = list(descriptors)
        self._pos = 0

    def count(self) -> int:
        return len(self._descriptors)

    def reset(self) -> None:
        self._pos = 0

    def next(self) -> Optional[CanonicalDescriptor]:
        if self._pos >= len(self._descriptors):
            return None
        desc = self._descriptors[self._pos]
        self._pos += 1
        return desc

    def find(self, name: str) -> Optional[CanonicalDescriptor]:
        for desc in self._descriptors:
            if desc.name == name:
                return desc
        return None
