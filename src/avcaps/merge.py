"""Sorted merge of the muxer and demuxer registries.

The format listing shows every name from both registries exactly once,
in ascending order, with D (demuxing) and E (muxing) columns. The
registries are unsorted and may only be walked forward, so instead of
sorting them the enumerator selects the next name on each pass:

    last = below every name
    loop:
        scan muxers:   smallest name > last  → candidate, E
        scan demuxers: smaller name replaces candidate, D
                       equal name adds D
        no candidate → done
        emit candidate; last = candidate

Each emitted row costs one full scan of both registries.
"""

import enum
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from avcaps.lib.log_lib import trace
from avcaps.registry import ListRegistry, RegistryEntry

Predicate = Callable[[RegistryEntry], bool]


class ShowMode(enum.Enum):
    """Which registries take part in a merge."""
    DEFAULT = "default"
    MUXERS = "muxers"
    DEMUXERS = "demuxers"


@dataclass
class MergedRow:
    """One line of the merged format listing."""
    name: str
    supports_input: bool = False
    supports_output: bool = False
    is_device: bool = False
    description: str = ""


def is_device(entry: RegistryEntry) -> bool:
    """True for input or output device entries."""
    return entry.category.is_device


class _Candidate:
    """Best name found so far in the current pass."""

    def __init__(self):
        self.entry: Optional[RegistryEntry] = None
        self.supports_input = False
        self.supports_output = False
        self.is_device = False

    def offer(self, entry: RegistryEntry, last: Optional[str], device: bool,
              output_side: bool) -> None:
        name = entry.name
        if last is not None and name <= last:
            return
        if self.entry is None or name < self.entry.name:
            self.entry = entry
            self.supports_output = output_side
            self.supports_input = not output_side
            self.is_device = device
        elif name == self.entry.name and not output_side:
            self.supports_input = True
            self.is_device = device

    def to_row(self) -> MergedRow:
        return MergedRow(
            name=self.entry.name,
            supports_input=self.supports_input,
            supports_output=self.supports_output,
            is_device=self.is_device,
            description=self.entry.long_name,
        )


def _scan(registry: ListRegistry, candidate: _Candidate, last: Optional[str],
          predicate: Optional[Predicate], output_side: bool) -> None:
    registry.reset()
    while True:
        entry = registry.next()
        if entry is None:
            return
        if predicate is not None and not predicate(entry):
            continue
        candidate.offer(entry, last, is_device(entry), output_side)


def merge_registries(inputs: ListRegistry, outputs: ListRegistry,
                     predicate: Predicate = None,
                     mode: ShowMode = ShowMode.DEFAULT) -> Iterator[MergedRow]:
    """Yield the union of two registries as strictly ascending rows.

    Args:
        inputs: Input-side registry (demuxers); sets supports_input
        outputs: Output-side registry (muxers); sets supports_output
        predicate: Entries failing it are invisible to the merge
        mode: MUXERS or DEMUXERS skip the other registry entirely

    Yields:
        MergedRow per distinct name, names strictly increasing
    """
    last: Optional[str] = None
    while True:
        candidate = _Candidate()
        if mode != ShowMode.DEMUXERS:
            _scan(outputs, candidate, last, predicate, output_side=True)
        if mode != ShowMode.MUXERS:
            _scan(inputs, candidate, last, predicate, output_side=False)
        if candidate.entry is None:
            return
        row = candidate.to_row()
        last = row.name
        yield row


@trace
def list_formats(inputs: ListRegistry, outputs: ListRegistry,
                 device_only: bool = False,
                 mode: ShowMode = ShowMode.DEFAULT) -> list:
    """Merged format (or device) rows as a list."""
    predicate = is_device if device_only else None
    return list(merge_registries(inputs, outputs, predicate, mode))
