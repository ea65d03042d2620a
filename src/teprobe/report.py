from __future__ import annotations
from collections import Counter
from typing import Callable, Dict, Iterable, Iterator, List, TextIO
import sys

from .teprobeClasses import Position, Probe

HEADER = (
    "NAME\tREPEATS\tGENES_NO_REPEATS\t"
    "GENES_EXONS_WITH_REPEATS\tGENES_INTRONS_WITH_REPEATS"
)


class ProbeAggregator:
    """Probe name -> Probe, filled one Position at a time."""

    def __init__(self):
        self._probes: Dict[str, Probe] = {}

    def add_position(self, name: str, position: Position) -> Probe:
        probe = self._probes.get(name)
        if probe is None:
            probe = self._probes[name] = Probe(name)
        probe.add_position(position)
        return probe

    def __len__(self) -> int:
        return len(self._probes)

    def __contains__(self, name: str) -> bool:
        return name in self._probes

    def __iter__(self) -> Iterator[Probe]:
        # Sorted by name so reports are reproducible
        for name in sorted(self._probes):
            yield self._probes[name]

    def for_each_probe(self, fn: Callable[[Probe], None]) -> None:
        for probe in self:
            fn(probe)


def count_names(name_lists: Iterable[List[str]]) -> Counter:
    counts: Counter = Counter()
    for names in name_lists:
        counts.update(names)
    return counts


def format_field(counts: Counter) -> str:
    """'count:name;count:name' in first-seen order, or '.' when empty."""
    parts = [f"{n}:{name}" for name, n in counts.items() if n > 0]
    if not parts:
        return "."
    return ";".join(parts)


def format_probe(probe: Probe) -> str:
    positions = probe.positions
    fields = [
        probe.name,
        format_field(count_names(p.repeat_names for p in positions)),
        format_field(count_names(p.gene_no_repeats_names for p in positions)),
        format_field(count_names(p.gene_exon_overlaps_repeat_names for p in positions)),
        format_field(count_names(p.gene_intron_overlaps_repeat_names for p in positions)),
    ]
    return "\t".join(fields)


def write_report(probes: ProbeAggregator, out: TextIO | None = None) -> int:
    """Write header and one row per probe; returns the number of rows."""
    fh = out if out is not None else sys.stdout
    fh.write(HEADER + "\n")
    rows = 0
    for probe in probes:
        fh.write(format_probe(probe) + "\n")
        rows += 1
    return rows
