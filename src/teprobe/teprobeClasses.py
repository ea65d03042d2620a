from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple


class TeprobeError(Exception):
    """Base class for errors raised while reading teprobe inputs."""


# Semantic coordinates: 0-based, half-open [start, end)
@dataclass(frozen=True)
class GenomicInterval:
    __slots__ = ('chrom', 'start', 'end', 'strand')
    chrom: str
    start: int
    end: int
    strand: str

    def overlaps(self, other: GenomicInterval) -> bool:
        return (
            self.chrom == other.chrom
            and self.start < other.end
            and other.start < self.end
        )

    def __str__(self) -> str:
        return f"{self.chrom}:{self.start}-{self.end}({self.strand})"


@dataclass(frozen=True)
class Annotation:
    """
    A named interval made of one or more blocks (exons for a gene record).
    Blocks are absolute (start, end) pairs, sorted and inside the interval.
    """
    interval: GenomicInterval
    name: str
    blocks: Tuple[Tuple[int, int], ...] = ()

    def __post_init__(self):
        if not self.blocks:
            object.__setattr__(self, "blocks", ((self.interval.start, self.interval.end),))

    @property
    def chrom(self) -> str:
        return self.interval.chrom

    @property
    def start(self) -> int:
        return self.interval.start

    @property
    def end(self) -> int:
        return self.interval.end

    def introns(self) -> List[Annotation]:
        """Gaps between consecutive blocks, each as its own single-block annotation."""
        out: List[Annotation] = []
        for (_s1, e1), (s2, _e2) in zip(self.blocks, self.blocks[1:]):
            if s2 > e1:
                iv = GenomicInterval(self.chrom, e1, s2, self.interval.strand)
                out.append(Annotation(iv, self.name))
        return out

    def body_overlaps(self, other: Annotation) -> bool:
        # Block against block, intronic gaps excluded on both sides
        if self.chrom != other.chrom:
            return False
        for s1, e1 in self.blocks:
            for s2, e2 in other.blocks:
                if s1 < e2 and s2 < e1:
                    return True
        return False

    def body_overlaps_interval(self, iv: GenomicInterval) -> bool:
        if self.chrom != iv.chrom:
            return False
        return any(s < iv.end and iv.start < e for s, e in self.blocks)


@dataclass(frozen=True)
class AlignmentRecord:
    name: str
    interval: GenomicInterval


@dataclass
class Position:
    """One classified alignment location of a probe."""
    interval: GenomicInterval
    repeat_names: List[str] = field(default_factory=list)
    gene_no_repeats_names: List[str] = field(default_factory=list)
    gene_exon_overlaps_repeat_names: List[str] = field(default_factory=list)
    gene_intron_overlaps_repeat_names: List[str] = field(default_factory=list)


# RAP probe and every location it aligns to
@dataclass
class Probe:
    name: str
    positions: List[Position] = field(default_factory=list)

    def add_position(self, position: Position) -> None:
        self.positions.append(position)
