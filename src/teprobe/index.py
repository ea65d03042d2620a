from __future__ import annotations
from itertools import count
from typing import Dict, Iterator, List

from intervaltree import IntervalTree

from .teprobeClasses import Annotation, GenomicInterval


class CoordinateIndex:
    """
    Annotations indexed by chromosome in one IntervalTree each.

    Tree entries span the annotation's full interval and carry
    (insertion serial, annotation) so duplicate records stay distinct and
    query results come back in insertion order.
    """

    def __init__(self):
        self._trees: Dict[str, IntervalTree] = {}
        self._serial = count()
        self._size = 0

    def add(self, annotation: Annotation) -> None:
        tree = self._trees.get(annotation.chrom)
        if tree is None:
            tree = self._trees[annotation.chrom] = IntervalTree()
        tree.addi(annotation.start, annotation.end, (next(self._serial), annotation))
        self._size += 1

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Annotation]:
        entries = [iv.data for tree in self._trees.values() for iv in tree]
        entries.sort(key=lambda x: x[0])
        return (a for _, a in entries)

    @property
    def chromosomes(self) -> List[str]:
        return sorted(self._trees)

    def _query(self, chrom: str, start: int, end: int) -> List[Annotation]:
        tree = self._trees.get(chrom)
        if tree is None or end <= start:
            return []
        hits = sorted((iv.data for iv in tree.overlap(start, end)), key=lambda x: x[0])
        return [a for _, a in hits]

    def overlappers(self, interval: GenomicInterval) -> List[Annotation]:
        """Annotations whose full span overlaps the interval."""
        return self._query(interval.chrom, interval.start, interval.end)

    def body_overlappers(self, interval: GenomicInterval) -> List[Annotation]:
        """Annotations with at least one block overlapping the interval."""
        return [a for a in self.overlappers(interval) if a.body_overlaps_interval(interval)]

    def overlaps(self, interval: GenomicInterval) -> bool:
        tree = self._trees.get(interval.chrom)
        if tree is None or interval.end <= interval.start:
            return False
        return tree.overlaps(interval.start, interval.end)

    def overlaps_body(self, annotation: Annotation) -> bool:
        """True if any indexed annotation's blocks overlap the annotation's blocks."""
        for b_start, b_end in annotation.blocks:
            for other in self._query(annotation.chrom, b_start, b_end):
                if other.body_overlaps(annotation):
                    return True
        return False
