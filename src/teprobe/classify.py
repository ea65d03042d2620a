from __future__ import annotations
from typing import List

from .index import CoordinateIndex
from .teprobeClasses import Annotation, GenomicInterval, Position

GENE_NO_REPEATS = "no_repeats"
GENE_EXON_WITH_REPEAT = "exon"
GENE_INTRON_WITH_REPEAT = "intron"


def _shared_base(a: GenomicInterval, r_block, g_block) -> bool:
    # True if the interval, the repeat block and the gene block share a coordinate
    lo = max(a.start, r_block[0], g_block[0])
    hi = min(a.end, r_block[1], g_block[1])
    return lo < hi


def classify_gene(
    gene: Annotation,
    interval: GenomicInterval,
    local_repeats: List[Annotation],
    repeats: CoordinateIndex,
) -> str:
    """
    Decide which gene category the gene falls into for this alignment.

    local_repeats are the repeats overlapping the alignment interval. When one
    of them also falls on the gene inside the interval, its placement decides
    exon vs intron; otherwise the gene-wide exon-body test decides. Anything
    not on an exon is taken to be intronic.
    """
    if not repeats.overlaps(gene.interval):
        return GENE_NO_REPEATS

    lo = max(interval.start, gene.start)
    hi = min(interval.end, gene.end)
    local = [
        r for r in local_repeats
        if any(s < hi and lo < e for s, e in r.blocks)
    ]
    if local:
        for r in local:
            for r_block in r.blocks:
                for g_block in gene.blocks:
                    if _shared_base(interval, r_block, g_block):
                        return GENE_EXON_WITH_REPEAT
        return GENE_INTRON_WITH_REPEAT

    if repeats.overlaps_body(gene):
        return GENE_EXON_WITH_REPEAT
    return GENE_INTRON_WITH_REPEAT


def classify_position(
    interval: GenomicInterval,
    repeats: CoordinateIndex,
    genes: CoordinateIndex,
) -> Position:
    """Build the Position for one alignment interval."""
    position = Position(interval)
    local_repeats = repeats.overlappers(interval)
    position.repeat_names.extend(r.name for r in local_repeats)

    for gene in genes.overlappers(interval):
        category = classify_gene(gene, interval, local_repeats, repeats)
        if category == GENE_NO_REPEATS:
            position.gene_no_repeats_names.append(gene.name)
        elif category == GENE_EXON_WITH_REPEAT:
            position.gene_exon_overlaps_repeat_names.append(gene.name)
        else:
            position.gene_intron_overlaps_repeat_names.append(gene.name)
    return position
