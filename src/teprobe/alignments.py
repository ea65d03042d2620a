from __future__ import annotations
from pathlib import Path
from typing import Iterator, Optional
import logging
import bamnostic as bn

from .teprobeClasses import AlignmentRecord, GenomicInterval, TeprobeError

# CIGAR operations that consume the reference: M, D, N, =, X
_REF_CONSUMING = {0, 2, 3, 7, 8}


class AlignmentParseError(TeprobeError, ValueError):
    def __init__(self, path: str | Path, record_no: int, reason: str):
        self.path = str(path)
        self.record_no = record_no
        super().__init__(f"{self.path}, alignment {record_no}: {reason}")


def _get_read_name(aln) -> str:
    # Different libs/files expose different attributes
    for attr in ("query_name", "qname", "read_name"):
        v = getattr(aln, attr, None)
        if v:
            return v
    return ""


def _reference_end(aln, start: int) -> int:
    end = getattr(aln, "reference_end", None)
    if isinstance(end, int) and end > start:
        return end
    span = 0
    for op, length in getattr(aln, "cigar", None) or []:
        if op in _REF_CONSUMING:
            span += length
    return start + span


def alignment_to_record(aln) -> Optional[AlignmentRecord]:
    """
    Convert a bamnostic alignment into an AlignmentRecord.
    Returns None for unmapped alignments or ones without a reference.
    """
    if getattr(aln, "is_unmapped", False):
        return None

    chrom = getattr(aln, "reference_name", None)
    if not chrom:
        return None

    name = _get_read_name(aln)
    if not name:
        raise ValueError("alignment has no query name")

    # bamnostic uses 'pos' (0-based) instead of 'reference_start'
    start = getattr(aln, "pos", 0) or 0
    end = _reference_end(aln, start)
    if end <= start:
        raise ValueError(f"alignment {name} spans no reference bases at {chrom}:{start}")

    strand = "-" if getattr(aln, "is_reverse", False) else "+"
    return AlignmentRecord(name, GenomicInterval(chrom, start, end, strand))


def read_alignments(
    bam_path: str | Path,
    logger: logging.Logger | None = None,
) -> Iterator[AlignmentRecord]:
    """
    Stream AlignmentRecords from a BAM file, one per mapped alignment.
    No index is needed. The file is closed on exhaustion or error.
    """
    bf = bn.AlignmentFile(str(bam_path), "rb")
    record_no = 0
    try:
        for aln in bf:
            record_no += 1
            if logger and logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Reading probe {_get_read_name(aln)} (alignment {record_no})")
            try:
                rec = alignment_to_record(aln)
            except ValueError as e:
                raise AlignmentParseError(bam_path, record_no, str(e)) from e
            if rec is not None:
                yield rec
    finally:
        bf.close()


def bam_references(bam_path: str | Path) -> list[str]:
    """Reference (contig) names from the BAM header."""
    bf = bn.AlignmentFile(str(bam_path), "rb")
    try:
        return list(getattr(bf, "references", []) or [])
    finally:
        bf.close()
