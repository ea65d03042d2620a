from __future__ import annotations
from pathlib import Path
import gzip
from typing import Iterator, List, TextIO, Tuple

from .teprobeClasses import Annotation, GenomicInterval, TeprobeError


class BedParseError(TeprobeError, ValueError):
    def __init__(self, path: str | Path, line_no: int, reason: str):
        self.path = str(path)
        self.line_no = line_no
        self.reason = reason
        super().__init__(f"{self.path}, line {line_no}: {reason}")


def _open_text_auto(path: str | Path, mode: str = "rt") -> TextIO:
    p = Path(path)
    if p.suffix.lower() == ".gz":
        return gzip.open(p, mode, encoding="utf-8", errors="replace")
    return open(p, mode, encoding="utf-8", errors="replace")


def _parse_int_list(field: str) -> List[int]:
    return [int(x) for x in field.strip().rstrip(",").split(",") if x != ""]


def _parse_blocks(cols: List[str], start: int, end: int) -> Tuple[Tuple[int, int], ...]:
    count = int(cols[9])
    sizes = _parse_int_list(cols[10])
    offsets = _parse_int_list(cols[11])
    if count < 1 or len(sizes) != count or len(offsets) != count:
        raise ValueError(
            f"blockCount={count} does not match {len(sizes)} sizes and {len(offsets)} starts"
        )
    blocks = []
    for off, size in zip(offsets, sizes):
        b_start = start + off
        b_end = b_start + size
        if size < 1 or off < 0 or b_end > end:
            raise ValueError(f"block {off}+{size} lies outside {start}-{end}")
        blocks.append((b_start, b_end))
    blocks.sort()
    return tuple(blocks)


def parse_bed_line(line: str) -> Annotation:
    """
    Parse one BED3..BED12 data line into an Annotation.
    Raises ValueError with the reason if the line is malformed.
    """
    cols = line.rstrip("\r\n").split("\t")
    if len(cols) < 3:
        raise ValueError(f"expected at least 3 tab-separated columns, found {len(cols)}")

    chrom = cols[0]
    if not chrom:
        raise ValueError("empty chromosome name")
    try:
        start = int(cols[1])
        end = int(cols[2])
    except ValueError:
        raise ValueError(f"start/end are not integers: {cols[1]!r}, {cols[2]!r}") from None
    if start < 0 or end <= start:
        raise ValueError(f"invalid interval {start}-{end}")

    name = cols[3] if len(cols) > 3 and cols[3] else "."
    strand = cols[5] if len(cols) > 5 and cols[5] else "."
    if strand not in ("+", "-", "."):
        raise ValueError(f"invalid strand {strand!r}")

    blocks: Tuple[Tuple[int, int], ...] = ()
    if len(cols) >= 12:
        blocks = _parse_blocks(cols, start, end)
    elif len(cols) > 9:
        raise ValueError("block columns require blockCount, blockSizes and blockStarts")

    return Annotation(GenomicInterval(chrom, start, end, strand), name, blocks)


def read_bed(path: str | Path) -> Iterator[Annotation]:
    """
    Stream Annotations from a BED file (.bed or .bed.gz).
    The file is closed when the stream is exhausted or a line fails to parse.
    """
    with _open_text_auto(path) as fh:
        for line_no, raw in enumerate(fh, 1):
            if not raw.strip():
                continue
            if raw.startswith(("#", "track", "browser")):
                continue
            try:
                yield parse_bed_line(raw)
            except ValueError as e:
                raise BedParseError(path, line_no, str(e)) from e
