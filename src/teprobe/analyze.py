from __future__ import annotations
from pathlib import Path
from typing import TextIO, Tuple
import logging
import os
import sys
import time
import traceback
import psutil

from .alignments import bam_references, read_alignments
from .bedtools import read_bed
from .classify import classify_position
from .index import CoordinateIndex
from .report import ProbeAggregator, write_report


def _make_logger(level: str) -> logging.Logger:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("teprobe")
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    logger.setLevel(lvl)
    return logger


def _get_memory_usage():
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024 # Current memory usage in MB


def load_repeats(repeats_path: str | Path, logger: logging.Logger | None = None) -> CoordinateIndex:
    repeats = CoordinateIndex()
    if logger:
        logger.info("Loading repeats.")
    for annotation in read_bed(repeats_path):
        repeats.add(annotation)
    if logger:
        logger.info(f"Loaded {repeats.size()} repeat annotations")
    return repeats


def load_genes(
    genes_path: str | Path,
    logger: logging.Logger | None = None,
) -> Tuple[CoordinateIndex, CoordinateIndex]:
    """Load gene records, then derive one intron annotation per exon gap."""
    genes = CoordinateIndex()
    if logger:
        logger.info("Loading genes.")
    for annotation in read_bed(genes_path):
        genes.add(annotation)
    if logger:
        logger.info(f"Loaded {genes.size()} gene annotations.")
        logger.info("Loading introns.")

    introns = CoordinateIndex()
    for gene in genes:
        for intron in gene.introns():
            introns.add(intron)
    if logger:
        logger.info(f"Loaded {introns.size()} intron annotations.")
    return genes, introns


def load_probes(
    probes_path: str | Path,
    repeats: CoordinateIndex,
    genes: CoordinateIndex,
    logger: logging.Logger | None = None,
) -> ProbeAggregator:
    """Classify every alignment in the BAM and collect the positions per probe name."""
    probes = ProbeAggregator()
    if logger:
        logger.info("Loading probes.")
    n_alignments = 0
    for record in read_alignments(probes_path, logger=logger):
        position = classify_position(record.interval, repeats, genes)
        if logger and record.name not in probes:
            logger.debug(f"Adding probe {record.name}")
        probes.add_position(record.name, position)
        n_alignments += 1
    if logger:
        logger.info(f"Loaded {len(probes)} probes.")
        logger.debug(f"{n_alignments} alignments classified")
    return probes


def _log_contig_mismatch(
    probes_path: str | Path,
    repeats: CoordinateIndex,
    genes: CoordinateIndex,
    logger: logging.Logger,
) -> None:
    bam_contigs = set(bam_references(probes_path))
    ann_contigs = set(repeats.chromosomes) | set(genes.chromosomes)
    only_bam = sorted(bam_contigs - ann_contigs)
    if only_bam:
        logger.debug(f"Contigs in BAM without annotations (first 20): {only_bam[:20]}")


def analyze_probes(
    repeats_path: str | Path,
    genes_path: str | Path,
    probes_path: str | Path,
    *,
    out: TextIO | None = None,
    log_level: str = "INFO",
) -> int:
    """
    Load repeats and genes, classify each probe alignment and print the
    per-probe table. Nothing is printed unless every input loads cleanly.
    """
    start_time = time.monotonic()
    logger = _make_logger(log_level)
    if logger.isEnabledFor(logging.DEBUG):
        logger.info("Running in debug mode.")
        logger.debug(f"Python version: {sys.version}")
        logger.debug(f"Starting memory: {_get_memory_usage():.1f} MB")

    try:
        repeats = load_repeats(repeats_path, logger=logger)
        # Introns are counted for the log only; classification infers them
        genes, introns = load_genes(genes_path, logger=logger)
        logger.debug(f"Intron index holds {introns.size()} annotations on {len(introns.chromosomes)} chromosomes")
        if logger.isEnabledFor(logging.DEBUG):
            _log_contig_mismatch(probes_path, repeats, genes, logger)
        probes = load_probes(probes_path, repeats, genes, logger=logger)
    except Exception as e:
        logger.error(f"{e}")
        logger.debug("Traceback after failed load:\n" + traceback.format_exc())
        return 1

    rows = write_report(probes, out)
    logger.info(f"Wrote {rows} probe rows.")

    logger.debug(f"Final memory usage: {_get_memory_usage():.1f} MB")
    logger.info("Program complete")
    logger.info(f"{int((time.monotonic() - start_time) * 1000)} milliseconds elapsed.")
    return 0
