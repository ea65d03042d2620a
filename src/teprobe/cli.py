import argparse
import sys

from .analyze import analyze_probes

VERSION = "1.0.0"

HELP_TEXT = "teprobe --genes genes.bed --probes probes.bam --repeats repeats.bed > output.txt"


class _ArgumentParser(argparse.ArgumentParser):
    # Usage errors exit with status 1 and the full help text
    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    return analyze_probes(
        repeats_path=args.repeats,
        genes_path=args.genes,
        probes_path=args.probes,
        log_level="DEBUG" if args.debug else "INFO",
    )


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="teprobe",
        usage=HELP_TEXT,
        description="Annotate every genomic location a RAP probe aligns to with "
                    "overlapping repeat elements and genes (exon vs intron)."
    )
    p.add_argument(
        "-v", "--version",
        action="version",
        version=VERSION,
        help="Show version information."
    )
    p.add_argument(
        "--repeats",
        required=True,
        help="BED file of repeat regions (.bed or .bed.gz)."
    )
    p.add_argument(
        "--genes",
        required=True,
        help="BED12 file of gene regions; exon blocks define introns."
    )
    p.add_argument(
        "--probes",
        required=True,
        help="BAM file of probe alignments (no index needed)."
    )
    # Debugging assistance
    p.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode (verbose logging)."
    )
    return p

if __name__ == "__main__":
    raise SystemExit(main())
