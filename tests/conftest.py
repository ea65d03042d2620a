import pytest


class FakeAlignment:
    """Stand-in for a bamnostic AlignedSegment."""
    def __init__(self, name, chrom, pos, end=None, reverse=False, unmapped=False, cigar=None):
        self.query_name = name
        self.reference_name = chrom
        self.pos = pos
        if end is not None:
            self.reference_end = end
        self.is_reverse = reverse
        self.is_unmapped = unmapped
        self.cigar = cigar


class FakeAlignmentFile:
    def __init__(self, alignments, references=()):
        self._alignments = list(alignments)
        self.references = list(references)
        self.closed = False

    def __iter__(self):
        return iter(self._alignments)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_bam(monkeypatch):
    """Patch bamnostic.AlignmentFile to serve the given alignments."""
    from teprobe import alignments

    opened = []

    def install(alns, references=("chr1",)):
        def fake_alignmentfile(path, mode):
            bf = FakeAlignmentFile(alns, references)
            opened.append((path, mode, bf))
            return bf
        monkeypatch.setattr(alignments.bn, "AlignmentFile", fake_alignmentfile)
        return opened

    return install


@pytest.fixture
def bed_files(tmp_path):
    """Repeats: LINE1 at chr1:100-200. Genes: GENE_A chr1:150-300, exons 150-180 and 250-300."""
    repeats = tmp_path / "repeats.bed"
    repeats.write_text("chr1\t100\t200\tLINE1\t0\t+\n")
    genes = tmp_path / "genes.bed"
    genes.write_text(
        "chr1\t150\t300\tGENE_A\t0\t+\t150\t300\t0\t2\t30,50,\t0,100,\n"
    )
    return repeats, genes
