import logging
import io
from conftest import FakeAlignment
from teprobe.analyze import analyze_probes, load_genes, load_repeats


def test_load_genes_derives_introns(bed_files):
    repeats_path, genes_path = bed_files
    repeats = load_repeats(repeats_path)
    genes, introns = load_genes(genes_path)
    assert repeats.size() == 1
    assert genes.size() == 1
    assert [(i.start, i.end, i.name) for i in introns] == [(180, 250, "GENE_A")]


def test_scenario_rows(bed_files, fake_bam):
    repeats_path, genes_path = bed_files
    fake_bam([
        FakeAlignment("P3", "chr1", 400, end=410),
        FakeAlignment("P1", "chr1", 160, end=170),
        FakeAlignment("P2", "chr1", 190, end=210),
    ])
    out = io.StringIO()
    rc = analyze_probes(repeats_path, genes_path, "probes.bam", out=out)
    assert rc == 0
    assert out.getvalue().splitlines() == [
        "NAME\tREPEATS\tGENES_NO_REPEATS\tGENES_EXONS_WITH_REPEATS\tGENES_INTRONS_WITH_REPEATS",
        "P1\t1:LINE1\t.\t1:GENE_A\t.",
        "P2\t1:LINE1\t.\t.\t1:GENE_A",
        "P3\t.\t.\t.\t.",
    ]


def test_multi_location_probe_counts(bed_files, fake_bam):
    repeats_path, genes_path = bed_files
    fake_bam([
        FakeAlignment("P1", "chr1", 160, end=170),
        FakeAlignment("P1", "chr1", 120, end=130),
        FakeAlignment("P1", "chr2", 5, end=15),
        FakeAlignment("P1", "chr1", 190, end=210),
    ])
    out = io.StringIO()
    assert analyze_probes(repeats_path, genes_path, "probes.bam", out=out) == 0
    row = out.getvalue().splitlines()[1]
    assert row == "P1\t3:LINE1\t.\t1:GENE_A\t1:GENE_A"


def test_debug_mode_runs(bed_files, fake_bam):
    repeats_path, genes_path = bed_files
    fake_bam([FakeAlignment("P1", "chr1", 160, end=170)], references=("chr1", "chrUn"))
    out = io.StringIO()
    assert analyze_probes(repeats_path, genes_path, "probes.bam", out=out, log_level="DEBUG") == 0
    assert len(out.getvalue().splitlines()) == 2


def test_malformed_bed_prints_nothing(tmp_path, bed_files, fake_bam):
    _, genes_path = bed_files
    bad = tmp_path / "bad.bed"
    bad.write_text("chr1\t100\tnope\tLINE1\n")
    fake_bam([FakeAlignment("P1", "chr1", 160, end=170)])
    out = io.StringIO()
    assert analyze_probes(bad, genes_path, "probes.bam", out=out) == 1
    assert out.getvalue() == ""


def test_missing_file_fails(tmp_path, bed_files, fake_bam):
    repeats_path, _ = bed_files
    fake_bam([])
    out = io.StringIO()
    assert analyze_probes(repeats_path, tmp_path / "nope.bed", "probes.bam", out=out) == 1
    assert out.getvalue() == ""


def test_bad_alignment_prints_nothing(bed_files, fake_bam):
    repeats_path, genes_path = bed_files
    fake_bam([
        FakeAlignment("P1", "chr1", 160, end=170),
        FakeAlignment("", "chr1", 160, end=170),
    ])
    out = io.StringIO()
    assert analyze_probes(repeats_path, genes_path, "probes.bam", out=out) == 1
    assert out.getvalue() == ""


def test_logs_rows_and_introns(bed_files, fake_bam, caplog):
    repeats_path, genes_path = bed_files
    fake_bam([
        FakeAlignment("P1", "chr1", 160, end=170),
        FakeAlignment("P2", "chr1", 190, end=210),
    ])
    caplog.set_level(logging.DEBUG, logger="teprobe")
    out = io.StringIO()
    assert analyze_probes(repeats_path, genes_path, "probes.bam", out=out, log_level="DEBUG") == 0
    assert "Wrote 2 probe rows." in caplog.text
    assert "Intron index holds 1 annotations on 1 chromosomes" in caplog.text
    assert "Adding probe P1" in caplog.text
