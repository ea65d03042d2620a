import pytest
from conftest import FakeAlignment
from teprobe import cli


def test_cli_argument_parsing(bed_files, fake_bam, capsys):
    repeats_path, genes_path = bed_files
    fake_bam([FakeAlignment("P1", "chr1", 160, end=170)])
    argv = [
        "--genes", str(genes_path),
        "--probes", "probes.bam",
        "--repeats", str(repeats_path),
    ]

    result = cli.main(argv)

    assert result == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("NAME\tREPEATS")
    assert lines[1] == "P1\t1:LINE1\t.\t1:GENE_A\t."


def test_cli_debug_flag(bed_files, fake_bam):
    repeats_path, genes_path = bed_files
    fake_bam([])
    argv = ["--debug", "--genes", str(genes_path), "--probes", "p.bam", "--repeats", str(repeats_path)]
    assert cli.main(argv) == 0


@pytest.mark.parametrize("argv", [
    [],
    ["--genes", "g.bed", "--probes", "p.bam"],
    ["--genes", "g.bed", "--probes", "p.bam", "--repeats", "r.bed", "--bogus"],
])
def test_cli_usage_errors_exit_1(argv, capsys):
    with pytest.raises(SystemExit) as ei:
        cli.main(argv)
    assert ei.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "usage:" in captured.err


def test_cli_help_exits_0(capsys):
    with pytest.raises(SystemExit) as ei:
        cli.main(["-h"])
    assert ei.value.code == 0
    assert "--repeats" in capsys.readouterr().out


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as ei:
        cli.main(["--version"])
    assert ei.value.code == 0
    assert capsys.readouterr().out.strip() == cli.VERSION
