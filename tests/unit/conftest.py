"""Pytest fixtures: run configurations and a fake external tool runner.

FakeTools replaces `rnaquant.provenance.do.run` and creates the outputs each
wrapped tool would produce, recording every invocation. Tools listed in
`fail` (by program name, or program name plus an argument) exit non-zero.
With `single_end` set, downloads produce one unsplit read file per accession.
"""
import gzip
import os
import subprocess

import pytest

from rnaquant.pipeline import run_info
from rnaquant.provenance import do


class FakeTools(object):
    def __init__(self):
        self.calls = []
        self.fail = set()
        self.single_end = False

    def programs(self):
        return [os.path.basename(cmd[0]) for cmd in self.calls]

    def calls_for(self, program):
        return [cmd for cmd in self.calls if os.path.basename(cmd[0]) == program]

    def __call__(self, cmd, descr=None, *args, **kwargs):
        cmd = do.cmdline(cmd)
        self.calls.append(cmd)
        program = os.path.basename(cmd[0])
        if program in self.fail or any((program, x) in self.fail for x in cmd[1:]):
            raise subprocess.CalledProcessError(1, " ".join(cmd))
        getattr(self, "_" + program.replace("-", "_").lower())(cmd[1:])

    def _opt(self, args, flag):
        return args[args.index(flag) + 1]

    def _fasterq_dump(self, args):
        out_dir = self._opt(args, "-O")
        if self.single_end:
            names = ["%s.fastq" % args[0]]
        else:
            names = ["%s_%s.fastq" % (args[0], i) for i in (1, 2)]
        for name in names:
            _write(os.path.join(out_dir, name), "@r\nACGT\n+\nIIII\n")

    def _gzip(self, args):
        for fname in args:
            with open(fname, "rb") as in_handle, gzip.open(fname + ".gz", "wb") as out_handle:
                out_handle.write(in_handle.read())
            os.remove(fname)

    def _fastqc(self, args):
        out_dir = self._opt(args, "-o")
        for fname in args:
            if fname.endswith(".fastq.gz"):
                stem = os.path.basename(fname)[:-len(".fastq.gz")]
                _write(os.path.join(out_dir, "%s_fastqc.html" % stem), "<html></html>")
                _write(os.path.join(out_dir, "%s_fastqc.zip" % stem), "zip")

    def _trim_galore(self, args):
        out_dir = self._opt(args, "-o")
        name = self._opt(args, "--basename")
        if "--paired" in args:
            outs = ["%s_val_1.fq.gz" % name, "%s_val_2.fq.gz" % name]
        else:
            outs = ["%s_trimmed.fq.gz" % name]
        for out in outs:
            _write(os.path.join(out_dir, out), "trimmed")
        _write(os.path.join(out_dir, "%s.fastq.gz_trimming_report.txt" % name), "report")

    def _kallisto(self, args):
        out_dir = self._opt(args, "-o")
        _write(os.path.join(out_dir, "abundance.h5"), "h5")
        _write(os.path.join(out_dir, "abundance.tsv"), "target_id\test_counts\n")

    def _rscript(self, args):
        _write(args[3], "target_id,pval,qval\n")

    def _multiqc(self, args):
        out_dir = self._opt(args, "-o")
        _write(os.path.join(out_dir, "multiqc_report.html"), "<html></html>")
        _write(os.path.join(out_dir, "multiqc_data", "multiqc_general_stats.txt"), "stats")


def _write(fname, content):
    if not os.path.exists(os.path.dirname(fname)):
        os.makedirs(os.path.dirname(fname))
    with open(fname, "w") as out_handle:
        out_handle.write(content)


def _make_fastq(dirname, *names):
    out = []
    for name in names:
        fname = os.path.join(str(dirname), name)
        _write(fname, "@r\nACGT\n+\nIIII\n")
        out.append(fname)
    return out


@pytest.fixture
def make_fastq():
    """Create small read files: make_fastq(dirname, "s1_1.fastq.gz", ...)"""
    return _make_fastq


@pytest.fixture
def fake_tools(mocker):
    tools = FakeTools()
    mocker.patch("rnaquant.provenance.do.run", side_effect=tools)
    yield tools


@pytest.fixture
def index_file(tmp_path):
    index = tmp_path / "reference" / "transcriptome.idx"
    index.parent.mkdir()
    index.write_text("index")
    return str(index)


@pytest.fixture
def config(index_file):
    return {"resources": {},
            "algorithm": {"num_cores": 1},
            "reference": {"transcriptome_index": index_file}}


@pytest.fixture
def run_config(tmp_path, config):
    yield run_info.create_run_config(str(tmp_path / "work"), config)
