import os

from rnaquant.pipeline.samples import PAIRED, Sample
from rnaquant.qc import fastqc, multiqc


def test_fastqc_reports(tmp_path, config, fake_tools):
    sample = Sample("s1", ["/raw/s1_1.fastq.gz", "/raw/s1_2.fastq.gz"], PAIRED)
    qc_dir = str(tmp_path / "fastqc")
    out_files = fastqc.run(sample, qc_dir, config)
    assert out_files == [os.path.join(qc_dir, "s1_1_fastqc.html"),
                         os.path.join(qc_dir, "s1_2_fastqc.html")]
    assert all(os.path.exists(x) for x in out_files)
    assert os.path.exists(os.path.join(qc_dir, "s1_1_fastqc.zip"))
    assert len(fake_tools.calls) == 1


def test_multiqc_summary(tmp_path, config, fake_tools):
    report_dir = str(tmp_path / "multiqc")
    out_file = multiqc.summary(str(tmp_path), report_dir, config)
    assert out_file == os.path.join(report_dir, "multiqc_report.html")
    assert os.path.exists(out_file)
    assert os.path.isdir(os.path.join(report_dir, "multiqc_data"))
    cmd = fake_tools.calls[0]
    assert cmd[1:3] == ["-f", str(tmp_path)]
