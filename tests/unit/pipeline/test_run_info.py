import os

import pytest

from rnaquant.pipeline import run_info
from rnaquant.pipeline.config_utils import ConfigurationError


def test_create_run_config_layout(tmp_path):
    base_dir = str(tmp_path / "work")
    run_config = run_info.create_run_config(base_dir, {"algorithm": {"num_cores": 2}})
    assert run_config.base_dir == base_dir
    assert run_config.dirs["raw"] == os.path.join(base_dir, "sra_data")
    assert run_config.dirs["quant"] == os.path.join(base_dir, "kallisto_out")
    assert run_config.dirs["metadata"] == os.path.join(base_dir, "targetf", "For_sleuth")
    assert run_config.dirs["stats"] == os.path.join(base_dir, "sleuth_out")
    assert run_config.log_file == os.path.join(base_dir, "log_files", "pipeline.log")
    assert os.path.isdir(run_config.dirs["log"])
    assert not os.path.exists(run_config.dirs["raw"])
    assert run_config.config["resources"]["tmp"]["dir"] == os.path.join(base_dir, "tmp")


def test_create_run_config_default_index(tmp_path):
    base_dir = str(tmp_path / "work")
    run_config = run_info.create_run_config(base_dir)
    assert run_config.config["reference"]["transcriptome_index"] == \
        os.path.join(base_dir, "reference", "transcriptome.idx")
    config = {"reference": {"transcriptome_index": "/refs/hg38.idx"}}
    run_config = run_info.create_run_config(base_dir, config)
    assert run_config.config["reference"]["transcriptome_index"] == "/refs/hg38.idx"


def test_create_run_config_keeps_configured_tmp(tmp_path):
    config = {"resources": {"tmp": {"dir": "/scratch"}}}
    run_config = run_info.create_run_config(str(tmp_path), config)
    assert run_config.config["resources"]["tmp"]["dir"] == "/scratch"


def test_resolve_input_directory(tmp_path):
    source = run_info.resolve_input(str(tmp_path))
    assert source.kind == "directory"
    assert source.accessions == []


def test_resolve_input_accession_file(tmp_path):
    in_file = tmp_path / "SRA_IDs.txt"
    in_file.write_text("SRR000001\n\n# comment\nSRR000002  extra\n")
    source = run_info.resolve_input(str(in_file))
    assert source.kind == "accessions"
    assert source.accessions == ["SRR000001", "SRR000002"]


@pytest.mark.parametrize("name", ["missing.txt", None])
def test_resolve_input_rejects_missing(tmp_path, name):
    in_path = str(tmp_path / name) if name else None
    with pytest.raises(ConfigurationError):
        run_info.resolve_input(in_path)


def test_resolve_input_rejects_empty_accession_file(tmp_path):
    in_file = tmp_path / "empty.txt"
    in_file.write_text("\n# nothing\n")
    with pytest.raises(ConfigurationError):
        run_info.resolve_input(str(in_file))
