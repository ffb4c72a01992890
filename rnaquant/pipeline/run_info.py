"""Retrieve run information describing the inputs and directory layout of a run.

All stage outputs live in fixed subdirectories of one base directory, so
downstream tooling can locate artifacts by relative path.
"""
import collections
import os

from rnaquant import utils
from rnaquant.log import DEFAULT_LOG_DIR
from rnaquant.pipeline import datadict as dd
from rnaquant.pipeline.config_utils import ConfigurationError

DIR_LAYOUT = collections.OrderedDict([
    ("raw", "sra_data"),
    ("qc", "fastqc"),
    ("trimmed", "trimmed"),
    ("quant", "kallisto_out"),
    ("metadata", os.path.join("targetf", "For_sleuth")),
    ("stats", "sleuth_out"),
    ("report", "multiqc"),
    ("log", DEFAULT_LOG_DIR),
    ("tmp", "tmp"),
    ("reference", "reference"),
])

DEFAULT_INDEX = "transcriptome.idx"

RunConfig = collections.namedtuple("RunConfig", "base_dir dirs config log_file")

InputSource = collections.namedtuple("InputSource", "kind path accessions")

def setup_directories(base_dir):
    """Full paths to every stage directory under the base directory.
    """
    base_dir = os.path.abspath(base_dir)
    return {name: os.path.join(base_dir, rel) for name, rel in DIR_LAYOUT.items()}

def create_run_config(base_dir, config=None):
    """Build the run configuration handed to every pipeline component.

    Creates the base and log directories; stage directories are created
    by the stages that own them. Without a configured transcriptome index
    the run uses reference/transcriptome.idx under the base directory.
    """
    config = dict(config or {})
    config.setdefault("resources", {})
    base_dir = utils.safe_makedir(os.path.abspath(base_dir))
    dirs = setup_directories(base_dir)
    config["log_dir"] = config.get("log_dir") or dirs["log"]
    dirs["log"] = config["log_dir"]
    if not dd.get_tmp_dir(config):
        config = dd.set_tmp_dir(config, dirs["tmp"])
    if not dd.get_transcriptome_index(config):
        config = dd.set_transcriptome_index(config, os.path.join(dirs["reference"], DEFAULT_INDEX))
    utils.safe_makedir(dirs["log"])
    log_file = os.path.join(dirs["log"], "pipeline.log")
    return RunConfig(base_dir, dirs, config, log_file)

def resolve_input(in_path):
    """Classify the input source as an accession list file or a read directory.

    Fails with a ConfigurationError before anything runs if the input is
    neither a readable file nor an existing directory.
    """
    if not in_path:
        raise ConfigurationError("An input source is required: a file of accession ids "
                                 "or a directory of %s files" % utils.FASTQ_EXT)
    in_path = os.path.abspath(in_path)
    if os.path.isdir(in_path):
        return InputSource("directory", in_path, [])
    elif os.path.isfile(in_path) and os.access(in_path, os.R_OK):
        accessions = read_accessions(in_path)
        if not accessions:
            raise ConfigurationError("No accession ids found in %s" % in_path)
        return InputSource("accessions", in_path, accessions)
    else:
        raise ConfigurationError("Input must be a file with accession ids or a directory "
                                 "with %s files: %s" % (utils.FASTQ_EXT, in_path))

def read_accessions(in_file):
    """One accession id per line, skipping blank lines and comments.
    """
    out = []
    with open(in_file) as in_handle:
        for line in in_handle:
            line = line.strip()
            if line and not line.startswith("#"):
                out.append(line.split()[0])
    return out
