"""Run FastQC on the raw reads of a sample.

http://www.bioinformatics.babraham.ac.uk/projects/fastqc/
"""
import glob
import os
import shutil

from rnaquant import utils
from rnaquant.distributed.transaction import tx_tmpdir
from rnaquant.log import logger
from rnaquant.pipeline import config_utils
from rnaquant.pipeline import datadict as dd
from rnaquant.provenance import do

def report_files(sample, qc_dir):
    """One HTML report per read file, named after the read file stem.
    """
    return [os.path.join(qc_dir, "%s_fastqc.html" % utils.strip_fastq_ext(f))
            for f in sample.files]

def run(sample, qc_dir, config):
    """Run fastqc on every read file of a sample in a single invocation.
    """
    utils.safe_makedir(qc_dir)
    with tx_tmpdir(config, qc_dir) as tx_dir:
        fastqc = config_utils.get_program("fastqc", config)
        do.run(do.invocation(fastqc, "-o", tx_dir, "-t", dd.get_num_cores(config),
                             config_utils.get_program_options("fastqc", config),
                             sample.files),
               "FastQC: %s" % sample.name)
        for fname in glob.glob(os.path.join(tx_dir, "*_fastqc.*")):
            shutil.move(fname, os.path.join(qc_dir, os.path.basename(fname)))
    out_files = report_files(sample, qc_dir)
    logger.info("Produced HTML report %s" % ", ".join(out_files))
    return out_files
