"""Acquire raw reads: download archive accessions or collect an existing read directory.

Downloads run `fasterq-dump --split-files` followed by `gzip` in a
transactional directory, so only fully compressed read files ever land in
the raw reads directory.
"""
import glob
import os
import re
import shutil

from rnaquant import utils
from rnaquant.distributed.transaction import file_transaction, tx_tmpdir
from rnaquant.log import logger
from rnaquant.pipeline import config_utils
from rnaquant.pipeline import datadict as dd
from rnaquant.provenance import do

def is_srr(accession):
    p = re.compile(r"^[SED]RR[0-9]+$")
    return bool(p.match(accession))

def accession_outputs(accession, raw_dir):
    """Compressed read files already downloaded for an accession.

    Returns the expected mate 1 path when nothing is present yet.
    """
    single = os.path.join(raw_dir, "%s%s" % (accession, utils.FASTQ_EXT))
    fq1 = os.path.join(raw_dir, "%s_1%s" % (accession, utils.FASTQ_EXT))
    fq2 = os.path.join(raw_dir, "%s_2%s" % (accession, utils.FASTQ_EXT))
    if utils.file_exists(fq1):
        return [fq1, fq2] if os.path.exists(fq2) else [fq1]
    elif utils.file_exists(single):
        return [single]
    return [fq1]

def download(accession, raw_dir, config):
    """Download and compress the reads for one accession.
    """
    if not is_srr(accession):
        logger.warning("%s does not look like a run accession, trying to download anyway" % accession)
    utils.safe_makedir(raw_dir)
    with tx_tmpdir(config, raw_dir) as tx_dir:
        fasterq_dump = config_utils.get_program("fasterq-dump", config)
        do.run(do.invocation(fasterq_dump, accession, "-O", tx_dir, "--split-files",
                             "-e", dd.get_num_cores(config),
                             config_utils.get_program_options("fasterq-dump", config)),
               "Download %s" % accession)
        fastq_files = sorted(glob.glob(os.path.join(tx_dir, "%s*.fastq" % accession)))
        if not fastq_files:
            raise IOError("Download of %s produced no fastq files" % accession)
        gzip = config_utils.get_program("gzip", config)
        do.run(do.invocation(gzip, fastq_files), "Compress reads for %s" % accession)
        out_files = []
        for fq in fastq_files:
            out_file = os.path.join(raw_dir, os.path.basename(fq) + ".gz")
            shutil.move(fq + ".gz", out_file)
            out_files.append(out_file)
    return out_files

def copied_output(fastq_file, raw_dir):
    return [os.path.join(raw_dir, os.path.basename(fastq_file))]

def copy_fastq(fastq_file, raw_dir, config):
    """Copy an existing compressed read file into the raw reads directory.
    """
    out_file = copied_output(fastq_file, raw_dir)[0]
    if os.path.abspath(fastq_file) != out_file:
        with file_transaction(config, out_file) as tx_out_file:
            shutil.copyfile(fastq_file, tx_out_file)
    return out_file
