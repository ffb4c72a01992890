"""Quality and adapter trimming of reads with Trim Galore.

https://github.com/FelixKrueger/TrimGalore

Trim Galore names its outputs after the run basename (`<name>_val_1.fq.gz`
for pairs, `<name>_trimmed.fq.gz` for single reads). Outputs are renamed
to the sample stem with the standard read suffix so quantification finds
them under the same names as the raw reads.
"""
import glob
import os
import shutil

from rnaquant import utils
from rnaquant.distributed.transaction import tx_tmpdir
from rnaquant.pipeline import config_utils
from rnaquant.pipeline import datadict as dd
from rnaquant.pipeline.samples import PAIRED
from rnaquant.provenance import do

def trimmed_files(sample, trim_dir):
    if sample.layout == PAIRED:
        return [os.path.join(trim_dir, "%s_%s%s" % (sample.name, i, utils.FASTQ_EXT))
                for i in (1, 2)]
    return [os.path.join(trim_dir, "%s%s" % (sample.name, utils.FASTQ_EXT))]

def _tool_outputs(sample, tx_dir):
    if sample.layout == PAIRED:
        return [os.path.join(tx_dir, "%s_val_%s.fq.gz" % (sample.name, i)) for i in (1, 2)]
    return [os.path.join(tx_dir, "%s_trimmed.fq.gz" % sample.name)]

def trim_adapters(sample, trim_dir, config):
    """Trim one sample, dispatching both mates together for paired reads.
    """
    utils.safe_makedir(trim_dir)
    out_files = trimmed_files(sample, trim_dir)
    with tx_tmpdir(config, trim_dir) as tx_dir:
        trim_galore = config_utils.get_program("trim_galore", config)
        cmd = [trim_galore]
        if sample.layout == PAIRED:
            cmd += ["--paired"]
        cmd += ["--gzip", "--basename", sample.name, "-o", tx_dir]
        cores = dd.get_num_cores(config)
        if int(cores) > 1:
            cmd += ["-j", cores]
        cmd += config_utils.get_program_options("trim_galore", config)
        cmd += sample.files
        do.run(do.invocation(*cmd), "Trimming with Trim Galore: %s" % sample.name)
        tool_files = _tool_outputs(sample, tx_dir)
        missing = [x for x in tool_files if not utils.file_exists(x)]
        if missing:
            raise IOError("Trim Galore did not produce %s" % ", ".join(missing))
        for report in glob.glob(os.path.join(tx_dir, "*_trimming_report.txt")):
            shutil.move(report, os.path.join(trim_dir, os.path.basename(report)))
        # mate 1 last, so a complete mate 1 implies a complete pair
        for tool_file, out_file in reversed(list(zip(tool_files, out_files))):
            shutil.move(tool_file, out_file)
    return out_files
