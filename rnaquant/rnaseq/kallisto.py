"""
Wrapper for kallisto transcript quantification:
https://pachterlab.github.io/kallisto/
"""
import os

from rnaquant import utils
from rnaquant.distributed.transaction import file_transaction
from rnaquant.pipeline import config_utils
from rnaquant.pipeline import datadict as dd
from rnaquant.pipeline.config_utils import ConfigurationError
from rnaquant.pipeline.samples import PAIRED
from rnaquant.provenance import do

QUANT_SENTINEL = "abundance.h5"

def quant_dir(sample, out_dir):
    return os.path.join(out_dir, sample.name)

def quant_files(sample, out_dir):
    return [os.path.join(quant_dir(sample, out_dir), QUANT_SENTINEL)]

def get_index(config):
    """Transcriptome index from the configuration, which must exist.
    """
    index = dd.get_transcriptome_index(config)
    if not index:
        raise ConfigurationError("No transcriptome index configured: "
                                 "set reference: transcriptome_index in the configuration")
    if not utils.file_exists(index):
        raise ConfigurationError("Transcriptome index not found: %s" % index)
    return index

def run_kallisto(sample, out_dir, config):
    """Quantify one sample, writing to a directory named after the sample.
    """
    index = get_index(config)
    out_file = quant_files(sample, out_dir)[0]
    utils.safe_makedir(out_dir)
    kallisto = config_utils.get_program("kallisto", config)
    with file_transaction(config, quant_dir(sample, out_dir)) as tx_out_dir:
        cmd = [kallisto, "quant", "-i", index, "-o", tx_out_dir,
               "-b", dd.get_bootstraps(config), "-t", dd.get_num_cores(config)]
        if dd.get_quant_bias(config):
            cmd += ["--bias"]
        cmd += config_utils.get_program_options("kallisto", config)
        if sample.layout == PAIRED:
            cmd += sample.files
        else:
            cmd += ["--single", "-l", dd.get_fragment_length(config),
                    "-s", dd.get_fragment_sd(config)] + sample.files
        do.run(do.invocation(*cmd), "Quantifying transcripts in %s with kallisto." % sample.name)
    return out_file
