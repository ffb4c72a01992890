"""Differential expression testing of kallisto quantifications with sleuth.

https://pachterlab.github.io/sleuth/

The metadata table must describe exactly two conditions. This is checked
before Rscript is invoked.
"""
import os

import pandas as pd

from rnaquant import utils
from rnaquant.distributed.transaction import file_transaction
from rnaquant.log import logger
from rnaquant.pipeline import config_utils
from rnaquant.pipeline import datadict as dd
from rnaquant.pipeline.config_utils import ConfigurationError
from rnaquant.provenance import do

SLEUTH_SCRIPT = """\
library(sleuth)

args <- commandArgs(trailingOnly = TRUE)
if (length(args) != 5) {
  stop("Usage: Rscript sleuth.R metadata.csv results.csv reference alternative num_cores")
}

targetf <- args[1]
sleuth_out <- args[2]
reference <- args[3]
alternative <- args[4]
num_cores <- as.integer(args[5])

s2c <- read.csv(targetf, header = TRUE, stringsAsFactors = FALSE)
if (length(unique(s2c$condition)) != 2) {
  stop("Exactly two conditions are required for differential expression analysis")
}

s2c$condition <- relevel(as.factor(s2c$condition), ref = reference)
group_var <- paste0("condition", alternative)

so <- sleuth_prep(s2c, extra_bootstrap_summary = TRUE, num_cores = num_cores)
so <- sleuth_fit(so, ~condition, "full")
so <- sleuth_fit(so, ~1, "reduced")
so <- sleuth_wt(so, which_beta = group_var, which_model = "full")

sleuth_table <- sleuth_results(so, group_var, "wt", show_all = FALSE)
write.csv(sleuth_table, file = sleuth_out, row.names = FALSE)
"""

def results_file(stats_dir):
    return os.path.join(stats_dir, "sleuthO_results.csv")

def is_current(out_file, metadata_file):
    """Results exist and are no older than the metadata table they were built from.
    """
    return (utils.file_exists(out_file) and
            os.path.getmtime(metadata_file) <= os.path.getmtime(out_file))

def get_conditions(metadata_file, reference=None):
    """Reference and alternative condition labels from the metadata table.

    The configured reference is the base level when present, otherwise the
    first condition listed.
    """
    df = pd.read_csv(metadata_file)
    missing = [c for c in ("sample", "condition", "path") if c not in df.columns]
    if missing:
        raise ConfigurationError("Metadata table %s is missing columns: %s" %
                                 (metadata_file, ", ".join(missing)))
    conditions = list(pd.unique(df["condition"].astype(str)))
    if len(conditions) != 2:
        raise ConfigurationError("Exactly two conditions are required for differential "
                                 "expression analysis, found %s: %s" %
                                 (len(conditions), ", ".join(conditions)))
    if reference in conditions:
        alternative = [c for c in conditions if c != reference][0]
        return reference, alternative
    return conditions[0], conditions[1]

def write_script(stats_dir, config=None):
    r_file = os.path.join(stats_dir, "sleuth.R")
    if utils.file_exists(r_file):
        return r_file
    with file_transaction(config or {}, r_file) as tx_out_file:
        with open(tx_out_file, "w") as out_handle:
            out_handle.write(SLEUTH_SCRIPT)
    return r_file

def run_sleuth(metadata_file, stats_dir, config):
    """Test for differential expression between the two conditions in the table.
    """
    reference, alternative = get_conditions(metadata_file, dd.get_reference_condition(config))
    logger.info("Testing %s against reference condition %s" % (alternative, reference))
    utils.safe_makedir(stats_dir)
    r_file = write_script(stats_dir, config)
    out_file = results_file(stats_dir)
    rscript = config_utils.get_program("Rscript", config)
    with file_transaction(config, out_file) as tx_out_file:
        do.run(do.invocation(rscript, "--vanilla", r_file, metadata_file, tx_out_file,
                             reference, alternative, dd.get_num_cores(config)),
               "Running sleuth differential expression analysis.")
    return out_file
