"""Build the sample to condition table used for differential testing.

Conditions are inferred from sample names with a simple keyword heuristic:
a sample whose name contains the keyword is a control, everything else is
a treatment. This is only correct for naming conventions that follow it,
so the classifier is a plain function that callers can replace.
"""
import glob
import os

import pandas as pd

from rnaquant import utils
from rnaquant.distributed.transaction import file_transaction
from rnaquant.log import logger
from rnaquant.pipeline import datadict as dd
from rnaquant.pipeline.config_utils import ConfigurationError
from rnaquant.rnaseq.kallisto import QUANT_SENTINEL

METADATA_COLUMNS = ["sample", "condition", "path"]

def keyword_classifier(keyword="control", control="control", treatment="treatment"):
    """Classify a sample name by case-insensitive keyword substring match.
    """
    keyword = keyword.lower()

    def classify(sample):
        return control if keyword in sample.lower() else treatment
    return classify

def classifier_from_config(config):
    return keyword_classifier(dd.get_condition_keyword(config),
                              dd.get_control_label(config),
                              dd.get_treatment_label(config))

def quantified_samples(quant_dir):
    """Sample directories holding finished quantification output.
    """
    out = []
    for d in sorted(glob.glob(os.path.join(quant_dir, "*"))):
        if os.path.isdir(d):
            if os.path.exists(os.path.join(d, QUANT_SENTINEL)):
                out.append(d)
            else:
                logger.warning("Skipping %s: no %s quantification output" % (d, QUANT_SENTINEL))
    return out

def make_metadata(quant_dir, classify):
    rows = []
    for d in quantified_samples(quant_dir):
        sample = os.path.basename(d)
        rows.append({"sample": sample, "condition": classify(sample), "path": d})
    if not rows:
        raise ConfigurationError("No quantified samples found in %s" % quant_dir)
    return pd.DataFrame(rows, columns=METADATA_COLUMNS)

def is_current(out_file, quant_dir):
    """Table exists and is newer than every quantification it lists.
    """
    if not utils.file_exists(out_file):
        return False
    mtime = os.path.getmtime(out_file)
    return all(os.path.getmtime(os.path.join(d, QUANT_SENTINEL)) <= mtime
               for d in quantified_samples(quant_dir))

def write_metadata(quant_dir, out_file, config, classify=None):
    """Write the sample, condition, path table as CSV.
    """
    if classify is None:
        classify = classifier_from_config(config)
    df = make_metadata(quant_dir, classify)
    with file_transaction(config, out_file) as tx_out_file:
        df.to_csv(tx_out_file, index=False)
    logger.info("Metadata generated at: %s" % out_file)
    return out_file
