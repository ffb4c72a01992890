"""High level summaries of samples and programs with MultiQC.

https://github.com/ewels/MultiQC
"""
import os
import shutil

from rnaquant import utils
from rnaquant.distributed.transaction import tx_tmpdir
from rnaquant.pipeline import config_utils
from rnaquant.provenance import do

def report_file(report_dir):
    return os.path.join(report_dir, "multiqc_report.html")

def summary(base_dir, report_dir, config):
    """Summarize all quality metrics under the run's base directory.
    """
    utils.safe_makedir(report_dir)
    out_file = report_file(report_dir)
    out_data = os.path.join(report_dir, "multiqc_data")
    multiqc = config_utils.get_program("multiqc", config)
    with tx_tmpdir(config, report_dir) as tx_out:
        do.run(do.invocation(multiqc, "-f", base_dir, "-o", tx_out,
                             config_utils.get_program_options("multiqc", config)),
               "Run multiqc")
        if utils.file_exists(os.path.join(tx_out, "multiqc_report.html")):
            utils.remove_safe(out_data)
            shutil.move(os.path.join(tx_out, "multiqc_report.html"), out_file)
            if os.path.exists(os.path.join(tx_out, "multiqc_data")):
                shutil.move(os.path.join(tx_out, "multiqc_data"), out_data)
    return out_file
