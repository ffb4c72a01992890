"""Main entry point for the RNA-seq quantification pipeline.

Runs the fixed sequence of stages:

  acquire -> quality control -> trim -> quantify -> build metadata
  -> differential test -> report

Each stage reads the previous stage's output directory. The first failing
stage moves the run to the terminal `failed` state and nothing after it
runs. Reruns skip every stage item whose output is already present.
"""
import argparse
import os

from rnaquant import log, utils
from rnaquant.fastq import trim
from rnaquant.log import logger
from rnaquant.pipeline import config_utils, run_info, sra, version
from rnaquant.pipeline.journal import FAILURE, SUCCESS, Journal
from rnaquant.pipeline.samples import PAIRED, SampleSet, list_fastq
from rnaquant.pipeline.stage import Outcome, Stage, StageExecutor
from rnaquant.provenance import profile
from rnaquant.qc import fastqc, multiqc
from rnaquant.rnaseq import kallisto, metadata, sleuth

INIT = "init"
ACQUIRING = "acquiring"
QC = "qc"
TRIMMING = "trimming"
QUANTIFYING = "quantifying"
BUILDING_METADATA = "building_metadata"
DIFFERENTIAL_TESTING = "differential_testing"
REPORTING = "reporting"
DONE = "done"
FAILED = "failed"

STATE_ORDER = [INIT, ACQUIRING, QC, TRIMMING, QUANTIFYING, BUILDING_METADATA,
               DIFFERENTIAL_TESTING, REPORTING, DONE]
TERMINAL_STATES = (DONE, FAILED)

class PipelineDriver(object):
    """Sequence the pipeline stages over one input source.

    classify maps a sample name to its condition label; it defaults to the
    configured keyword heuristic.
    """
    def __init__(self, run_config, input_source, classify=None):
        self.run_config = run_config
        self.config = run_config.config
        self.dirs = run_config.dirs
        self.input_source = input_source
        self.classify = classify or metadata.classifier_from_config(self.config)
        self.journal = Journal(run_config.log_file)
        self.executor = StageExecutor()
        self.state = INIT
        self.layout = None

    def transition(self, new_state):
        if self.state in TERMINAL_STATES:
            raise RuntimeError("Pipeline is %s, cannot move to %s" % (self.state, new_state))
        if new_state != FAILED:
            expected = STATE_ORDER[STATE_ORDER.index(self.state) + 1]
            if new_state != expected:
                raise RuntimeError("Invalid pipeline transition %s -> %s" % (self.state, new_state))
        logger.debug("Pipeline state: %s -> %s" % (self.state, new_state))
        self.state = new_state

    def check_config(self):
        """Configuration checks that must pass before any external tool runs.
        """
        kallisto.get_index(self.config)

    def run(self):
        """Run every stage in order, returning the final state.
        """
        self.check_config()
        steps = [(ACQUIRING, self.acquire),
                 (QC, self.quality_control),
                 (TRIMMING, self.trim_reads),
                 (QUANTIFYING, self.quantify),
                 (BUILDING_METADATA, self.build_metadata),
                 (DIFFERENTIAL_TESTING, self.differential_test),
                 (REPORTING, self.report)]
        for state, fn in steps:
            self.transition(state)
            with profile.report(state):
                outcome = fn()
            self.journal.record(outcome.step, outcome.status, outcome.detail)
            if outcome.status == FAILURE:
                self.transition(FAILED)
                return self.state
        self.transition(DONE)
        logger.info("Pipeline completed successfully!")
        return self.state

    def samples(self, in_dir):
        return SampleSet.discover(in_dir, layout=self.layout)

    # ## Stages

    def acquire(self):
        raw_dir = self.dirs["raw"]
        if self.input_source.kind == "accessions":
            logger.info("Downloading SRA data...")
            stage = Stage("SRA data download", self.input_source.path, raw_dir,
                          lambda acc: sra.download(acc, raw_dir, self.config),
                          lambda acc: sra.accession_outputs(acc, raw_dir))
            outcome = self.executor.execute(stage, self.input_source.accessions)
        else:
            logger.info("Copying FASTQ files from %s..." % self.input_source.path)
            stage = Stage("FASTQ files copy", self.input_source.path, raw_dir,
                          lambda fq: sra.copy_fastq(fq, raw_dir, self.config),
                          lambda fq: sra.copied_output(fq, raw_dir))
            outcome = self.executor.execute(stage, list_fastq(self.input_source.path))
        if outcome.status == SUCCESS:
            sample_set = SampleSet.discover(raw_dir)
            if not sample_set.samples:
                return Outcome(outcome.step, FAILURE,
                               "No usable samples found in %s" % raw_dir, outcome.outputs)
            self.layout = sample_set.layout
            logger.info("Detected data type: %s" %
                        ("Paired-end" if self.layout == PAIRED else "Single-end"))
        return outcome

    def quality_control(self):
        logger.info("Running FastQC...")
        qc_dir = self.dirs["qc"]
        stage = Stage("FastQC analysis", self.dirs["raw"], qc_dir,
                      lambda s: fastqc.run(s, qc_dir, self.config),
                      lambda s: fastqc.report_files(s, qc_dir))
        return self.executor.run_per_sample(stage, self.samples(self.dirs["raw"]))

    def trim_reads(self):
        logger.info("Running Trim Galore...")
        trim_dir = self.dirs["trimmed"]
        stage = Stage("Trim Galore processing", self.dirs["raw"], trim_dir,
                      lambda s: trim.trim_adapters(s, trim_dir, self.config),
                      lambda s: trim.trimmed_files(s, trim_dir))
        return self.executor.run_per_sample(stage, self.samples(self.dirs["raw"]))

    def quantify(self):
        logger.info("Running Kallisto quantification...")
        quant_dir = self.dirs["quant"]
        stage = Stage("Kallisto quantification", self.dirs["trimmed"], quant_dir,
                      lambda s: kallisto.run_kallisto(s, quant_dir, self.config),
                      lambda s: kallisto.quant_files(s, quant_dir))
        return self.executor.run_per_sample(stage, self.samples(self.dirs["trimmed"]))

    def build_metadata(self):
        logger.info("Generating metadata for Sleuth...")
        quant_dir = self.dirs["quant"]
        out_file = metadata_file(self.run_config)
        stage = Stage("Metadata generation", quant_dir, self.dirs["metadata"],
                      lambda: metadata.write_metadata(quant_dir, out_file, self.config,
                                                      self.classify),
                      lambda: [out_file],
                      lambda targets: metadata.is_current(targets[0], quant_dir))
        return self.executor.run_batch(stage)

    def differential_test(self):
        logger.info("Running Sleuth differential expression analysis...")
        in_file = metadata_file(self.run_config)
        stats_dir = self.dirs["stats"]
        stage = Stage("Sleuth analysis", self.dirs["metadata"], stats_dir,
                      lambda: sleuth.run_sleuth(in_file, stats_dir, self.config),
                      lambda: [sleuth.results_file(stats_dir)],
                      lambda targets: sleuth.is_current(targets[0], in_file))
        return self.executor.run_batch(stage)

    def report(self):
        logger.info("Generating MultiQC report...")
        report_dir = self.dirs["report"]
        stage = Stage("MultiQC report generation", self.run_config.base_dir, report_dir,
                      lambda: multiqc.summary(self.run_config.base_dir, report_dir, self.config),
                      lambda: [multiqc.report_file(report_dir)])
        return self.executor.run_batch(stage)

def metadata_file(run_config):
    return os.path.join(run_config.dirs["metadata"], "metadata.csv")

def run_main(workdir, input_path, config_file=None, classify=None):
    """Run the pipeline, returning the process exit status.

    Configuration errors raise ConfigurationError before any tool runs.
    """
    config, config_file = config_utils.load_system_config(config_file)
    input_source = run_info.resolve_input(input_path)
    run_config = run_info.create_run_config(workdir, config)
    handler = log.setup_local_logging(run_config.config)
    try:
        logger.info("rnaquant version %s" % version.__version__)
        if config_file:
            logger.info("System YAML configuration: %s." % os.path.abspath(config_file))
        logger.info("Processing input %s (%s)" % (input_source.path, input_source.kind))
        driver = PipelineDriver(run_config, input_source, classify)
        state = driver.run()
    finally:
        handler.pop_thread()
        handler.close()
    return 0 if state == DONE else 1

def parse_cl_args(in_args):
    """Parse input commandline arguments; unknown options are fatal.
    """
    description = "RNA-seq quantification and differential expression pipeline."
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--input", required=True,
                        help=("File with one SRA accession per line, or a directory "
                              "of %s read files" % utils.FASTQ_EXT))
    parser.add_argument("--workdir", default=os.getcwd(),
                        help=("Base directory for all pipeline outputs. Defaults to "
                              "current working directory"))
    parser.add_argument("--config",
                        help="YAML configuration file with reference and program settings")
    args = parser.parse_args(in_args)
    return {"input_path": args.input,
            "workdir": os.path.abspath(args.workdir),
            "config_file": args.config}
