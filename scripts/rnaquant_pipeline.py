#!/usr/bin/env python -Es
"""Run the RNA-seq quantification and differential expression pipeline.

Usage:
  rnaquant_pipeline.py --input <SRA_IDs_file or FASTQ_dir> [--workdir <dir>] [--config <yaml>]

The input is either a text file with one SRA run accession per line, which
are downloaded, or a directory of `<stem>_1.fastq.gz`/`<stem>_2.fastq.gz`
(paired) or `<stem>.fastq.gz` (single) read files.

The optional YAML configuration provides the kallisto transcriptome index
and program settings:

  reference:
    transcriptome_index: /path/to/transcriptome.idx
  algorithm:
    num_cores: 4
    condition:
      keyword: control
  resources:
    kallisto:
      cmd: /opt/kallisto/bin/kallisto
"""
import sys

from rnaquant.pipeline.config_utils import ConfigurationError
from rnaquant.pipeline.main import parse_cl_args, run_main

def main(**kwargs):
    try:
        return run_main(**kwargs)
    except ConfigurationError as e:
        sys.stderr.write("Error: %s\n" % e)
        return 1

if __name__ == "__main__":
    kwargs = parse_cl_args(sys.argv[1:])
    sys.exit(main(**kwargs))
