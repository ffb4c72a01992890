"""Discover read files, group them into samples and detect the read layout.

Layout detection is a single decision for the whole batch: if any
`<stem>_1.fastq.gz` has a `<stem>_2.fastq.gz` sibling the batch is paired,
otherwise every file is an independent single-end sample. Mixed batches
are not supported.
"""
import collections
import glob
import os

from rnaquant import utils
from rnaquant.log import logger

SINGLE = "single"
PAIRED = "paired"

MATE1_SUFFIX = "_1" + utils.FASTQ_EXT
MATE2_SUFFIX = "_2" + utils.FASTQ_EXT

Sample = collections.namedtuple("Sample", "name files layout")

def list_fastq(in_dir):
    """Compressed read files directly inside a directory, sorted by name.
    """
    return sorted(glob.glob(os.path.join(in_dir, "*" + utils.FASTQ_EXT)))

def mate_pair(fq1):
    """Mate 2 path for a mate 1 file, or None if it is not a mate 1 file.
    """
    if fq1.endswith(MATE1_SUFFIX):
        return fq1[:-len(MATE1_SUFFIX)] + MATE2_SUFFIX

def detect_layout(fastq_files):
    files = set(fastq_files)
    for fq in fastq_files:
        fq2 = mate_pair(fq)
        if fq2 and fq2 in files:
            return PAIRED
    return SINGLE

def sample_name(fq, layout):
    """Output stem for a read file: the file name with its known suffix stripped.
    """
    base = os.path.basename(fq)
    if layout == PAIRED and base.endswith(MATE1_SUFFIX):
        return base[:-len(MATE1_SUFFIX)]
    return utils.strip_fastq_ext(base)

class SampleSet(object):
    """Ordered samples from one directory plus the batch-wide layout.
    """
    def __init__(self, samples, layout):
        self.samples = list(samples)
        self.layout = layout

    def __iter__(self):
        return iter(self.samples)

    def __len__(self):
        return len(self.samples)

    @property
    def names(self):
        return [s.name for s in self.samples]

    @property
    def files(self):
        return [f for s in self.samples for f in s.files]

    @classmethod
    def discover(cls, in_dir, layout=None):
        """Group the read files in a directory into samples.

        layout forces a previously detected layout, used by stages after
        acquisition so the whole run shares one decision.
        """
        fastq_files = list_fastq(in_dir)
        if layout is None:
            layout = detect_layout(fastq_files)
        if layout == PAIRED:
            samples = _paired_samples(fastq_files)
        else:
            samples = [Sample(sample_name(fq, SINGLE), [fq], SINGLE) for fq in fastq_files]
        return cls(samples, layout)

def _paired_samples(fastq_files):
    """Dispatch on mate 1 files, skipping mate 2 and excluding malformed samples.
    """
    files = set(fastq_files)
    samples = []
    for fq in fastq_files:
        if fq.endswith(MATE2_SUFFIX):
            fq1 = fq[:-len(MATE2_SUFFIX)] + MATE1_SUFFIX
            if fq1 not in files:
                logger.warning("Skipping %s: no matching mate 1 file %s" %
                               (os.path.basename(fq), os.path.basename(fq1)))
            continue
        fq2 = mate_pair(fq)
        if fq2 is None:
            logger.warning("Skipping %s: not named as a read pair in a paired-end batch" %
                           os.path.basename(fq))
        elif fq2 not in files:
            logger.warning("Skipping %s: missing mate 2 file %s" %
                           (os.path.basename(fq), os.path.basename(fq2)))
        else:
            samples.append(Sample(sample_name(fq, PAIRED), [fq, fq2], PAIRED))
    return samples
