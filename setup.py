#!/usr/bin/env python

"""Setup file and install script for the RNA-seq quantification pipeline"""

import os
import subprocess

import setuptools

VERSION = '0.1.0'

# add version number and git commit hash of the current revision to version.py
try:
    git_run = subprocess.run(['git', 'rev-parse', '--short', 'HEAD'],
                             stdout=subprocess.PIPE, stderr=subprocess.DEVNULL)
    git_run.check_returncode()
except (subprocess.SubprocessError, OSError):
    commit_hash = ''
else:
    commit_hash = git_run.stdout.strip().decode()

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, 'rnaquant', 'pipeline', 'version.py'), 'w') as version_file:
    version_file.writelines([f'__version__ = "{VERSION}"\n',
                             f'__git_revision__ = "{commit_hash}"\n'])

# external tools (fasterq-dump, fastqc, trim_galore, kallisto, Rscript with
# sleuth, multiqc) are installed separately, for instance via bioconda
setuptools.setup(
    name='rnaquant',
    version=VERSION,
    description='RNA-seq quantification and differential expression pipeline',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    scripts=['scripts/rnaquant_pipeline.py'],
    python_requires='>=3.7',
    install_requires=['logbook', 'pandas', 'pyyaml', 'toolz'],
    extras_require={'test': ['pytest', 'pytest-mock']},
)
