"""Timing of pipeline stages.
"""
import contextlib
import time

from rnaquant.log import logger

@contextlib.contextmanager
def report(label):
    """Log timing information for a stage."""
    logger.info("Timing: %s" % label)
    start = time.time()
    try:
        yield None
    finally:
        logger.debug("Timing: %s took %.1fs" % (label, time.time() - start))
