"""Checklist of pipeline step outcomes.

Every stage reports through `Journal.record`. Records are kept in memory and
mirrored to the logbook logger (whose file handler writes the run's
pipeline.log) and to a tab separated checklist file, so the state of a run
can be inspected even if the process is killed. A failure record is
terminal: nothing can be recorded after it.
"""
import collections
import os

from rnaquant.log import logger

SUCCESS = "success"
FAILURE = "failure"

RunRecord = collections.namedtuple("RunRecord", "step status detail")

class Journal(object):
    def __init__(self, log_file, checklist_file=None):
        self.log_file = log_file
        self.checklist_file = checklist_file or os.path.join(os.path.dirname(log_file),
                                                             "checklist.tsv")
        self._records = []

    @property
    def records(self):
        return tuple(self._records)

    @property
    def last(self):
        return self._records[-1] if self._records else None

    @property
    def failed(self):
        return self.last is not None and self.last.status == FAILURE

    def record(self, step, status, detail=""):
        if status not in (SUCCESS, FAILURE):
            raise ValueError("Unexpected step status %s for %s" % (status, step))
        if self.failed:
            raise RuntimeError("Pipeline already failed at %s, cannot record %s" %
                               (self.last.step, step))
        rec = RunRecord(step, status, detail or "")
        self._records.append(rec)
        if status == SUCCESS:
            logger.info("[✔] %s completed successfully" % step)
        else:
            logger.error("[✘] %s failed. Check %s for details." % (step, self.log_file))
            if detail:
                logger.error(detail)
        self._write_checklist(rec)
        return rec

    def _write_checklist(self, rec):
        detail = " ".join(rec.detail.split())
        with open(self.checklist_file, "a") as out_handle:
            out_handle.write("%s\t%s\t%s\n" % (rec.step, rec.status, detail))
            out_handle.flush()
