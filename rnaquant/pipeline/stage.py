"""Run one pipeline stage over a set of samples, or once over the whole batch.

A stage is described by the directory it reads, the directory it owns, a
`process` function invoking the external tool for one item and an
`expected` function naming the outputs that item produces. Items whose
expected outputs already exist are skipped, which makes reruns resume from
the first missing output. The first failing item stops the stage.
"""
import collections
import subprocess

from rnaquant import utils
from rnaquant.log import logger
from rnaquant.pipeline.config_utils import ConfigurationError
from rnaquant.pipeline.journal import FAILURE, SUCCESS

Stage = collections.namedtuple("Stage", "name in_dir out_dir process expected complete",
                               defaults=[None])

Outcome = collections.namedtuple("Outcome", "step status detail outputs")

def item_name(item):
    return getattr(item, "name", item)

def is_complete(targets):
    """All expected outputs exist and are non-empty.
    """
    return bool(targets) and all(utils.file_exists(x) for x in targets)

class StageExecutor(object):
    """Sequentially dispatch a stage's external tool and aggregate the verdict.
    """
    def execute(self, stage, items=None):
        """Run a stage per item, or once for the batch when items is None.

        Returns an Outcome; tool failures and validation errors never
        propagate past this point.
        """
        utils.safe_makedir(stage.out_dir)
        if items is None:
            return self._run_items(stage, [None], batch=True)
        items = list(items)
        if not items:
            return Outcome(stage.name, FAILURE, "No samples found in %s" % stage.in_dir, [])
        return self._run_items(stage, items)

    def run_per_sample(self, stage, sample_set):
        """One invocation per sample; a paired sample is dispatched once with both mates.
        """
        return self.execute(stage, list(sample_set))

    def run_batch(self, stage):
        return self.execute(stage)

    def _run_items(self, stage, items, batch=False):
        outputs = []
        skipped = 0
        done = stage.complete or is_complete
        for item in items:
            targets = stage.expected() if batch else stage.expected(item)
            label = stage.name if batch else "%s for %s" % (stage.name, item_name(item))
            if done(targets):
                logger.info("%s: output already present, skipping" % label)
                skipped += 1
            else:
                try:
                    if batch:
                        stage.process()
                    else:
                        stage.process(item)
                except subprocess.CalledProcessError as e:
                    return Outcome(stage.name, FAILURE, "%s exited with status %s: %s" %
                                   (label, e.returncode, e.cmd), outputs)
                except (ConfigurationError, OSError) as e:
                    return Outcome(stage.name, FAILURE, "%s: %s" % (label, e), outputs)
                # outputs can depend on what the tool produced, such as the read layout
                targets = stage.expected() if batch else stage.expected(item)
                if not done(targets):
                    return Outcome(stage.name, FAILURE, "%s did not produce expected output: %s" %
                                   (label, ", ".join(targets)), outputs)
            outputs.append(targets)
        detail = "%s of %s items already complete" % (skipped, len(items)) if skipped else ""
        return Outcome(stage.name, SUCCESS, detail, outputs)
