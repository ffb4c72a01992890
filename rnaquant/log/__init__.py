"""Utility functionality for logging.
"""
import os
import sys

import logbook

from rnaquant import utils

LOG_NAME = "pipeline"
DEFAULT_LOG_DIR = "log_files"

def get_log_dir(config):
    d = config.get("log_dir", DEFAULT_LOG_DIR)
    return d

def get_log_file(config):
    """Persistent checklist log that receives every step outcome.
    """
    return os.path.join(get_log_dir(config), "%s.log" % LOG_NAME)

logger = logbook.Logger(LOG_NAME)
logger_cl = logbook.Logger(LOG_NAME + "-commands")

def _is_cl(record, _):
    return record.channel == LOG_NAME + "-commands"

def _not_cl(record, handler):
    return not _is_cl(record, handler)

class CloseableNestedSetup(logbook.NestedSetup):
    def close(self):
        for obj in self.objects:
            if hasattr(obj, "close"):
                obj.close()

def _create_log_handler(config):
    logbook.set_datetime_format("utc")
    handlers = [logbook.NullHandler()]
    format_str = "".join(["[{record.time:%Y-%m-%dT%H:%MZ}] " if config.get("include_time", True) else "",
                          "{record.message}"])

    log_dir = get_log_dir(config)
    if log_dir:
        utils.safe_makedir(log_dir)
        handlers.append(logbook.FileHandler(get_log_file(config),
                                            format_string=format_str, level="INFO", encoding="utf-8",
                                            filter=_not_cl))
        handlers.append(logbook.FileHandler(os.path.join(log_dir, "%s-debug.log" % LOG_NAME),
                                            format_string=format_str, level="DEBUG", bubble=True))
        handlers.append(logbook.FileHandler(os.path.join(log_dir, "%s-commands.log" % LOG_NAME),
                                            format_string=format_str, level="DEBUG",
                                            filter=_is_cl))
    handlers.append(logbook.StreamHandler(sys.stderr, format_string=format_str,
                                          level=config.get("log_level", "INFO"), bubble=True,
                                          filter=_not_cl))
    return CloseableNestedSetup(handlers)

def setup_local_logging(config=None):
    """Setup logging for a local run, directing messages to the log directory and stderr.

    The returned handler is pushed onto the current thread; call
    `pop_thread` and `close` on it when the run finishes.
    """
    if config is None: config = {}
    handler = _create_log_handler(config)
    handler.push_thread()
    return handler
