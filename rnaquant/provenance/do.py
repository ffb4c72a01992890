"""Centralize running of external commands, providing logging and tracking.

Commands are structured invocations (program plus argument list) and are
never handed to a shell.
"""
import collections
import subprocess

from rnaquant import utils
from rnaquant.log import logger, logger_cl

Invocation = collections.namedtuple("Invocation", "program args")

def invocation(program, *args):
    """Build an Invocation, flattening nested argument lists.
    """
    return Invocation(str(program), [str(x) for x in utils.flatten(args) if x is not None])

def cmdline(cmd):
    """Argument vector for an Invocation or a plain list of arguments.
    """
    if isinstance(cmd, Invocation):
        return [cmd.program] + list(cmd.args)
    if isinstance(cmd, str):
        raise ValueError("Commands are run without a shell, provide an argument list: %s" % cmd)
    return [str(x) for x in cmd]

def run(cmd, descr=None, log_error=True):
    """Run the provided command, logging details and checking for errors.

    Blocks until the command exits. A non-zero exit status raises
    subprocess.CalledProcessError carrying the command and its final output.
    """
    cmd = cmdline(cmd)
    if descr:
        logger.debug(descr)
    logger_cl.debug(" ".join(cmd))
    try:
        _do_run(cmd)
    except (subprocess.CalledProcessError, OSError) as e:
        if log_error:
            logger.error("Command failed: %s" % e)
        raise

def _do_run(cmd):
    """Perform running and check results, raising errors for issues.
    """
    s = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        close_fds=True,
    )
    debug_stdout = collections.deque(maxlen=100)
    while 1:
        line = s.stdout.readline().decode("utf-8", errors="replace")
        if line.rstrip():
            debug_stdout.append(line)
            logger.debug(line.rstrip())
        exitcode = s.poll()
        if exitcode is not None:
            for line in s.stdout:
                debug_stdout.append(line.decode("utf-8", errors="replace"))
            if exitcode != 0:
                error_msg = " ".join(cmd)
                error_msg += "\n"
                error_msg += "".join(debug_stdout)
                s.communicate()
                s.stdout.close()
                raise subprocess.CalledProcessError(exitcode, error_msg)
            else:
                break
    s.communicate()
    s.stdout.close()
