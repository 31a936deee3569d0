import logging
import os
import sys


def getLogger(name):
    return logging.getLogger(name)


_STDERR_LEVELS = [logging.ERROR, logging.INFO, logging.DEBUG]


def setup(logDir, debugLogFileName, debug=False, verbose=0):
    fmt = (
        '+%(process)-6d %(levelname)-9s '
        '%(name)-20s %(threadName)-16s %(filename)20s:%(lineno)-5d '
        '[%(asctime)s] %(message)s')
    if debug:
        if isinstance(debug, str):
            logFileName = os.path.expanduser(debug)
        else:
            logFileName = os.path.join(logDir, debugLogFileName)
        logging.basicConfig(
            filename=logFileName,
            level=logging.DEBUG,
            format=fmt)
    else:
        level = _STDERR_LEVELS[min(verbose, len(_STDERR_LEVELS) - 1)]
        logging.basicConfig(stream=sys.stderr, level=level, format=fmt)
