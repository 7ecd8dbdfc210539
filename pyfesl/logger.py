"""
Logging for pyfesl analyses

Every pyfesl module logs to a child of the ``pyfesl`` logger
(``pyfesl.residency``, ``pyfesl.network`` ...).  Residency and network runs
report row counts at INFO, and input problems that do not stop an analysis
(unresolved receiver locations, detections out of time order) at WARNING.
"""
import logging
import sys

LOGGER_NAME = 'pyfesl'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level=logging.INFO, log_file=None):
    """
    Send pyfesl log records to the console and optionally a file.

    Calling it again replaces the handlers from the earlier call, so a
    notebook can change the level or the log file without duplicating
    every message.

    Parameters
    ----------
    level : int
        Logging level (default: logging.INFO)
    log_file : str, optional
        Path to a log file, e.g. next to the residency and network outputs.
        If None, records only go to stdout.

    Returns
    -------
    logger : logging.Logger
        The ``pyfesl`` logger

    Examples
    --------
    >>> import logging
    >>> from pyfesl import setup_logging, compute_residency, network_summary
    >>> logger = setup_logging(level=logging.DEBUG, log_file='output/pyfesl.log')
    >>> residency = compute_residency(detections, units='days')
    >>> net = network_summary(detections)   # warns if a fish's detections run backwards
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"pyfesl logging at {logging.getLevelName(level)}"
                 + (f", writing to {log_file}" if log_file else ""))
    return logger
