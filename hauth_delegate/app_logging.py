import logging
from typing import Union

from pythonjsonlogger import jsonlogger


def setup_logger(level: Union[int, str] = logging.INFO) -> None:
    """Send JSON log records to stderr."""
    logger = logging.getLogger()
    logger.setLevel(level)
    # The app factory may run more than once in a process (e.g. in tests).
    if any(isinstance(handler.formatter, jsonlogger.JsonFormatter)
           for handler in logger.handlers):
        return
    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    logHandler.setFormatter(formatter)
    logger.addHandler(logHandler)
