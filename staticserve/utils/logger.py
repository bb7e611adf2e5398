import logging

__all__ = ["logger", "setup_logger"]

LOGGER_NAME = "staticserve"


class CustomFormatter(logging.Formatter):
    """Colour the level name according to the record level"""

    GREY = "\033[90m"
    CYAN = "\033[36m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    WHITE = "\033[37m"
    RESET = "\033[0m"

    FORMAT = "%(asctime)s %(levelcolor)s%(levelname)s%(reset)s: %(messagecolor)s%(message)s%(reset)s"

    FORMATS = {
        logging.DEBUG: FORMAT.replace("%(levelcolor)s", GREY).replace("%(messagecolor)s", WHITE),
        logging.INFO: FORMAT.replace("%(levelcolor)s", CYAN).replace("%(messagecolor)s", WHITE),
        logging.WARNING: FORMAT.replace("%(levelcolor)s", YELLOW).replace("%(messagecolor)s", WHITE),
        logging.ERROR: FORMAT.replace("%(levelcolor)s", RED).replace("%(messagecolor)s", WHITE),
        logging.CRITICAL: FORMAT.replace("%(levelcolor)s", RED).replace("%(messagecolor)s", WHITE),
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self.FORMATS[logging.WARNING])
        formatter = logging.Formatter(log_fmt, style="%")
        formatter.default_time_format = "%Y-%m-%d %H:%M:%S"
        formatter.default_msec_format = "%s.%03d"
        record.reset = self.RESET
        return formatter.format(record)


def setup_logger(level=logging.WARNING):
    """Attach the coloured handler once and set the verbosity"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(CustomFormatter())
        logger.addHandler(ch)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


logger = logging.getLogger(LOGGER_NAME)
