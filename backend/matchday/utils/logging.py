import logging

from matchday.config import environment


def create_logger(level: int) -> logging.Logger:
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(log_format)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    _logger = logging.getLogger("matchday")
    _logger.setLevel(level)
    if len(_logger.handlers) < 1:
        _logger.addHandler(handler)

    return _logger


logger = create_logger(environment.get_log_level())
