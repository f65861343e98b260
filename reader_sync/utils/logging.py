# reader_sync/utils/logging.py
import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_level = logging.INFO


def configure(level_name: str) -> None:
    """Set the level used for loggers handed out by get_logger"""
    global _level
    _level = getattr(logging, level_name.upper(), logging.INFO)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("reader_sync"):
            logging.getLogger(name).setLevel(_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a single stream handler attached."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_level)
    return logger
