from logging import FileHandler, Formatter, StreamHandler, getLogger

__all__ = [
    "get_logger",
    "create_logger",
]

DEFAULT_LOGGER_NAME = "cubeql"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(message)s"

logger = None


def get_logger(path=None):
    """Get cubeql default logger"""
    global logger

    if logger:
        return logger
    else:
        return create_logger(path=path)


def create_logger(level=None, path=None):
    """Create a default logger"""
    global logger
    logger = getLogger(DEFAULT_LOGGER_NAME)
    logger.propagate = False

    if not logger.handlers:
        formatter = Formatter(fmt=DEFAULT_FORMAT)

        if path:
            # create a logger which logs to a file
            handler = FileHandler(path)
        else:
            # create a default logger
            handler = StreamHandler()

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if level:
        logger.setLevel(level)

    return logger
