import logging


def class_logger(path: str, classname: str) -> logging.Logger:
    """Return a hierarchical logger for a class."""
    return logging.getLogger(path).getChild(classname)


__all__ = (
    'class_logger',
)
