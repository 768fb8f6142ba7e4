import logging

logger = logging.getLogger("hartree")
logger.addHandler(logging.NullHandler())


def set_log_level(level: int | str) -> None:
    """Set the level of the package logger (e.g. ``logging.DEBUG`` or ``"INFO"``)."""
    logger.setLevel(level)
