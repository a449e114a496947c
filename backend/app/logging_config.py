import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Apply the service log format to the root logger. Later calls only adjust the level."""
    global _configured

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    if not _configured:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
        _configured = True
    logging.getLogger().setLevel(numeric_level)
