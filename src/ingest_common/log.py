# src/ingest_common/log.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level_name="INFO"):
    """Set the root level; install a stream handler only when none exists.

    The Lambda runtime attaches its own handler to the root logger, in which
    case basicConfig is a no-op and only the level changes.
    """
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return level
