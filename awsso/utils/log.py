import logging
import sys

LOG_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """
    Configure the awsso loggers for command-line use.

    Args:
        verbose: Log debug messages with timestamps and logger names
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(VERBOSE_LOG_FORMAT if verbose else LOG_FORMAT))

    logger = logging.getLogger("awsso")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    # botocore logs full requests at DEBUG
    logging.getLogger("botocore").setLevel(logging.DEBUG if verbose else logging.WARNING)
