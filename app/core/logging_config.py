# app/core/logging_config.py
import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the application logger.

    All modules log through `logging.getLogger(__name__)`, so configuring the
    top-level `app` logger is enough to route every service's records.

    Parameters
    ----------
    level:
        Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        Unknown names fall back to INFO.

    Returns
    -------
    logging.Logger
        The configured `app` logger.
    """
    logger = logging.getLogger("app")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Calling this twice (e.g. app factory in tests) must not duplicate output
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(console_handler)

    return logger
