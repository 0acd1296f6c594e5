# smartcompare/logging_config.py
import logging

from smartcompare.core.config import settings

def configure_logger(name: str = "smartcompare"):
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL)

    LOG_FILE = settings.LOG_FILE

    # Prevent duplicate handlers on reload
    if not logger.handlers:
        # File handler
        fh = logging.FileHandler(LOG_FILE, mode='a')
        fh.setLevel(settings.LOG_LEVEL)
        fh.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

        # Console handler
        ch = logging.StreamHandler()
        ch.setLevel(settings.LOG_LEVEL)
        ch.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))

        logger.addHandler(fh)
        logger.addHandler(ch)

    logger.info("Logger configured. Logging to file: %s", LOG_FILE)
    return logger
