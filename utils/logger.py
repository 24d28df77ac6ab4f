"""
Operational logging (loguru).

Business events go to the audit_logs table via utils.audit.log_event; this
logger is for what operators need to see: email failures, geocoder
degradation, the reminder job.
"""
import sys
from loguru import logger


def configure_logging(level: str = "INFO", log_file: str = None):
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
    )
    if log_file:
        logger.add(
            log_file,
            level=level,
            rotation="1 week",
            retention="4 weeks",
            compression="zip",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
        )


def get_logger():
    return logger
