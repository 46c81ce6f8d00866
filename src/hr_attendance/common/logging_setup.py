"""Logging configuration for the HR attendance service."""
import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    root.handlers = [handler]

    # Suppress noisy loggers
    for name in ["werkzeug", "mysql.connector"]:
        logging.getLogger(name).setLevel(logging.WARNING)
