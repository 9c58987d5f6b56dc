"""Logging configuration for the web app and the CLI."""

import logging

from sparks.config import DEBUG, LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = None) -> None:
    """Configure the root logger once; DEBUG=true overrides LOG_LEVEL."""
    if level is None:
        level = "DEBUG" if DEBUG else LOG_LEVEL
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # requests/urllib3 connection chatter is not useful at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
