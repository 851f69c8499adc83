"""Logging setup for entrypoints. Modules themselves only call logging.getLogger(__name__)."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger (no-op if handlers were already installed)."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("src").setLevel(level)
