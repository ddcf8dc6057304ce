"""Logging setup for the API process and scripts."""

import logging


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    """
    Initialise the root logger once.

    Pass ``force=True`` to reconfigure from tests or scripts.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
