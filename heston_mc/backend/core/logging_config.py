# heston_mc/backend/core/logging_config.py

import logging


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


""" Example usage:

from heston_mc.backend.core.logging_config import setup_logging

setup_logging()  # call once on app start
logger = logging.getLogger(__name__)

"""
