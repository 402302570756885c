# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Logging Configuration

Configures the root logger once per process for all tripmesh services.
"""

import logging

from config.config import LOGGING_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def setup_logging(level: str = LOGGING_LEVEL) -> None:
    """Configure the root logger. Safe to call more than once."""
    global _configured
    if _configured:
        return

    logging.basicConfig(level=level, format=LOG_FORMAT)

    # Keep HTTP client chatter out of agent logs
    for noisy in ("httpx", "httpcore", "LiteLLM"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True
