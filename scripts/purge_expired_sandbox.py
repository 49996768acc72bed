"""scripts/purge_expired_sandbox.py

Delete sandbox score records whose session has expired. Reads already hide
them; this reclaims the rows.

Usage
-----
    python scripts/purge_expired_sandbox.py
"""

from __future__ import annotations

import argparse
import logging
import sys

import structlog

from trustscore.database.connection import get_session_factory
from trustscore.models.enums import EnvironmentName
from trustscore.services import ScoreRepository

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)
log = structlog.get_logger("purge_expired_sandbox")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Purge expired sandbox score records")
    parser.parse_args()

    repository = ScoreRepository(get_session_factory(), EnvironmentName.SANDBOX)
    removed = repository.purge_expired()
    log.info("purge_completed", removed=removed)
