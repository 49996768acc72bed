"""scripts/recalculate_baselines.py

Rebuild stored production baselines from behavioral vectors.

Industry baselines need at least 50 vectors and employer baselines at least
5; anything smaller is reported and left as it was.

Usage
-----
    python scripts/recalculate_baselines.py --industries retail,healthcare
    python scripts/recalculate_baselines.py --employers EMP1,EMP2
"""

from __future__ import annotations

import argparse
import logging
import sys

import structlog

from trustscore.database.connection import get_session_factory
from trustscore.models import Production
from trustscore.services import BaselineResolver, FactsRepository, get_redis_cache

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
log = structlog.get_logger("recalculate_baselines")


def _split(value: str | None) -> list[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Recalculate behavioral baselines")
    parser.add_argument("--industries", help="Comma-separated industry keys")
    parser.add_argument("--employers", help="Comma-separated employer ids")
    args = parser.parse_args()

    resolver = BaselineResolver(FactsRepository(get_session_factory(), Production()), get_redis_cache())

    for industry in _split(args.industries):
        baseline = resolver.recalculate_industry_baseline(industry)
        log.info("industry_baseline", industry=industry, updated=baseline is not None,
                 sample_size=baseline.sample_size if baseline else 0)

    for employer_id in _split(args.employers):
        baseline = resolver.recalculate_employer_baseline(employer_id)
        log.info("employer_baseline", employer_id=employer_id, updated=baseline is not None,
                 sample_size=baseline.sample_size if baseline else 0)
