"""scripts/run_batch_scoring.py

Score every profile of a sandbox session.

Either run an existing session (``--session-id``) or open a new one from a
list of entity ids and run it straight away.

Usage
-----
    python scripts/run_batch_scoring.py --session-id <id>
    python scripts/run_batch_scoring.py --entities E1,E2,E3 --industry retail --tenant T1
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import structlog

# ── app imports ───────────────────────────────────────────────────────────────
from trustscore.config import get_settings
from trustscore.database.connection import get_engine, get_session_factory, init_db
from trustscore.pipelines import create_sandbox_session, run_batch_scoring
from trustscore.services import get_redis_cache

# ── logging ──────────────────────────────────────────────────────────────────
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
log = structlog.get_logger("run_batch_scoring")


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run sandbox batch scoring")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--session-id", help="Existing sandbox session to score")
    target.add_argument("--entities", help="Comma-separated entity ids for a new session")
    parser.add_argument("--industry", help="Industry for a new session (default: corporate)")
    parser.add_argument("--tenant", help="Employer id to score against")
    parser.add_argument("--ttl-minutes", type=int, default=settings.sandbox_ttl_minutes,
                        help=f"Lifetime of a new session (default: {settings.sandbox_ttl_minutes})")
    parser.add_argument("--workers", type=int, default=settings.batch_max_workers,
                        help=f"Parallel entities (default: {settings.batch_max_workers})")
    parser.add_argument("--max-seconds", type=float, default=settings.batch_max_duration_seconds,
                        help="Time budget; no new entity starts after it")
    parser.add_argument("--init-db", action="store_true", help="Create missing tables first")
    args = parser.parse_args()

    if args.init_db:
        init_db(get_engine())

    session_factory = get_session_factory()
    session_id = args.session_id
    if session_id is None:
        entity_ids = [e.strip() for e in args.entities.split(",") if e.strip()]
        if not entity_ids:
            log.error("no_entities_given")
            return 1
        sandbox = create_sandbox_session(
            session_factory,
            industry=args.industry,
            employer_id=args.tenant,
            ttl_minutes=args.ttl_minutes,
            entity_ids=entity_ids,
        )
        session_id = sandbox.session_id

    log.info("batch_started", session_id=session_id, tenant=args.tenant, workers=args.workers)
    result = run_batch_scoring(
        session_factory,
        session_id,
        tenant_id=args.tenant,
        cache=get_redis_cache(),
        max_workers=args.workers,
        max_duration_seconds=args.max_seconds,
    )
    print(json.dumps({"session_id": session_id, **result.to_dict()}, indent=2))
    return 0 if result.ok else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        log.warning("interrupted")
        sys.exit(130)  # 130 = standard exit for SIGINT
