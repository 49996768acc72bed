"""Environment isolation guard.

Production and sandbox scores must never mix. Records are built from an
``Environment`` value so a well-typed caller cannot produce a mismatched
record; these checks run before every write as the last line of defense.
A violation raises ``EnvironmentIsolationError`` and is never caught by the
engine.
"""
import logging

from trustscore.models.enums import EnvironmentName
from trustscore.models.score import Environment, Sandbox, ScoreRecord

logger = logging.getLogger(__name__)


class EnvironmentIsolationError(RuntimeError):
    """A write would cross the production/sandbox boundary."""


def assert_sandbox(environment: Environment) -> Sandbox:
    """Raise unless ``environment`` is a sandbox namespace."""
    if not isinstance(environment, Sandbox):
        logger.critical(f"Sandbox isolation violation: got {environment!r}")
        raise EnvironmentIsolationError(
            "Sandbox isolation violation: sandbox writes require a Sandbox environment"
        )
    return environment


def assert_environment(target_tag: EnvironmentName, record: ScoreRecord) -> None:
    """Check ``record`` against the isolation tag of the table it is written to."""
    record_env = EnvironmentName(record.environment)
    if record_env != target_tag:
        logger.critical(
            f"Isolation violation: {record_env.value} record for {record.entity_id} "
            f"targeted at {target_tag.value} table"
        )
        raise EnvironmentIsolationError(
            f"Cannot write a {record_env.value} record to a {target_tag.value} table"
        )
    if record_env == EnvironmentName.SANDBOX:
        if not record.sandbox_session_id or record.expires_at is None:
            raise EnvironmentIsolationError(
                "Sandbox records must carry sandbox_session_id and expires_at"
            )
    elif record.sandbox_session_id or record.expires_at is not None:
        raise EnvironmentIsolationError("Production records must not carry sandbox fields")
