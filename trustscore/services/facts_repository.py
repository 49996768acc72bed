"""Facts repository: environment-scoped access to collaborator tables.

Every query is filtered by the repository's environment namespace, so a
production repository never sees sandbox rows and a sandbox repository sees
only its own session's rows. Database errors (``SQLAlchemyError``) propagate
to the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from trustscore.database.base import PRODUCTION_NAMESPACE, utcnow
from trustscore.database.orm import (
    BehavioralVectorRow,
    Dispute,
    EmployerAccount,
    EmployerBaselineRow,
    EmploymentRecord,
    FraudFlag,
    IndustryBaselineRow,
    Reference,
    RehireEntry,
    RiskModelConfigRow,
)
from trustscore.database.upsert import upsert_statement
from trustscore.models.enums import COUNTED_JOB_STATUSES
from trustscore.models.score import Environment, Sandbox
from trustscore.models.signals import DIMENSION_NAMES, BehavioralVector

logger = logging.getLogger(__name__)


@dataclass
class EntityFacts:
    """Everything needed to score one entity, fetched in one pass."""

    entity_id: str
    jobs: list[Any] = field(default_factory=list)
    references: list[Any] = field(default_factory=list)
    disputes: list[Any] = field(default_factory=list)
    rehire_rows: list[Any] = field(default_factory=list)
    fraud_flags: list[Any] = field(default_factory=list)
    vector: Optional[BehavioralVector] = None
    industry_key: Optional[str] = None


def namespace_of(environment: Environment) -> str:
    """Value stored in ``sandbox_session_id`` columns for ``environment``."""
    if isinstance(environment, Sandbox):
        return environment.session_id
    return PRODUCTION_NAMESPACE


def vector_from_row(row: Any) -> BehavioralVector:
    return BehavioralVector(**{name: getattr(row, name) for name in DIMENSION_NAMES})


class FactsRepository:
    """Read access to facts, configs and baselines for one environment."""

    def __init__(self, session_factory: sessionmaker, environment: Environment):
        self._session_factory = session_factory
        self.environment = environment
        self.namespace = namespace_of(environment)

    # ── entity facts ─────────────────────────────────────────────────────────

    def _rows(self, session, model, *criteria) -> list[Any]:
        stmt = select(model).where(model.sandbox_session_id == self.namespace, *criteria)
        return list(session.scalars(stmt).all())

    def fetch_entity_facts(self, entity_id: str) -> EntityFacts:
        with self._session_factory() as session:
            vector_row = session.scalars(
                select(BehavioralVectorRow).where(
                    BehavioralVectorRow.sandbox_session_id == self.namespace,
                    BehavioralVectorRow.entity_id == entity_id,
                )
            ).first()
            return EntityFacts(
                entity_id=entity_id,
                jobs=self._rows(session, EmploymentRecord, EmploymentRecord.entity_id == entity_id),
                references=self._rows(session, Reference, Reference.entity_id == entity_id),
                disputes=self._rows(session, Dispute, Dispute.entity_id == entity_id),
                rehire_rows=self._rows(session, RehireEntry, RehireEntry.entity_id == entity_id),
                fraud_flags=self._rows(session, FraudFlag, FraudFlag.entity_id == entity_id),
                vector=vector_from_row(vector_row) if vector_row is not None else None,
                industry_key=vector_row.industry_key if vector_row is not None else None,
            )

    def behavioral_vector(self, entity_id: str) -> Optional[BehavioralVector]:
        with self._session_factory() as session:
            row = session.scalars(
                select(BehavioralVectorRow).where(
                    BehavioralVectorRow.sandbox_session_id == self.namespace,
                    BehavioralVectorRow.entity_id == entity_id,
                )
            ).first()
            return vector_from_row(row) if row is not None else None

    # ── tenant configuration ─────────────────────────────────────────────────

    def employer_account(self, employer_id: str) -> Optional[EmployerAccount]:
        with self._session_factory() as session:
            return session.scalars(
                select(EmployerAccount).where(
                    EmployerAccount.sandbox_session_id == self.namespace,
                    EmployerAccount.id == employer_id,
                )
            ).first()

    def override_config_row(self, employer_id: str) -> Optional[RiskModelConfigRow]:
        """The employer's enabled override row, if any."""
        with self._session_factory() as session:
            return session.scalars(
                select(RiskModelConfigRow).where(
                    RiskModelConfigRow.sandbox_session_id == self.namespace,
                    RiskModelConfigRow.employer_id == employer_id,
                    RiskModelConfigRow.override_enabled.is_(True),
                )
            ).first()

    def industry_preset_row(self, industry_key: str) -> Optional[RiskModelConfigRow]:
        with self._session_factory() as session:
            return session.scalars(
                select(RiskModelConfigRow).where(
                    RiskModelConfigRow.sandbox_session_id == self.namespace,
                    RiskModelConfigRow.employer_id.is_(None),
                    RiskModelConfigRow.industry_key == industry_key,
                )
            ).first()

    # ── baselines ────────────────────────────────────────────────────────────

    def industry_baseline_row(self, industry_key: str) -> Optional[IndustryBaselineRow]:
        with self._session_factory() as session:
            return session.scalars(
                select(IndustryBaselineRow).where(
                    IndustryBaselineRow.sandbox_session_id == self.namespace,
                    IndustryBaselineRow.industry_key == industry_key,
                )
            ).first()

    def employer_baseline_row(self, employer_id: str) -> Optional[EmployerBaselineRow]:
        with self._session_factory() as session:
            return session.scalars(
                select(EmployerBaselineRow).where(
                    EmployerBaselineRow.sandbox_session_id == self.namespace,
                    EmployerBaselineRow.employer_id == employer_id,
                )
            ).first()

    def employer_workforce(self, employer_id: str) -> list[EmploymentRecord]:
        """Verified or matched employment records at ``employer_id``."""
        with self._session_factory() as session:
            return self._rows(
                session,
                EmploymentRecord,
                EmploymentRecord.employer_id == employer_id,
                EmploymentRecord.verification_status.in_(sorted(COUNTED_JOB_STATUSES)),
            )

    def responded_reference_count(self, entity_ids: Iterable[str]) -> int:
        ids = list(entity_ids)
        if not ids:
            return 0
        with self._session_factory() as session:
            return session.scalar(
                select(func.count(Reference.id)).where(
                    Reference.sandbox_session_id == self.namespace,
                    Reference.entity_id.in_(ids),
                    Reference.status == "responded",
                )
            ) or 0

    def vectors_for_industry(self, industry_key: str) -> list[BehavioralVector]:
        with self._session_factory() as session:
            rows = self._rows(session, BehavioralVectorRow, BehavioralVectorRow.industry_key == industry_key)
            return [vector_from_row(r) for r in rows]

    def vectors_for_employer(self, employer_id: str) -> list[BehavioralVector]:
        """Vectors of entities in the employer's verified workforce."""
        workforce = {r.entity_id for r in self.employer_workforce(employer_id)}
        if not workforce:
            return []
        with self._session_factory() as session:
            rows = self._rows(
                session,
                BehavioralVectorRow,
                BehavioralVectorRow.entity_id.in_(sorted(workforce)),
            )
            return [vector_from_row(r) for r in rows]

    def save_baseline(self, model, key_columns: tuple[str, ...], values: dict[str, Any]) -> None:
        """Upsert a derived baseline row (industry or employer) in this namespace."""
        values = {**values, "sandbox_session_id": self.namespace, "updated_at": utcnow()}
        with self._session_factory() as session:
            session.execute(
                upsert_statement(session, model, values, [*key_columns, "sandbox_session_id"])
            )
            session.commit()
