"""SQLAlchemy ORM models for the trust score engine."""
from trustscore.database.base import Base
from trustscore.database.orm.score_record import ScoreRecordRow, SandboxScoreRecordRow
from trustscore.database.orm.facts import (
    EmploymentRecord,
    Reference,
    Dispute,
    RehireEntry,
    FraudFlag,
    BehavioralVectorRow,
    EmployerAccount,
)
from trustscore.database.orm.baseline import (
    IndustryBaselineRow,
    EmployerBaselineRow,
    RiskModelConfigRow,
)
from trustscore.database.orm.sandbox import SandboxSession, SandboxProfile

__all__ = [
    "Base",
    "ScoreRecordRow",
    "SandboxScoreRecordRow",
    "EmploymentRecord",
    "Reference",
    "Dispute",
    "RehireEntry",
    "FraudFlag",
    "BehavioralVectorRow",
    "EmployerAccount",
    "IndustryBaselineRow",
    "EmployerBaselineRow",
    "RiskModelConfigRow",
    "SandboxSession",
    "SandboxProfile",
]
