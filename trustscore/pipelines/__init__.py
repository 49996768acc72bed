"""Scoring pipelines: single-entity compute-and-persist and sandbox batch runs."""
from trustscore.pipelines.scoring_pipeline import ScoringPipeline, build_pipeline
from trustscore.pipelines.batch_scoring import (
    SessionNotFoundError,
    create_sandbox_session,
    load_sandbox_session,
    run_batch_scoring,
)

__all__ = [
    "ScoringPipeline",
    "build_pipeline",
    "SessionNotFoundError",
    "create_sandbox_session",
    "load_sandbox_session",
    "run_batch_scoring",
]
