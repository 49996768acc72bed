"""Tests for the HTTP API."""
import inspect
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from trustscore.database.orm import EmployerAccount
from trustscore.models import ScoringFailure
from trustscore.pipelines import create_sandbox_session
from trustscore.routers import health
from trustscore.services import EnvironmentIsolationError


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"] == {"database": "healthy", "redis": "healthy"}

    def test_redis_down_is_degraded(self, client, mock_redis):
        mock_redis.health_check.return_value = (False, "Connection refused")
        response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["dependencies"]["redis"] == "unhealthy: Connection refused"

    def test_route_is_sync(self):
        assert not inspect.iscoroutinefunction(health.health_check)

    def test_database_down_is_degraded(self, client):
        error = OperationalError("SELECT 1", {}, Exception("no route to host"))
        with patch("trustscore.routers.health.get_engine", side_effect=error):
            response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["dependencies"]["database"].startswith("unhealthy")


class TestScoreEndpoints:
    """Tests for production scoring endpoints."""

    def test_risk_then_latest(self, client, seed_profile):
        seed_profile("E1")
        response = client.post("/api/v1/entities/E1/risk")
        assert response.status_code == 200
        overall = response.json()["overall"]
        assert response.json()["model_version"] == "1.0"

        latest = client.get("/api/v1/entities/E1/scores/risk")
        assert latest.status_code == 200
        body = latest.json()
        assert body["value"] == overall
        assert body["environment"] == "production"
        assert body["sandbox_session_id"] is None

    def test_latest_unknown_is_404(self, client):
        response = client.get("/api/v1/entities/nobody/scores/risk")
        assert response.status_code == 404

    def test_unknown_score_type_is_422(self, client):
        response = client.get("/api/v1/entities/E1/scores/popularity")
        assert response.status_code == 422

    def test_weighted_risk_with_tenant(self, client, seed_profile, seed):
        seed_profile("E1")
        seed(EmployerAccount(id="EMP1", industry_key="retail"))
        response = client.post("/api/v1/entities/E1/risk", params={"tenant_id": "EMP1"})
        assert response.status_code == 200
        assert response.json()["model_version"] == "enterprise-1"

    def test_team_fit_requires_tenant(self, client):
        response = client.post("/api/v1/entities/E1/team-fit")
        assert response.status_code == 422

    def test_team_fit_without_data_is_null(self, client):
        response = client.post("/api/v1/entities/nobody/team-fit", params={"tenant_id": "EMP1"})
        assert response.status_code == 200
        assert response.json() is None

    def test_team_fit(self, client, seed_profile, seed):
        seed_profile("E1")
        seed(EmployerAccount(id="EMP1", industry_key="retail"))
        response = client.post("/api/v1/entities/E1/team-fit", params={"tenant_id": "EMP1"})
        assert response.status_code == 200
        assert 0 <= response.json()["alignment_score"] <= 100

    def test_hiring_confidence_neutral(self, client):
        response = client.post("/api/v1/entities/nobody/hiring-confidence")
        assert response.status_code == 200
        assert response.json()["composite_score"] == 50

    def test_profile_strength(self, client, seed_profile):
        seed_profile("E1")
        response = client.post("/api/v1/entities/E1/profile-strength")
        assert response.status_code == 200
        assert response.json()["model_version"] == "v1"

    def test_profile_strength_unknown_version(self, client):
        response = client.post("/api/v1/entities/E1/profile-strength", params={"version": "v9"})
        assert response.status_code == 422

    def test_scoring_failure_is_502(self, client):
        failure = ScoringFailure(stage="fetch", error="connection lost", entity_id="E1")
        with patch("trustscore.pipelines.ScoringPipeline.compute_and_persist_risk", return_value=failure):
            response = client.post("/api/v1/entities/E1/risk")
        assert response.status_code == 502
        assert response.json()["stage"] == "fetch"
        assert response.json()["error_code"] == "scoring_failed"


class TestSandboxEndpoints:
    """Tests for sandbox session endpoints."""

    def test_create_and_run(self, client, seed_profile):
        response = client.post(
            "/api/v1/sandbox/sessions",
            json={"industry": "retail", "ttl_minutes": 30, "entity_ids": ["E1"]},
        )
        assert response.status_code == 201
        session_id = response.json()["session_id"]
        seed_profile("E1", namespace=session_id)

        run = client.post(f"/api/v1/sandbox/sessions/{session_id}/run")
        assert run.status_code == 200
        assert run.json()["succeeded"] == 1

        latest = client.get("/api/v1/entities/E1/scores/risk",
                            params={"sandbox_session_id": session_id})
        assert latest.status_code == 200
        assert latest.json()["environment"] == "sandbox"
        assert client.get("/api/v1/entities/E1/scores/risk").status_code == 404

    def test_invalid_ttl(self, client):
        response = client.post("/api/v1/sandbox/sessions", json={"ttl_minutes": 0})
        assert response.status_code == 422

    def test_run_unknown_session(self, client):
        response = client.post("/api/v1/sandbox/sessions/missing/run")
        assert response.status_code == 404

    def test_run_expired_session(self, client, session_factory):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        env = create_sandbox_session(session_factory, ttl_minutes=30, entity_ids=["E1"], now=past)
        response = client.post(f"/api/v1/sandbox/sessions/{env.session_id}/run")
        assert response.status_code == 409

    def test_run_without_profiles(self, client, session_factory):
        env = create_sandbox_session(session_factory, ttl_minutes=30)
        response = client.post(f"/api/v1/sandbox/sessions/{env.session_id}/run")
        assert response.status_code == 400

    def test_isolation_violation_is_500(self, client):
        with patch("trustscore.routers.sandbox.run_batch_scoring",
                   side_effect=EnvironmentIsolationError("cross-environment write")):
            response = client.post("/api/v1/sandbox/sessions/any/run")
        assert response.status_code == 500
        assert response.json()["detail"] == "Environment isolation violation"
