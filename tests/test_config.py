"""Tests for environment-driven settings."""

from orchestrator.core.config import Settings
from orchestrator.core.constants import AgentType


class TestSettings:
    def test_database_urls(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_SERVER", "db")
        monkeypatch.setenv("POSTGRES_DB", "runs")
        settings = Settings(_env_file=None)

        assert settings.DATABASE_URL.startswith("postgresql+asyncpg://")
        assert settings.DATABASE_URL.endswith("@db:5432/runs")
        assert settings.DATABASE_URL_SYNC.startswith("postgresql://")

    def test_agent_endpoints_skip_unset(self, monkeypatch):
        monkeypatch.setenv("AGENT_HEALTH_URL", "http://health:8080/")
        monkeypatch.setenv("AGENT_CONTENT_URL", "")
        monkeypatch.delenv("AGENT_GITHUB_URL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.agent_endpoints == {AgentType.HEALTH: "http://health:8080"}

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DELEGATION_TIMEOUT_SECONDS", raising=False)
        monkeypatch.delenv("RECENT_RUNS_LIMIT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.DELEGATION_TIMEOUT_SECONDS == 30.0
        assert settings.RECENT_RUNS_LIMIT == 50
