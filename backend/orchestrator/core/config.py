"""
Pydantic Settings: centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings

from orchestrator.core.constants import AgentType


class Settings(BaseSettings):
    # ── Database ──────────────────────────────
    POSTGRES_USER: str = "orchestrator_user"
    POSTGRES_PASSWORD: str = "orchestrator_pass"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "orchestrator_db"

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for app runtime (asyncpg)."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Sync URL for Alembic migrations (psycopg2)."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Redis / Celery ────────────────────────
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # ── Worker agents ─────────────────────────
    # Base URL of each worker; an empty value means "not deployed".
    AGENT_HEALTH_URL: str = ""
    AGENT_CONTENT_URL: str = ""
    AGENT_GITHUB_URL: str = ""
    DELEGATION_TIMEOUT_SECONDS: float = 30.0

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    RECENT_RUNS_LIMIT: int = 50

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}

    @property
    def agent_endpoints(self) -> dict[AgentType, str]:
        """Configured worker base URLs keyed by agent type."""
        urls = {
            AgentType.HEALTH: self.AGENT_HEALTH_URL,
            AgentType.CONTENT: self.AGENT_CONTENT_URL,
            AgentType.GITHUB: self.AGENT_GITHUB_URL,
        }
        return {agent: url.rstrip("/") for agent, url in urls.items() if url}


settings = Settings()
