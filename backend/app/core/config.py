from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from functools import lru_cache


class Settings(BaseSettings):
    # core
    ENV: str = "dev"
    API_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Company Registry API"

    # server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # database
    # A full SQLAlchemy URL wins over the individual POSTGRES_* parts
    DATABASE_URL: str | None = None
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "company_registry"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "password"
    DB_ECHO: bool = False
    # Create tables on startup instead of relying on alembic (local runs, tests)
    DB_AUTO_CREATE: bool = False

    # cors
    FRONTEND_ORIGIN: str | None = None
    # Explicit debug-only switch for wide-open CORS in non-prod envs
    CORS_ALLOW_ALL_ORIGINS: bool = False

    # logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        ).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
