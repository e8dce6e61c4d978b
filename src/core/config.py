from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Environment setting
    ENVIRONMENT: str = Field(
        "development", description="Environment: development, staging, production"
    )

    # API settings
    API_PREFIX: str = Field("")
    DEBUG: bool = Field(False)
    ALLOWED_ORIGINS: str = Field("*")

    # Database settings
    DB_HOST: str = Field("localhost")
    DB_PORT: int = Field(5432)
    DB_USER: str = Field("")
    DB_PASSWORD: str = Field("")
    DB_NAME: str = Field("dental_clinic")
    DB_DRIVER: str = Field("postgresql+asyncpg")
    DB_POOL_TIMEOUT: int = Field(30)

    SQLITE_MODE: bool = False
    CREATE_TABLES_ON_STARTUP: bool = True

    # Redis settings
    REQUIRE_REDIS: bool = False
    CACHE_ENABLED: bool = True
    CACHE_EXPIRE_SECONDS: int = Field(300)

    REDIS_HOST: str = Field("localhost")
    REDIS_PORT: int = Field(6379)
    REDIS_PASSWORD: str = Field("")
    REDIS_DB: int = Field(0)

    # Jwt Security settings
    SECRET_KEY: str = Field("change-me")
    ALGORITHM: str = Field("HS256")
    ACCESS_TOKEN_EXPIRE: int = Field(60, description="Access token lifetime in minutes")

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = Field(True)
    LOGIN_RATE_LIMIT: str = Field("10/minute")
    PASSWORD_RESET_RATE_LIMIT: str = Field("5/minute")

    # Password reset
    PASSWORD_RESET_EXPIRE_MINUTES: int = Field(60)

    # Debug tooling, never active in production
    DEBUG_TOOLS_ENABLED: bool = Field(False)

    # Scheduling
    BUSINESS_DAY_START: str = Field("08:00")
    BUSINESS_DAY_END: str = Field("19:00")

    # Logging
    LOG_FILE: Optional[str] = Field(None)

    # Uvicorn settings
    UVICORN_HOST: str = Field("0.0.0.0")
    UVICORN_PORT: int = Field(8000)
    WORKERS_COUNT: int = Field(1)
    RELOAD: bool = Field(False)

    @property
    def POSTGRESQL_DATABASE_URL(self) -> str:
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def SQLITE_DATABASE_URL(self) -> str:
        return f"sqlite+aiosqlite:///{self.DB_NAME}.db"

    @property
    def DATABASE_URL(self) -> str:
        return (
            self.SQLITE_DATABASE_URL
            if self.SQLITE_MODE
            else self.POSTGRESQL_DATABASE_URL
        )

    @property
    def REDIS_CACHE_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def SHARED_CACHE_REQUIRED(self) -> bool:
        """Several workers only see each other's cache invalidations through Redis"""
        multi_worker = self.WORKERS_COUNT > 1 and not self.RELOAD
        return self.REQUIRE_REDIS or multi_worker

    @property
    def DEBUG_CONTEXT_ACTIVE(self) -> bool:
        return self.DEBUG_TOOLS_ENABLED and self.ENVIRONMENT != "production"

    @field_validator("ALLOWED_ORIGINS")
    def validate_origins(cls, v: str) -> List[str]:
        return v.split(",") if v else []

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
