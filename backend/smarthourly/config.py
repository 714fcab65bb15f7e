from pydantic_settings import BaseSettings
from typing import List
from pydantic import model_validator


DEFAULT_DOWNTIME_ISSUES = (
    "MES Issue,Machine Breakdown,Material Shortage,Quality Issue,"
    "Power Failure,Manpower Shortage,Other"
)


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./smarthourly.db"
    ENVIRONMENT: str = "development"
    AUTO_CREATE_TABLES: bool = True
    SECRET_KEY: str = "smarthourly-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720
    CORS_ORIGINS: str = "http://localhost:3000"
    DEBUG: bool = True
    APP_NAME: str = "SmartHourly"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    ENABLE_REQUEST_ID: bool = True
    ENABLE_REQUEST_LOGGING: bool = True
    ENABLE_SECURITY_HEADERS: bool = True
    STRICT_TRANSPORT_SECURITY_SECONDS: int = 31536000
    READINESS_CHECK_DATABASE: bool = True

    PLANT_TIMEZONE: str = "Asia/Kolkata"
    PRODUCTION_LINE_COUNT: int = 18
    DOWNTIME_ISSUES: str = DEFAULT_DOWNTIME_ISSUES

    FACTORY_API_BASE_URL: str = "https://api.kushal.kimbal.io"
    FACTORY_API_USER: str = ""
    FACTORY_API_PASS: str = ""
    FACTORY_API_TENANT_ID: str = "1"
    FACTORY_API_TIMEOUT_SECONDS: float = 15.0

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",")]

    @property
    def production_lines(self) -> List[str]:
        return [f"Line-{i:02d}" for i in range(1, self.PRODUCTION_LINE_COUNT + 1)]

    @property
    def downtime_issue_list(self) -> List[str]:
        return [i.strip() for i in self.DOWNTIME_ISSUES.split(",") if i.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in {"prod", "production"}

    @model_validator(mode="after")
    def validate_production_safety(self):
        if not self.is_production:
            return self

        if "sqlite" in self.DATABASE_URL.lower():
            raise ValueError("SQLite is not allowed when ENVIRONMENT is production.")

        if self.SECRET_KEY == "smarthourly-secret-key-change-in-production":
            raise ValueError("Default SECRET_KEY is not allowed in production.")

        if self.AUTO_CREATE_TABLES:
            raise ValueError("AUTO_CREATE_TABLES must be false in production; use Alembic migrations.")

        return self


settings = Settings()
