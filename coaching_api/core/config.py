import base64
from hashlib import sha256
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, List, Dict
from datetime import timedelta

class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "Coaching Institute Management API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    PRODUCTION: bool = False

    # Database Settings
    DATABASE_URL: str = Field(...)
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Authentication Settings
    SECRET_KEY: str = Field(...)
    ALGORITHM: str = "HS256"
    TOKEN_ISSUER: str = "coaching_institute_api"

    # Token lifetime per login surface, in minutes
    TOKEN_TTL_MINUTES: Dict[str, int] = Field(
        default={
            "register": 60,
            "parent_register": 60,
            "teacher_register": 60,
            "login": 60,
            "student_login": 24 * 60,
            "parent_login": 24 * 60,
            "teacher_login": 24 * 60,
        }
    )
    DEFAULT_TOKEN_TTL_MINUTES: int = 60

    # Password Settings
    PASSWORD_HASH_ROUNDS: int = 12
    MIN_PASSWORD_LENGTH: int = 6

    # CORS Settings
    ALLOWED_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ]
    )

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @field_validator('SECRET_KEY')
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Stretch short keys so HS256 always gets at least 32 bytes"""
        raw = v.encode()
        if len(raw) < 32:
            raw = sha256(raw).digest()
            return base64.urlsafe_b64encode(raw).decode()
        return v

    @field_validator('ALLOWED_ORIGINS', mode='before')
    @classmethod
    def parse_allowed_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )

# Initialize settings
settings = Settings()

# Helper Functions
def get_token_expires_delta(surface: Optional[str] = None) -> timedelta:
    minutes = settings.TOKEN_TTL_MINUTES.get(surface, settings.DEFAULT_TOKEN_TTL_MINUTES)
    return timedelta(minutes=minutes)

def get_database_url() -> str:
    return settings.DATABASE_URL

def get_jwt_settings() -> dict:
    return {
        "secret_key": settings.SECRET_KEY,
        "algorithm": settings.ALGORITHM,
        "token_issuer": settings.TOKEN_ISSUER,
    }

def get_engine_options() -> dict:
    options = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    # SQLite drivers use a static or null pool that rejects sizing arguments
    if not settings.DATABASE_URL.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    return options

def get_logging_config() -> Dict[str, Optional[str]]:
    return {
        "log_level": settings.LOG_LEVEL,
        "log_dir": settings.LOG_DIR
    }
