from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SECRET_KEY = "django-insecure-change-me"
DEV_JWT_SECRET = "change-me-jwt-secret"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="allow")

    # Django
    SECRET_KEY: str = DEV_SECRET_KEY
    DEBUG: bool = False
    ALLOWED_HOSTS: str = "*"
    TIME_ZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    # MongoDB (empty URI -> in-memory store, DEBUG only)
    MONGODB_URI: str = ""
    MONGODB_DB_NAME: str = "taskboard"
    MONGODB_TIMEOUT_MS: int = 5000

    # JWT
    JWT_SECRET: str = DEV_JWT_SECRET
    JWT_ISSUER: str = "taskboard"
    JWT_AUDIENCE: str = "taskboard-users"
    ACCESS_TOKEN_MINUTES: int = 15
    REFRESH_TOKEN_DAYS: int = 7

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    @model_validator(mode="after")
    def require_real_secrets(self):
        # the built-in secrets are for local DEBUG runs only
        if not self.DEBUG:
            if self.SECRET_KEY == DEV_SECRET_KEY:
                raise ValueError("SECRET_KEY must be set when DEBUG is off")
            if self.JWT_SECRET == DEV_JWT_SECRET:
                raise ValueError("JWT_SECRET must be set when DEBUG is off")
        return self


settings = Settings()
