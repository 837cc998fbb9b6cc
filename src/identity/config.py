import os
from typing import Self
from pydantic import BaseModel, Field, model_validator, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, EnvSettingsSource
from dotenv import load_dotenv

load_dotenv()

JWT_ALGORITHM = "HS256"
JWT_MIN_SECRET_LENGTH = 32
REFRESH_TOKEN_STRATEGIES = ("opaque", "stateless")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class DbSettings(BaseModel):
    url: str = Field(default_factory=lambda: os.getenv("DATABASE_URL", "").strip())
    echo: bool = Field(default_factory=lambda: _env_bool("DATABASE_ECHO"))

    @model_validator(mode="after")
    def _validate(self) -> Self:
        if not self.url:
            raise ValueError("DATABASE_URL environment variable must be set.")
        return self


class JwtSettings(BaseModel):
    secret: str = Field(default_factory=lambda: os.getenv("JWT_SECRET", "").strip())
    issuer: str = Field(default_factory=lambda: os.getenv("JWT_ISSUER", "").strip())
    audience: str = Field(default_factory=lambda: os.getenv("JWT_AUDIENCE", "").strip())
    access_token_expiration_minutes: int = Field(
        default_factory=lambda: int(os.getenv("JWT_ACCESS_TOKEN_EXPIRATION_MINUTES", "30"))
    )
    refresh_token_expiration_days: int = Field(
        default_factory=lambda: int(os.getenv("JWT_REFRESH_TOKEN_EXPIRATION_DAYS", "30"))
    )
    algorithm: str = JWT_ALGORITHM

    @model_validator(mode="after")
    def _validate(self) -> Self:
        missing = [
            name for name, value in [
                ("JWT_SECRET", self.secret),
                ("JWT_ISSUER", self.issuer),
                ("JWT_AUDIENCE", self.audience),
            ] if not value
        ]
        if missing:
            raise ValueError(f"JWT configuration missing required environment variables: {', '.join(missing)}.")
        if len(self.secret) < JWT_MIN_SECRET_LENGTH:
            raise ValueError(f"JWT_SECRET must be at least {JWT_MIN_SECRET_LENGTH} characters long.")
        if self.algorithm != JWT_ALGORITHM:
            raise ValueError(f"Only {JWT_ALGORITHM} signing is supported.")
        if self.access_token_expiration_minutes <= 0:
            raise ValueError("JWT_ACCESS_TOKEN_EXPIRATION_MINUTES must be greater than zero.")
        if self.refresh_token_expiration_days <= 0:
            raise ValueError("JWT_REFRESH_TOKEN_EXPIRATION_DAYS must be greater than zero.")
        return self


class RefreshTokenSettings(BaseModel):
    strategy: str = Field(default_factory=lambda: os.getenv("REFRESH_TOKEN_STRATEGY", "opaque").strip().lower())
    retention_days: int = Field(default_factory=lambda: int(os.getenv("REFRESH_TOKEN_RETENTION_DAYS", "7")))

    @model_validator(mode="after")
    def _validate(self) -> Self:
        if self.strategy not in REFRESH_TOKEN_STRATEGIES:
            raise ValueError(
                f"REFRESH_TOKEN_STRATEGY must be one of: {', '.join(REFRESH_TOKEN_STRATEGIES)}."
            )
        if self.retention_days < 0:
            raise ValueError("REFRESH_TOKEN_RETENTION_DAYS must not be negative.")
        return self


class GoogleAuthSettings(BaseModel):
    # Google login answers "Invalid Google ID token" while the client id is unset
    client_id: str = Field(default_factory=lambda: os.getenv("GOOGLE_CLIENT_ID", "").strip())
    certs_url: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CERTS_URL", "https://www.googleapis.com/oauth2/v3/certs").strip()
    )
    issuers: list[str] = Field(default_factory=lambda: ["accounts.google.com", "https://accounts.google.com"])


class RelaxedEnvSettingsSource(EnvSettingsSource):
    def decode_complex_value(self, field_name, field, value):
        try:
            return super().decode_complex_value(field_name, field, value)
        except Exception:
            return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")
    api_v1_prefix: str = "/api/v1"
    cors_allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=False)
    db: DbSettings = DbSettings()
    jwt: JwtSettings = JwtSettings()
    refresh_tokens: RefreshTokenSettings = RefreshTokenSettings()
    google: GoogleAuthSettings = GoogleAuthSettings()

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value):
        if value is None:
            return ["*"]
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return ["*"]
            if stripped == "*":
                return ["*"]
            return [item.strip() for item in stripped.split(",") if item.strip()]
        if isinstance(value, (list, tuple, set)):
            origins = [str(item).strip() for item in value if str(item).strip()]
            return origins or ["*"]
        raise ValueError("Invalid cors_allowed_origins format; provide comma-separated string or list.")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            RelaxedEnvSettingsSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )


settings = Settings()
