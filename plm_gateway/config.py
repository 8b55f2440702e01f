"""
Configuration Management
Environment-based settings for the remote PLM system, local tokens and logging
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

from plm_gateway.utils.errors import ConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_JWT_SECRET = "default-secret-CHANGE-ME-IN-PRODUCTION"
SEARCH_MAX_RESULTS_LIMIT = 1000
SEARCH_DEFAULT_MAX_RESULTS = 50


class TeamcenterEndpoints(BaseModel):
    """Fixed REST endpoint paths of the remote system"""
    sessions: str = "/tc/rest/sessions"
    items: str = "/tc/rest/items"
    search: str = "/tc/rest/query"
    saved_queries: str = "/tc/rest/query/saved"


class Settings(BaseSettings):
    # App config
    app_name: str = "PLM Gateway"
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # Remote PLM system
    tc_base_url: str = "http://localhost:8080"
    tc_timeout: float = 30.0
    tc_username: str = ""
    tc_password: str = ""
    endpoints: TeamcenterEndpoints = TeamcenterEndpoints()

    # JWT
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expiration: int = 3600

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    logging_config_path: str = ""

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Search limits
    search_max_results: int = SEARCH_MAX_RESULTS_LIMIT
    search_default_max_results: int = SEARCH_DEFAULT_MAX_RESULTS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def endpoint_url(self, name: str) -> str:
        """Return the absolute URL of a named remote endpoint"""
        path = getattr(self.endpoints, name, None)
        if path is None:
            raise KeyError(f"Unknown endpoint: {name}")
        return f"{self.tc_base_url.rstrip('/')}{path}"

    def log_config(self):
        """Log configuration (without sensitive data)"""
        logger.info(
            "Gateway configuration",
            environment=self.environment,
            tc_base_url=self.tc_base_url,
            tc_timeout=self.tc_timeout,
            jwt_expiration=self.jwt_expiration,
            log_level=self.log_level,
        )


def validate_settings(settings: Settings) -> None:
    """
    Fail fast on missing or insecure configuration

    Raises:
        ConfigurationError: listing every problem found
    """
    errors = []

    if not settings.tc_base_url:
        errors.append("TC_BASE_URL is not set")
    if not settings.tc_username:
        errors.append("TC_USERNAME is not set")
    if not settings.tc_password:
        errors.append("TC_PASSWORD is not set")
    if not settings.jwt_secret or settings.jwt_secret == DEFAULT_JWT_SECRET:
        errors.append("JWT_SECRET is not set or uses the default value (insecure)")
    if settings.tc_timeout <= 0:
        errors.append("TC_TIMEOUT must be positive")
    if settings.jwt_expiration <= 0:
        errors.append("JWT_EXPIRATION must be positive")

    if errors:
        raise ConfigurationError(
            "Configuration error:\n" + "\n".join(f"  - {e}" for e in errors),
            details={"errors": errors},
        )


@lru_cache
def get_settings() -> Settings:
    """Get application settings singleton"""
    return Settings()
