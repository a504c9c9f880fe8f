from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


STORAGE_BACKENDS = ("json", "memory", "dynamodb")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    # Runtime
    environment: str = Field(default="development", validation_alias="NODE_ENV")
    port: int = Field(default=8080, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    # json (deployments) or console (local development)
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    # CORS / Frontend
    frontend_base_url: str = Field(
        default="http://localhost:5173", validation_alias="FRONTEND_BASE_URL"
    )
    frontend_url: str | None = Field(default=None, validation_alias="FRONTEND_URL")
    frontend_urls: str | None = Field(default=None, validation_alias="FRONTEND_URLS")

    # Storage
    storage_backend: str = Field(default="json", validation_alias="STORAGE_BACKEND")
    data_dir: str = Field(default="./data", validation_alias="DATA_DIR")
    aws_region: str = Field(default="us-east-1", validation_alias="AWS_REGION")
    ddb_table_name: str | None = Field(default=None, validation_alias="DDB_TABLE_NAME")
    ddb_endpoint_url: str | None = Field(default=None, validation_alias="DDB_ENDPOINT_URL")

    # Identity tokens are issued upstream; we only verify them.
    jwt_secret: str | None = Field(default=None, validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")

    # Observability (OpenTelemetry)
    otel_enabled: bool = Field(default=False, validation_alias="OTEL_ENABLED")
    otel_service_name: str | None = Field(
        default="advisor-connect-backend", validation_alias="OTEL_SERVICE_NAME"
    )
    # OTLP/HTTP endpoint (e.g. http://collector:4318/v1/traces)
    otel_exporter_otlp_endpoint: str | None = Field(
        default=None, validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT"
    )

    # ---- helpers / derived flags ----
    @property
    def normalized_environment(self) -> str:
        v = (self.environment or "").strip().lower()
        if v in ("prod", "production"):
            return "production"
        if v in ("stage", "staging"):
            return "staging"
        if v in ("dev", "development"):
            return "development"
        return v or "development"

    @property
    def is_production(self) -> bool:
        return self.normalized_environment == "production"

    @property
    def normalized_storage_backend(self) -> str:
        v = (self.storage_backend or "").strip().lower()
        if v in ("ddb", "dynamo"):
            return "dynamodb"
        if v in ("file", "files"):
            return "json"
        return v or "json"

    def require_in_production(self) -> None:
        """
        Enforce required settings in production.

        Development/staging may run with partial config for local work.
        """
        if not self.is_production:
            return

        missing: list[str] = []

        if not self.jwt_secret:
            missing.append("JWT_SECRET")

        if self.normalized_storage_backend == "dynamodb" and not self.ddb_table_name:
            missing.append("DDB_TABLE_NAME")

        if missing:
            raise RuntimeError(
                "Missing required production environment variables: "
                + ", ".join(missing)
            )

    def to_log_safe_dict(self) -> dict[str, object]:
        """
        A redacted representation safe for structured logs / diagnostics.
        """
        def _has(v: object) -> bool:
            return v is not None and str(v).strip() != ""

        return {
            "environment": self.normalized_environment,
            "port": self.port,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "frontend": {
                "frontend_base_url": self.frontend_base_url,
                "frontend_url": self.frontend_url,
                "frontend_urls": self.frontend_urls,
            },
            "storage": {
                "backend": self.normalized_storage_backend,
                "data_dir": self.data_dir if self.normalized_storage_backend == "json" else None,
                "aws_region": self.aws_region,
                "ddb_table_name": self.ddb_table_name,
                "ddb_endpoint_url": self.ddb_endpoint_url,
            },
            "auth": {
                "jwt_secret_configured": _has(self.jwt_secret),
                "jwt_algorithm": self.jwt_algorithm,
            },
            "otel": {
                "enabled": bool(self.otel_enabled),
                "service_name": self.otel_service_name,
                "endpoint_configured": _has(self.otel_exporter_otlp_endpoint),
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    s = Settings()
    s.require_in_production()
    return s


# Module-level singleton; read once at import.
settings = get_settings()
