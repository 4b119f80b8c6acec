from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Source (Supabase / PostgREST, read-only)
    supabase_url: str | None = None
    supabase_service_key: SecretStr | None = None

    # Target (Azure Database for PostgreSQL)
    azure_postgresql_connection_string: SecretStr | None = None
    target_sslmode: str = "require"

    # Migration
    migration_batch_size: int = 1000
    migration_report_dir: str = "."
    log_level: str = "info"

    @field_validator("migration_batch_size")
    @classmethod
    def _positive_batch_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("migration_batch_size must be a positive integer")
        return value

    @property
    def source_rest_url(self) -> str | None:
        if not self.supabase_url:
            return None
        return f"{self.supabase_url.rstrip('/')}/rest/v1"

    @property
    def target_db_url(self) -> str | None:
        if self.azure_postgresql_connection_string is None:
            return None
        url = self.azure_postgresql_connection_string.get_secret_value()
        if not url:
            return None
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+psycopg2://" + url[len(prefix):]
        return url


settings = Settings()
