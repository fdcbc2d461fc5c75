from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_CATALOG_DIR = Path(__file__).resolve().parent.parent / "catalog"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000
    public_base_url: str = "http://localhost:8000"

    services_path: Path = _CATALOG_DIR / "services.json"
    prompts_dir: Path = _CATALOG_DIR / "prompts"

    generation_provider: str = "example"
    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_compatible_base_url: str = ""

    generation_timeout_seconds: float = 20.0
    generation_max_retries: int = 2
    retry_backoff_seconds: float = 0.5
    temperature_step: float = 0.1
    template_load_timeout_seconds: float = 2.0
    logo_fetch_timeout_seconds: float = 5.0
    pipeline_deadline_seconds: float = 90.0

    document_ttl_seconds: int = 3600
    status_ttl_seconds: int = 7200
    sweep_interval_seconds: int = 300

    admin_token: str = ""

    extra_blocked_organizations: list[str] = []
    extra_blocked_public_figures: list[str] = []

    @property
    def worst_case_pipeline_seconds(self) -> float:
        """Upper bound of time spent waiting on I/O before rendering finishes."""
        attempts = self.generation_max_retries + 1
        return (
            attempts * self.generation_timeout_seconds
            + self.generation_max_retries * self.retry_backoff_seconds
            + self.template_load_timeout_seconds
            + self.logo_fetch_timeout_seconds
        )

    @model_validator(mode="after")
    def _check_time_budget(self) -> "Settings":
        if self.generation_max_retries < 0:
            raise ValueError("generation_max_retries must be >= 0")
        if self.generation_timeout_seconds <= 0:
            raise ValueError("generation_timeout_seconds must be positive")
        if self.worst_case_pipeline_seconds >= self.pipeline_deadline_seconds:
            raise ValueError(
                f"Generation budget {self.worst_case_pipeline_seconds:.1f}s must be "
                f"shorter than pipeline_deadline_seconds={self.pipeline_deadline_seconds}"
            )
        return self
