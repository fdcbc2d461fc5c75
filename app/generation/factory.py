from typing import ClassVar

from app.config.settings import Settings
from app.generation.client_base import BaseGenerationClient
from app.generation.example_client_adapter import ExampleClientAdapter
from app.generation.openai_client_adapter import OpenAIClientAdapter
from app.generation.orchestrator import RetryOrchestrator


class GenerationClientFactory:
    """Creates the configured generation client and retry orchestrator."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create_client(cls, settings: Settings) -> BaseGenerationClient:
        """Create a provider client from application settings."""
        provider = settings.generation_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        base_url = cls._resolve_base_url(provider, settings)
        api_key = settings.openai_api_key
        if not api_key and provider == "ollama":
            # local ollama ignores the key but the SDK refuses an empty one
            api_key = "ollama"
        return OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.generation_timeout_seconds,
            base_url=base_url,
        )

    @classmethod
    def create_orchestrator(cls, settings: Settings) -> RetryOrchestrator:
        """Create a retry orchestrator bound to the configured client and budget."""
        provider = settings.generation_provider.lower()
        return RetryOrchestrator(
            client=cls.create_client(settings),
            model="example" if provider == "example" else settings.openai_model_name,
            max_retries=settings.generation_max_retries,
            timeout_seconds=settings.generation_timeout_seconds,
            backoff_seconds=settings.retry_backoff_seconds,
            temperature_step=settings.temperature_step,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "openai_compatible_base_url is required for "
                    "generation_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown generation provider '{provider}'. Choose from: {supported}"
        )
