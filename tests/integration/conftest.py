from collections.abc import AsyncGenerator, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from app.config.settings import Settings
from app.generation.client_base import BaseGenerationClient
from app.generation.orchestrator import RetryOrchestrator
from app.processor.container import Container, build_container

ContainerFactory = Callable[[list[str]], Container]


@pytest.fixture
def integration_settings() -> Settings:
    return Settings(
        _env_file=None,
        public_base_url="https://docs.example",
        generation_provider="example",
        retry_backoff_seconds=0,
    )


@pytest.fixture
def logo_transport(png_logo_bytes: bytes) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(".png"):
            return httpx.Response(200, content=png_logo_bytes, headers={"content-type": "image/png"})
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest_asyncio.fixture
async def pipeline_factory(
    integration_settings: Settings,
    logo_transport: httpx.MockTransport,
) -> AsyncGenerator[tuple[ContainerFactory, list[MagicMock]], None]:
    """Build containers whose generation client replays the given responses in order."""
    clients: list[MagicMock] = []
    containers: list[Container] = []
    logo_client = httpx.AsyncClient(transport=logo_transport)

    def factory(responses: list[str]) -> Container:
        client = MagicMock(spec=BaseGenerationClient)
        client.create_completion = AsyncMock(side_effect=responses)
        clients.append(client)
        retry_orchestrator = RetryOrchestrator(
            client=client,
            model="test-model",
            max_retries=integration_settings.generation_max_retries,
            timeout_seconds=integration_settings.generation_timeout_seconds,
            backoff_seconds=0,
        )
        container = build_container(
            integration_settings,
            retry_orchestrator=retry_orchestrator,
            logo_client=logo_client,
        )
        containers.append(container)
        return container

    yield factory, clients

    for container in containers:
        await container.aclose()
    await logo_client.aclose()
