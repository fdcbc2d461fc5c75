from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

import httpx

from app.branding.brand import BrandGenerator
from app.catalog.loader import load_catalog
from app.catalog.models import ServiceCatalog
from app.config.settings import Settings
from app.generation.factory import GenerationClientFactory
from app.generation.orchestrator import RetryOrchestrator
from app.processor.events import PaymentEventHandler
from app.processor.orchestrator import PipelineOrchestrator
from app.processor.steps import (
    BrandStep,
    BuildPromptStep,
    GenerateContentStep,
    RenderStep,
    StoreDocumentStep,
)
from app.prompting.builder import PromptBuilder
from app.rendering.logo_loader import LogoLoader
from app.rendering.renderer import PdfRenderer
from app.sanitization.factory import SanitizerFactory
from app.storage.document_store import InMemoryDocumentStore
from app.storage.status_store import InMemoryStatusStore


@dataclass
class Container:
    """Long-lived collaborators shared by the HTTP surface and the sweeper."""

    settings: Settings
    catalog: ServiceCatalog
    status_store: InMemoryStatusStore
    document_store: InMemoryDocumentStore
    logo_loader: LogoLoader
    orchestrator: PipelineOrchestrator
    event_handler: PaymentEventHandler

    async def aclose(self) -> None:
        await self.orchestrator.shutdown()
        await self.logo_loader.aclose()
        self.status_store.clear()
        self.document_store.clear()


def build_container(
    settings: Settings,
    *,
    retry_orchestrator: RetryOrchestrator | None = None,
    logo_client: httpx.AsyncClient | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Container:
    """Build the pipeline and stores with all required adapters."""
    catalog = load_catalog(settings.services_path)
    sanitizer = SanitizerFactory.create(settings)
    prompt_builder = PromptBuilder(
        catalog=catalog,
        sanitizer=sanitizer,
        prompts_dir=settings.prompts_dir,
        template_timeout_seconds=settings.template_load_timeout_seconds,
    )
    brand_generator = BrandGenerator(
        sanitizer,
        default_names={slug: s.default_organization for slug, s in catalog.services.items()},
    )
    renderer = PdfRenderer(document_headers=catalog.document_headers, clock=clock)
    logo_loader = LogoLoader(
        timeout_seconds=settings.logo_fetch_timeout_seconds,
        client=logo_client,
    )

    store_kwargs = {"clock": clock} if clock is not None else {}
    status_store = InMemoryStatusStore(
        ttl=timedelta(seconds=settings.status_ttl_seconds), **store_kwargs
    )
    document_store = InMemoryDocumentStore(
        ttl=timedelta(seconds=settings.document_ttl_seconds), **store_kwargs
    )

    steps = [
        BuildPromptStep(catalog, prompt_builder),
        GenerateContentStep(
            retry_orchestrator or GenerationClientFactory.create_orchestrator(settings)
        ),
        BrandStep(brand_generator),
        RenderStep(renderer, logo_loader),
        StoreDocumentStep(document_store),
    ]
    orchestrator = PipelineOrchestrator(
        steps,
        status_store,
        deadline_seconds=settings.pipeline_deadline_seconds,
        public_base_url=settings.public_base_url,
    )
    return Container(
        settings=settings,
        catalog=catalog,
        status_store=status_store,
        document_store=document_store,
        logo_loader=logo_loader,
        orchestrator=orchestrator,
        event_handler=PaymentEventHandler(catalog, orchestrator, status_store),
    )
