import asyncio

from app.branding.brand import BrandGenerator
from app.catalog.exceptions import ServiceNotFoundError
from app.catalog.models import ServiceCatalog
from app.generation.exceptions import GenerationFailedError
from app.generation.orchestrator import RetryOrchestrator
from app.logging.logger import GenerationStep, Log
from app.processor.pipeline import PipelineContext, PipelineStep
from app.prompting.builder import PromptBuilder
from app.rendering.content import content_from_generation
from app.rendering.logo_loader import LogoLoader
from app.rendering.renderer import PdfRenderer
from app.storage.base import BaseDocumentStore
from app.storage.models import DocumentMetadata


class BuildPromptStep(PipelineStep):
    def __init__(self, catalog: ServiceCatalog, prompt_builder: PromptBuilder) -> None:
        self._catalog = catalog
        self._prompt_builder = prompt_builder

    async def run(self, context: PipelineContext) -> PipelineContext:
        service = self._catalog.get(context.slug)
        if service is None:
            raise ServiceNotFoundError(f"Service not found: {context.slug}")
        context.service = service
        context.built_prompt = await self._prompt_builder.build(
            context.slug, context.inputs, trace_id=context.trace_id
        )
        return context


class GenerateContentStep(PipelineStep):
    def __init__(self, retry_orchestrator: RetryOrchestrator) -> None:
        self._retry_orchestrator = retry_orchestrator

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.built_prompt is None:
            raise ValueError("PipelineContext.built_prompt must be set before generation")
        outcome = await self._retry_orchestrator.run(context.built_prompt, trace_id=context.trace_id)
        context.outcome = outcome
        if not outcome.success:
            raise GenerationFailedError(
                outcome.error or "Content generation failed",
                raw_response=outcome.raw_response,
                retries=outcome.retries,
            )
        Log.info(
            f"Content validated after {outcome.retries} retries"
            f"{' (repaired)' if outcome.repair_attempted else ''}",
            trace_id=context.trace_id,
            session_id=context.session_id,
            service=context.slug,
            step=GenerationStep.CONTENT_VALIDATED,
        )
        return context


class BrandStep(PipelineStep):
    def __init__(self, brand_generator: BrandGenerator) -> None:
        self._brand_generator = brand_generator

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.service is None or context.built_prompt is None:
            raise ValueError("PipelineContext.service must be set before branding")
        sanitized = context.built_prompt.sanitized_inputs
        org_field = context.service.organization_field
        organization = sanitized.get(org_field.name) if org_field else None
        context.brand = self._brand_generator.generate(
            context.slug,
            organization_name=organization,
            sanitized=org_field is not None and sanitized.was_sanitized(org_field.name),
        )
        return context


class RenderStep(PipelineStep):
    def __init__(self, renderer: PdfRenderer, logo_loader: LogoLoader) -> None:
        self._renderer = renderer
        self._logo_loader = logo_loader

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.service is None or context.outcome is None or context.outcome.data is None:
            raise ValueError("PipelineContext.outcome must hold content before rendering")
        logo_bytes = await self._logo_loader.load(context.service.logo_url, trace_id=context.trace_id)
        sanitized = context.built_prompt.sanitized_inputs if context.built_prompt else None
        context.rendered = await asyncio.to_thread(
            self._renderer.render,
            context.service,
            content_from_generation(context.outcome.data),
            context.brand,
            sanitized,
            logo_bytes,
            context.trace_id,
        )
        return context


class StoreDocumentStep(PipelineStep):
    def __init__(self, document_store: BaseDocumentStore) -> None:
        self._document_store = document_store

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.rendered is None:
            raise ValueError("PipelineContext.rendered must be set before storing")
        metadata = DocumentMetadata(
            service_slug=context.slug,
            session_id=context.session_id,
            trace_id=context.trace_id,
            user_id=context.customer_email,
            filename=f"{context.slug}-{context.rendered.case_reference}.pdf",
        )
        context.document = self._document_store.put(context.rendered.pdf_bytes, metadata)
        Log.info(
            f"Stored document {context.document.document_id} "
            f"({context.document.size_bytes} bytes)",
            trace_id=context.trace_id,
            session_id=context.session_id,
            service=context.slug,
            step=GenerationStep.PDF_STORED,
        )
        return context
