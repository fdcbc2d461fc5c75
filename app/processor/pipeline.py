import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from app.branding.models import GeneratedBrand
from app.catalog.models import ServiceDefinition
from app.generation.models import GenerationOutcome
from app.prompting.models import BuiltPrompt
from app.rendering.models import RenderedPdf
from app.storage.models import StoredDocument


def new_trace_id() -> str:
    return f"trc_{uuid.uuid4().hex[:16]}"


@dataclass(slots=True)
class PipelineContext:
    session_id: str
    slug: str
    trace_id: str = field(default_factory=new_trace_id)
    inputs: dict[str, str] = field(default_factory=dict)
    customer_email: str | None = None
    service: ServiceDefinition | None = None
    built_prompt: BuiltPrompt | None = None
    outcome: GenerationOutcome | None = None
    brand: GeneratedBrand | None = None
    rendered: RenderedPdf | None = None
    document: StoredDocument | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
