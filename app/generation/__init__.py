from app.generation.client_base import BaseGenerationClient
from app.generation.factory import GenerationClientFactory
from app.generation.orchestrator import RetryOrchestrator

__all__ = ["BaseGenerationClient", "GenerationClientFactory", "RetryOrchestrator"]
