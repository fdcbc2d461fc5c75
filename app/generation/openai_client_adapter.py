import httpx
import openai

from app.generation.client_base import BaseGenerationClient
from app.generation.exceptions import (
    EmptyResponseError,
    GenerationTimeoutError,
    GenerationTransportError,
)


class OpenAIClientAdapter(BaseGenerationClient):
    """Generation client adapter built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    async def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool = False,
    ) -> str:
        extra: dict[str, object] = {}
        if json_mode:
            extra["response_format"] = {"type": "json_object"}
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **extra,
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise GenerationTimeoutError(f"AI provider timeout: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise GenerationTransportError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise GenerationTransportError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise EmptyResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None or not content.strip():
            raise EmptyResponseError("AI returned empty response")
        return content.strip()
