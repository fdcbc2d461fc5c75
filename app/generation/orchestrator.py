"""Generate-validate-repair-retry loop around a generation client."""

import asyncio

from app.generation.client_base import BaseGenerationClient
from app.generation.exceptions import EmptyResponseError, GenerationError, GenerationTimeoutError
from app.generation.models import GenerationAttempt, GenerationOutcome
from app.generation.validator import BaseContentValidator, validator_for
from app.logging.logger import GenerationStep, Log
from app.prompting.models import BuiltPrompt


class RetryOrchestrator:
    """Drives a generation client through bounded attempts.

    Attempt n runs at temperature max(0, initial - step * (n - 1)); attempts
    after the first append the validator's strict directive to the system
    instruction. Timeouts advance to the next attempt immediately, other
    failures wait ``backoff_seconds`` first. The run never raises: the final
    state is reported through GenerationOutcome.
    """

    def __init__(
        self,
        *,
        client: BaseGenerationClient,
        model: str,
        max_retries: int = 2,
        timeout_seconds: float = 20.0,
        backoff_seconds: float = 0.5,
        temperature_step: float = 0.1,
    ) -> None:
        self._client = client
        self._model = model
        self._max_retries = max(0, max_retries)
        self._timeout_seconds = timeout_seconds
        self._backoff_seconds = backoff_seconds
        self._temperature_step = temperature_step

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    async def run(
        self,
        built: BuiltPrompt,
        validator: BaseContentValidator | None = None,
        trace_id: str | None = None,
    ) -> GenerationOutcome:
        if validator is None:
            validator = validator_for(built.output_mode, built.required_keys)

        attempts: list[GenerationAttempt] = []
        last_error: str | None = None
        last_raw: str | None = None
        repair_attempted = False

        for number in range(1, self.max_attempts + 1):
            attempt = self._make_attempt(built, validator, number)
            attempts.append(attempt)
            Log.info(
                f"Generation attempt {number}/{self.max_attempts} "
                f"at temperature {attempt.temperature}",
                trace_id=trace_id,
                step=GenerationStep.RETRY_ATTEMPT,
            )

            try:
                raw = await asyncio.wait_for(
                    self._client.create_completion(
                        model=self._model,
                        temperature=attempt.temperature,
                        max_tokens=attempt.max_tokens,
                        system_prompt=attempt.system_prompt,
                        user_prompt=attempt.prompt,
                        json_mode=validator.json_mode,
                    ),
                    timeout=self._timeout_seconds,
                )
            except (asyncio.TimeoutError, GenerationTimeoutError) as exc:
                last_error = f"Generation timed out after {self._timeout_seconds}s"
                Log.warning(f"Attempt {number} timed out: {exc}", trace_id=trace_id)
                continue
            except EmptyResponseError as exc:
                last_error, last_raw = str(exc), ""
                Log.warning(f"Attempt {number} failed: {exc}", trace_id=trace_id)
                await self._backoff(number)
                continue
            except GenerationError as exc:
                last_error = str(exc)
                Log.warning(f"Attempt {number} failed: {exc}", trace_id=trace_id)
                await self._backoff(number)
                continue
            except Exception as exc:
                last_error = f"Unexpected generation failure: {exc}"
                Log.exception(f"Attempt {number} raised unexpectedly", trace_id=trace_id)
                await self._backoff(number)
                continue

            last_raw = raw
            if not raw.strip():
                last_error = "Empty response from provider"
                Log.warning(f"Attempt {number} returned an empty response", trace_id=trace_id)
                await self._backoff(number)
                continue

            Log.debug(f"Raw response for attempt {number}:\n{raw}", trace_id=trace_id)
            result = validator.validate(raw)
            repair_attempted = repair_attempted or result.repair_attempted
            if result.success:
                return GenerationOutcome(
                    success=True,
                    data=result.data,
                    retries=number - 1,
                    repair_attempted=result.repair_attempted,
                    raw_response=raw,
                    attempts=tuple(attempts),
                )

            last_error = result.error
            Log.warning(f"Attempt {number} failed validation: {result.error}", trace_id=trace_id)
            await self._backoff(number)

        Log.error(
            f"All {self.max_attempts} generation attempts failed: {last_error}\n"
            f"Last raw response:\n{last_raw}",
            trace_id=trace_id,
            step=GenerationStep.GENERATION_FAILED,
        )
        return GenerationOutcome(
            success=False,
            error=last_error,
            retries=self.max_attempts - 1,
            repair_attempted=repair_attempted,
            raw_response=last_raw,
            attempts=tuple(attempts),
        )

    def temperature_for(self, initial: float, attempt_number: int) -> float:
        lowered = initial - self._temperature_step * (attempt_number - 1)
        return max(0.0, round(lowered, 2))

    def _make_attempt(
        self,
        built: BuiltPrompt,
        validator: BaseContentValidator,
        number: int,
    ) -> GenerationAttempt:
        system_prompt = validator.system_instruction
        if number > 1:
            system_prompt = f"{system_prompt}\n\nAttempt {number}: {validator.strict_directive}"
        return GenerationAttempt(
            prompt=built.prompt,
            system_prompt=system_prompt,
            temperature=self.temperature_for(built.temperature, number),
            max_tokens=built.max_tokens,
            attempt_number=number,
        )

    async def _backoff(self, number: int) -> None:
        if number < self.max_attempts and self._backoff_seconds > 0:
            await asyncio.sleep(self._backoff_seconds)
