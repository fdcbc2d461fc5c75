import asyncio
from pathlib import Path

from app.catalog.exceptions import TemplateNotFoundError

_DEFAULT_PROMPT_DIR = Path(__file__).resolve().parent.parent / "catalog" / "prompts"


async def load_prompt_template(
    template_ref: str,
    prompts_dir: Path | None = None,
    timeout_seconds: float = 2.0,
) -> str:
    """Load a service prompt template without blocking the event loop.

    Args:
        template_ref: File name of the template inside the prompts directory.
        prompts_dir: Directory holding the templates.
                     Defaults to the bundled catalog/prompts.
        timeout_seconds: Upper bound on the file read.

    Returns:
        The raw template string with {{field}} placeholders.

    Raises:
        TemplateNotFoundError: if the file is missing, unreadable or the read times out.
    """
    if prompts_dir is None:
        prompts_dir = _DEFAULT_PROMPT_DIR
    if not template_ref or Path(template_ref).name != template_ref:
        raise TemplateNotFoundError(f"Invalid prompt template reference: {template_ref!r}")
    path = prompts_dir / template_ref
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(path.read_text, encoding="utf-8"),
            timeout=timeout_seconds,
        )
    except OSError as exc:
        raise TemplateNotFoundError(f"Failed to load prompt template: {exc}") from exc
    except asyncio.TimeoutError as exc:
        raise TemplateNotFoundError(
            f"Timed out loading prompt template {template_ref} after {timeout_seconds}s"
        ) from exc
