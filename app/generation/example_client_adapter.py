"""Example generation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenerationClient and register the provider in GenerationClientFactory.
"""

import json
from typing import ClassVar

from app.generation.client_base import BaseGenerationClient


class ExampleClientAdapter(BaseGenerationClient):
    """Example adapter that returns fixed, valid document content.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters.
    """

    DEFAULT_TEXT: ClassVar[str] = (
        "OFFICIAL RECORD OF ORDINARY ACTIVITIES\n"
        "\n"
        "SUBJECT DETAILS:\n"
        "Name: Example Person\n"
        "Reference: EX-0001\n"
        "Status: Under Gentle Observation\n"
        "\n"
        "SUMMARY OF FINDINGS:\n"
        "- Subject was observed buying a meal deal at 12:58 on a weekday.\n"
        "- Subject returned a library book exactly on the due date.\n"
        "- Subject waved at a neighbour's cat on three separate occasions.\n"
        "\n"
        "ACTIVITY LOG:\n"
        "Date | Activity | Assessment\n"
        "Monday | Queued patiently at the post office | Exemplary\n"
        "Wednesday | Forgot reusable shopping bag | Concerning\n"
        "Friday | Held a door open for a stranger | Suspiciously polite\n"
        "\n"
        "CONCLUSION:\n"
        "After extensive review the office finds the subject to be entirely "
        "unremarkable. No further action is recommended beyond a cup of tea.\n"
    )

    DEFAULT_JSON: ClassVar[dict[str, object]] = {
        "title": "Example Activity Report",
        "structured": {
            "Name": "Example Person",
            "Status": "Under Gentle Observation",
            "Observations": [
                "Bought a meal deal at 12:58",
                "Returned a library book on the due date",
            ],
            "Activity Log": [
                {"Date": "Monday", "Activity": "Queued at the post office", "Assessment": "Exemplary"},
                {"Date": "Friday", "Activity": "Held a door open", "Assessment": "Suspiciously polite"},
            ],
        },
        "narrative": (
            "The subject leads a life of admirable routine. Analysts recommend "
            "no further action beyond continued appreciation of their tidy recycling."
        ),
    }

    def __init__(self) -> None:
        pass

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
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        if json_mode:
            return json.dumps(self.DEFAULT_JSON)
        return self.DEFAULT_TEXT
