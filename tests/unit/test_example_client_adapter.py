"""Tests for ExampleClientAdapter (offline reference adapter)."""

import json

import pytest

from app.generation.example_client_adapter import ExampleClientAdapter
from app.generation.validator import JsonStructureValidator, PlainTextValidator


async def _complete(json_mode: bool) -> str:
    return await ExampleClientAdapter().create_completion(
        model="any",
        temperature=0.0,
        max_tokens=10,
        system_prompt="sys",
        user_prompt="user",
        json_mode=json_mode,
    )


class TestExampleClientAdapter:
    @pytest.mark.asyncio
    async def test_text_mode_passes_plain_text_validation(self) -> None:
        result = await _complete(json_mode=False)
        assert PlainTextValidator().validate(result).success is True

    @pytest.mark.asyncio
    async def test_json_mode_passes_structure_validation(self) -> None:
        result = await _complete(json_mode=True)
        parsed = json.loads(result)
        assert parsed["title"] == "Example Activity Report"
        validator = JsonStructureValidator(("structured", "narrative"))
        assert validator.validate(result).success is True

    @pytest.mark.asyncio
    async def test_ignores_input_parameters(self) -> None:
        adapter = ExampleClientAdapter()
        first = await adapter.create_completion(
            model="a", temperature=0.9, max_tokens=1, system_prompt="x", user_prompt="y"
        )
        second = await adapter.create_completion(
            model="b", temperature=0.1, max_tokens=999, system_prompt="", user_prompt=""
        )
        assert first == second
