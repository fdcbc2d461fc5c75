"""Tests for async prompt template loading."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from app.catalog.exceptions import TemplateNotFoundError
from app.prompting.prompt_loader import load_prompt_template


class TestLoadPromptTemplate:
    @pytest.mark.asyncio
    async def test_loads_bundled_template(self) -> None:
        template = await load_prompt_template("payslip.txt")
        assert "{{fullName}}" in template
        assert "{{companyName}}" in template

    @pytest.mark.asyncio
    async def test_loads_custom_template(self, tmp_path: Path) -> None:
        (tmp_path / "custom.txt").write_text("Hello {{name}}")
        result = await load_prompt_template("custom.txt", prompts_dir=tmp_path)
        assert result == "Hello {{name}}"

    @pytest.mark.asyncio
    async def test_missing_file_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(TemplateNotFoundError, match="Failed to load prompt template"):
            await load_prompt_template("missing.txt", prompts_dir=tmp_path)

    @pytest.mark.asyncio
    async def test_path_traversal_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(TemplateNotFoundError, match="Invalid prompt template reference"):
            await load_prompt_template("../secrets.txt", prompts_dir=tmp_path)

    @pytest.mark.asyncio
    async def test_slow_read_times_out(self, tmp_path: Path) -> None:
        (tmp_path / "slow.txt").write_text("x")

        async def never_finishes(*_args: object, **_kwargs: object) -> str:
            await asyncio.sleep(10)
            return ""

        with (
            patch("app.prompting.prompt_loader.asyncio.to_thread", side_effect=never_finishes),
            pytest.raises(TemplateNotFoundError, match="Timed out"),
        ):
            await load_prompt_template("slow.txt", prompts_dir=tmp_path, timeout_seconds=0.01)
