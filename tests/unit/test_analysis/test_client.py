"""Unit tests for the generation service client and its prompt."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from landnet.analysis.client import LLMNetworkAnalyst, response_text
from landnet.analysis.prompts import MAX_EDGES, build_network_messages, summarize_project
from landnet.models.schemas import ProjectRecord
from landnet.utils.exceptions import GenerationError


@pytest.fixture
def records(projects):
    return [ProjectRecord.model_validate(p) for p in projects]


def test_summary_line_leads_with_project_id(records):
    line = summarize_project(records[0])
    assert line.startswith("[1] ACCESOS | Bolivia | Activo | 2019-2025 |")
    assert "Land: Alta" in line


def test_prompt_carries_portfolio_and_language(records):
    system, user = build_network_messages(records, "en")
    assert f"AT MOST {MAX_EDGES} edges" in system
    assert "{max_edges}" not in system
    assert "[2] PRODERN" in user
    assert user.endswith("LANGUAGE OF ALL TEXTS: English.")

    _, user_es = build_network_messages(records, "es")
    assert "Español" in user_es


def test_response_text_flattens_content_blocks():
    assert response_text("plain") == "plain"
    assert response_text([{"type": "text", "text": '{"a"'}, {"type": "tool_use"}, ": 1}"]) == '{"a": 1}'
    assert response_text(None) == ""


@pytest.mark.asyncio
async def test_analyst_returns_raw_text_and_records_usage(mock_registry, records):
    model = mock_registry.get_model("network_analysis")
    model.ainvoke = AsyncMock(
        return_value=MagicMock(content='{"nodes": []}', usage_metadata={"total_tokens": 321})
    )

    analyst = LLMNetworkAnalyst(mock_registry)
    text = await analyst.generate(records, "en")

    assert text == '{"nodes": []}'
    messages = model.ainvoke.call_args.args[0]
    assert len(messages) == 2
    assert "[3] DINAMINGA" in messages[1].content
    assert mock_registry.stats["network_analysis"] == {"calls": 1, "tokens": 321}


@pytest.mark.asyncio
async def test_analyst_wraps_service_errors(mock_registry, records):
    model = mock_registry.get_model("network_analysis")
    model.ainvoke = AsyncMock(side_effect=RuntimeError("401 Unauthorized"))

    analyst = LLMNetworkAnalyst(mock_registry)
    with pytest.raises(GenerationError, match="401"):
        await analyst.generate(records, "es")
