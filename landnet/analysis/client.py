"""Generation service client: asks the model for a portfolio relationship graph."""

from __future__ import annotations

import time
from typing import Any, Protocol

from langchain_core.messages import HumanMessage, SystemMessage
from langsmith import traceable

from landnet.analysis.prompts import build_network_messages
from landnet.models.llm_registry import LLMRegistry
from landnet.models.schemas import ProjectRecord
from landnet.utils.exceptions import GenerationError
from landnet.utils.logging import get_logger

logger = get_logger(__name__)

TASK = "network_analysis"


class AnalysisSource(Protocol):
    """Anything that turns a project snapshot into raw response text."""

    async def generate(self, projects: list[ProjectRecord], lang: str) -> str: ...


def response_text(content: Any) -> str:
    """Flatten message content; Claude may return a list of typed blocks."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content or "")


class LLMNetworkAnalyst:
    """Default :class:`AnalysisSource` backed by the registry's network model.

    Returns the model's text untouched; parsing belongs to response repair.
    """

    def __init__(self, registry: LLMRegistry) -> None:
        self._registry = registry

    @traceable(run_type="llm", name="network_analysis")
    async def generate(self, projects: list[ProjectRecord], lang: str) -> str:
        system, user = build_network_messages(projects, lang)
        model = self._registry.get_model(TASK)

        start = time.monotonic()
        try:
            result = await model.ainvoke([SystemMessage(content=system), HumanMessage(content=user)])
        except Exception as exc:
            logger.error("network_generation_failed", model=model.model_name, error=str(exc))
            raise GenerationError(f"Generation service call failed: {exc}") from exc
        elapsed_ms = int((time.monotonic() - start) * 1000)

        usage = getattr(result, "usage_metadata", None) or {}
        tokens = usage.get("total_tokens", 0) if isinstance(usage, dict) else 0
        self._registry.record_usage(TASK, tokens)

        text = response_text(getattr(result, "content", result))
        logger.info(
            "network_generation_complete",
            model=model.model_name,
            projects=len(projects),
            chars=len(text),
            tokens=tokens,
            elapsed_ms=elapsed_ms,
        )
        return text
