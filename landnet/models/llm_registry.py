"""LLM registry for the generation service via OpenRouter.

Models are accessed through OpenRouter's OpenAI-compatible API. Each task maps
to one model spec; there are no fallback chains because a failed analysis is
only ever retried by the user.
"""

from __future__ import annotations

from dataclasses import dataclass

from langchain_openai import ChatOpenAI

from landnet.config import Settings
from landnet.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelSpec:
    slug: str
    temperature: float
    purpose: str
    max_tokens: int | None = None


def build_model_config(settings: Settings) -> dict[str, ModelSpec]:
    return {
        "network_analysis": ModelSpec(
            slug=settings.NETWORK_MODEL,
            temperature=settings.NETWORK_TEMPERATURE,
            purpose="Portfolio relationship graph generation (JSON only)",
            max_tokens=settings.NETWORK_MAX_TOKENS,
        ),
    }


class LLMRegistry:
    """Builds and caches ChatOpenAI instances per task, with usage counters."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._specs = build_model_config(settings)
        self._models: dict[str, ChatOpenAI] = {}
        self._call_stats: dict[str, dict] = {}

        for task_name, spec in self._specs.items():
            self._models[task_name] = self._build_model(spec)
            self._call_stats[task_name] = {"calls": 0, "tokens": 0}

    def _build_model(self, spec: ModelSpec) -> ChatOpenAI:
        kwargs: dict = {
            "model": spec.slug,
            "openai_api_key": self._settings.OPENROUTER_API_KEY,
            "openai_api_base": self._settings.OPENROUTER_BASE_URL,
            "temperature": spec.temperature,
            # Timeouts are enforced by the pipeline so cancellation stays in one place.
            "max_retries": 0,
            "model_kwargs": {
                "extra_headers": {
                    "HTTP-Referer": "https://landnet.local",
                    "X-Title": "Land Projects Network",
                }
            },
        }
        if spec.max_tokens is not None:
            kwargs["max_tokens"] = spec.max_tokens
        return ChatOpenAI(**kwargs)

    def get_spec(self, task: str) -> ModelSpec:
        if task not in self._specs:
            raise KeyError(f"No model registered for task '{task}'")
        return self._specs[task]

    def get_model(self, task: str) -> ChatOpenAI:
        """Get the model assigned to a task."""
        if task not in self._models:
            raise KeyError(f"No model registered for task '{task}'")
        return self._models[task]

    def record_usage(self, task: str, tokens: int) -> None:
        if task in self._call_stats:
            self._call_stats[task]["calls"] += 1
            self._call_stats[task]["tokens"] += tokens

    @property
    def stats(self) -> dict[str, dict]:
        return {task: dict(counts) for task, counts in self._call_stats.items()}
