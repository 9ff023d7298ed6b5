"""Service factory: wires settings, logging, the model registry and the pipeline."""

from __future__ import annotations

import os

from landnet.analysis.client import AnalysisSource, LLMNetworkAnalyst
from landnet.config import Settings, get_settings
from landnet.models.llm_registry import LLMRegistry
from landnet.services.network_service import NetworkService
from landnet.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _configure_tracing(settings: Settings) -> None:
    # langsmith's @traceable reads its configuration from the environment.
    if settings.LANGCHAIN_TRACING_V2 and settings.LANGSMITH_API_KEY:
        os.environ.setdefault("LANGSMITH_API_KEY", settings.LANGSMITH_API_KEY)
        os.environ.setdefault("LANGSMITH_PROJECT", settings.LANGSMITH_PROJECT)
        os.environ["LANGCHAIN_TRACING_V2"] = "true"


def create_network_service(
    settings: Settings | None = None,
    source: AnalysisSource | None = None,
    *,
    autostart_layout: bool = True,
) -> NetworkService:
    """Build a ready-to-use :class:`NetworkService`.

    Without an explicit ``source`` the generation service is the registry's
    network analysis model.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    _configure_tracing(settings)

    if source is None:
        source = LLMNetworkAnalyst(LLMRegistry(settings))

    service = NetworkService(settings, source, autostart_layout=autostart_layout)
    logger.info(
        "network_service_created",
        model=settings.NETWORK_MODEL,
        timeout_s=settings.ANALYSIS_TIMEOUT_SECONDS,
        source=type(source).__name__,
    )
    return service
