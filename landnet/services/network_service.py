"""Network analysis pipeline: fetch -> repair -> validate -> layout.

Only the most recent request may install a graph. Starting a request claims
a new generation synchronously: any request still waiting on the generation
service is cancelled and the current graph is detached before the first
await, so an older request can never register or install after a newer one.
"""

from __future__ import annotations

import asyncio
import uuid
from enum import Enum
from typing import Any

from landnet.analysis.client import AnalysisSource
from landnet.analysis.repair import repair_response
from landnet.analysis.validator import validate_graph
from landnet.config import Settings
from landnet.interaction.context import NetworkViewContext
from landnet.layout.simulation import ForceSettings, ForceSimulation
from landnet.models.schemas import ProjectRecord
from landnet.utils.exceptions import (
    AnalysisTimeoutError,
    InsufficientProjectsError,
    LandNetError,
    RequestSupersededError,
)
from landnet.utils.logging import bind_request_context, get_logger

logger = get_logger(__name__)


class PipelineState(str, Enum):
    EMPTY = "no_graph"
    LOADING = "loading"
    READY = "ready"


class NetworkService:
    """Runs analysis requests and owns the currently installed view context."""

    def __init__(
        self,
        settings: Settings,
        source: AnalysisSource,
        *,
        autostart_layout: bool = True,
    ) -> None:
        self._settings = settings
        self._source = source
        self._force_settings = ForceSettings.from_settings(settings)
        self._autostart = autostart_layout
        self._generation = 0
        self._request: asyncio.Task | None = None
        self._context: NetworkViewContext | None = None
        self.state = PipelineState.EMPTY

    @property
    def context(self) -> NetworkViewContext | None:
        return self._context

    @property
    def generation(self) -> int:
        """Incremented by every request and discard; only the current one may install."""
        return self._generation

    async def generate(
        self,
        projects: list[ProjectRecord | dict[str, Any]],
        lang: str | None = None,
    ) -> NetworkViewContext:
        """Request a network analysis for ``projects`` and install the result.

        Raises:
            InsufficientProjectsError: fewer than ``MIN_PROJECTS`` projects.
            AnalysisTimeoutError: the generation service exceeded the timeout.
            RequestSupersededError: a newer request replaced this one.
            LandNetError: repair or validation failed.
        """
        records = [p if isinstance(p, ProjectRecord) else ProjectRecord.model_validate(p) for p in projects]
        if len(records) < self._settings.MIN_PROJECTS:
            raise InsufficientProjectsError(
                f"Network analysis needs at least {self._settings.MIN_PROJECTS} projects, got {len(records)}"
            )

        # No await between claiming the generation and registering the task.
        generation, retired = self._claim()
        request_id = uuid.uuid4().hex[:12]
        task = asyncio.create_task(
            self._analyse(records, lang or self._settings.DEFAULT_LANGUAGE, request_id, generation, retired)
        )
        self._request = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info("network_request_superseded", request_id=request_id, generation=generation)
            raise RequestSupersededError(f"Request {request_id} was superseded") from None
        finally:
            if self._request is task:
                self._request = None

    def _claim(self) -> tuple[int, NetworkViewContext | None]:
        """Start a new generation: cancel the pending request and detach the current graph."""
        self._generation += 1
        pending, self._request = self._request, None
        if pending is not None and not pending.done():
            pending.cancel()
        retired, self._context = self._context, None
        if retired is not None:
            # run() exits at its next frame; stop() is awaited only if the request starts.
            retired.simulation.clear()
        self.state = PipelineState.EMPTY
        return self._generation, retired

    @staticmethod
    async def _retire(context: NetworkViewContext | None) -> None:
        if context is not None:
            await context.simulation.stop()

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _analyse(
        self,
        projects: list[ProjectRecord],
        lang: str,
        request_id: str,
        generation: int,
        retired: NetworkViewContext | None,
    ) -> NetworkViewContext:
        bind_request_context(request_id, generation=generation)
        await self._retire(retired)
        if self._is_current(generation):
            self.state = PipelineState.LOADING
        logger.info("network_request_started", projects=len(projects), lang=lang)

        try:
            try:
                raw_text = await asyncio.wait_for(
                    self._source.generate(projects, lang),
                    timeout=self._settings.ANALYSIS_TIMEOUT_SECONDS,
                )
            except TimeoutError:
                logger.warning("network_request_timeout", timeout_s=self._settings.ANALYSIS_TIMEOUT_SECONDS)
                raise AnalysisTimeoutError(
                    f"Generation service did not respond within {self._settings.ANALYSIS_TIMEOUT_SECONDS}s"
                ) from None
            if not self._is_current(generation):
                raise RequestSupersededError(f"Request {request_id} was superseded")
            return self.load_response(raw_text)
        except RequestSupersededError:
            logger.info("network_request_superseded", generation=generation, current=self._generation)
            raise
        except LandNetError as exc:
            if self._is_current(generation):
                self.state = PipelineState.EMPTY
            logger.error(
                "network_request_failed",
                error_type=type(exc).__name__,
                error=str(exc),
                user_message=exc.user_message,
            )
            raise
        except Exception as exc:
            if self._is_current(generation):
                self.state = PipelineState.EMPTY
            logger.error("network_request_failed", error_type=type(exc).__name__, error=str(exc))
            raise

    def load_response(self, raw_text: str) -> NetworkViewContext:
        """Repair, validate and lay out a raw response, replacing the current graph.

        With ``autostart_layout`` this must run inside the event loop, which
        hosts the simulation task.
        """
        payload = repair_response(raw_text, max_discarded=self._settings.REPAIR_MAX_DISCARDED_TAIL)
        graph = validate_graph(payload)

        if self._context is not None:
            self._context.simulation.clear()
        simulation = ForceSimulation(self._force_settings)
        simulation.load(graph)
        context = NetworkViewContext(graph, simulation, autostart=self._autostart)
        self._context = context
        self.state = PipelineState.READY
        if self._autostart:
            simulation.start()
        logger.info(
            "network_graph_installed",
            nodes=len(graph.nodes),
            edges=len(graph.edges),
            dropped_edges=graph.diagnostics.dropped_edges,
        )
        return context

    async def discard(self) -> None:
        """Cancel any pending request, stop the layout and drop the current graph."""
        _, retired = self._claim()
        await self._retire(retired)

    async def close(self) -> None:
        await self.discard()
