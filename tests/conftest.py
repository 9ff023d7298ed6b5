"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Set required environment variables for tests."""
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    monkeypatch.setenv("LANGSMITH_API_KEY", "")
    monkeypatch.setenv("LANGCHAIN_TRACING_V2", "false")


@pytest.fixture
def settings():
    from landnet.config import Settings

    return Settings(
        OPENROUTER_API_KEY="test-key",
        LANGSMITH_API_KEY="",
        LANGCHAIN_TRACING_V2=False,
        ANALYSIS_TIMEOUT_SECONDS=1.0,
        FRAME_INTERVAL_SECONDS=0.0,
    )


@pytest.fixture
def mock_registry(settings):
    """LLM registry with a mocked network analysis model."""
    from landnet.models.llm_registry import LLMRegistry, build_model_config

    with patch.object(LLMRegistry, "__init__", lambda self, s: None):
        registry = LLMRegistry.__new__(LLMRegistry)
        registry._settings = settings
        registry._specs = build_model_config(settings)
        registry._models = {}
        registry._call_stats = {}

        mock_model = MagicMock()
        mock_model.ainvoke = AsyncMock(return_value=MagicMock(content="{}", usage_metadata=None))
        mock_model.model_name = "test-model"

        registry._models["network_analysis"] = mock_model
        registry._call_stats["network_analysis"] = {"calls": 0, "tokens": 0}

        return registry


@pytest.fixture
def projects():
    return [
        {
            "id": "1",
            "pais": "Bolivia",
            "proyecto": "ACCESOS",
            "status": "Activo",
            "anioInicio": 2019,
            "anioCierre": 2025,
            "sector": "Agricultura",
            "landComponent": "Alta",
            "landDescription": "Titulación comunal",
            "resumen": "Gobernanza de tierras comunales",
        },
        {
            "id": "2",
            "pais": "Peru",
            "proyecto": "PRODERN",
            "status": "Cerrado",
            "anioInicio": 2012,
            "anioCierre": 2018,
            "sector": "Recursos naturales",
            "landComponent": "Media",
        },
        {
            "id": "3",
            "pais": "Ecuador",
            "proyecto": "DINAMINGA",
            "status": "Activo",
            "sector": "Finanzas rurales",
            "landComponent": "Baja",
        },
    ]


@pytest.fixture
def graph_payload():
    """A well-formed response payload, as the generation service returns it."""
    return {
        "nodes": [
            {"id": "1", "label": "ACCESOS", "country": "Bolivia", "landIntensityScore": 9,
             "landClassification": "High", "justification": "Communal titling", "status": "Active",
             "sector": "Agriculture"},
            {"id": "2", "label": "PRODERN", "country": "Peru", "landIntensityScore": 5,
             "landClassification": "Medium", "status": "Closed"},
            {"id": "3", "label": "DINAMINGA", "country": "Ecuador", "landIntensityScore": 2,
             "landClassification": "Low"},
            {"id": "4", "label": "PROCASUR", "country": "Chile", "landIntensityScore": 8,
             "landClassification": "High"},
        ],
        "edges": [
            {"source": "1", "target": "4", "strength": 9, "type": "thematic", "description": "Titling"},
            {"source": "1", "target": "2", "strength": 7, "type": "geographic"},
            {"source": "2", "target": "3", "strength": 3, "type": "institutional"},
        ],
        "clusters": [
            {"name": "Andean titling", "projects": ["1", "4"], "description": "Titling programmes",
             "learningRoutePotential": "HIGH", "proposedRoute": "Bolivia -> Chile"},
            {"name": "Natural resources", "projects": ["2", "3"], "learningRoutePotential": "MEDIUM"},
        ],
        "crossCuttingFindings": ["Finding 1", "Finding 2", "Finding 3"],
    }


@pytest.fixture
def graph_response(graph_payload):
    return "Here is the analysis:\n" + json.dumps(graph_payload)


@pytest.fixture
def graph(graph_payload):
    from landnet.analysis.validator import validate_graph

    return validate_graph(graph_payload)
