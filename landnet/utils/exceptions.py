"""Exception hierarchy for the land network pipeline.

Each terminal error carries a ``user_message`` suitable for display; the
exception text itself is meant for logs.
"""

from __future__ import annotations


class LandNetError(Exception):
    """Base exception for all land network errors."""

    user_message = "The network analysis failed."


# ── Response repair ──────────────────────────────────────────────────


class RepairFailure(LandNetError):
    """The generation service response could not be turned into JSON."""


class NoJsonFound(RepairFailure):
    """No ``{ ... }`` span in the raw response text."""

    user_message = "Could not parse the network analysis."


class UnrepairableJson(RepairFailure):
    """Truncation repair was attempted and the result still did not parse."""

    user_message = "The network analysis JSON is incomplete. Please try again."

    def __init__(self, message: str, *, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


# ── Validation ───────────────────────────────────────────────────────


class InvalidGraphShape(LandNetError):
    """Parsed payload is not shaped like a graph (no usable ``nodes``)."""

    user_message = "The network analysis did not contain any projects."


# ── Generation service ───────────────────────────────────────────────


class AnalysisTimeoutError(LandNetError, TimeoutError):
    """Generation service did not answer within the configured bound."""

    user_message = "The network analysis took too long to respond. Please try again."


class GenerationError(LandNetError):
    """Generation service call failed."""

    user_message = "The network analysis failed. Check the API key."


class InsufficientProjectsError(LandNetError):
    """Project snapshot is too small for a network analysis."""

    user_message = "At least 3 projects are required for a network analysis."


class RequestSupersededError(LandNetError):
    """A newer analysis request replaced this one before it finished."""

    user_message = "The analysis was replaced by a newer request."


# ── Interaction ──────────────────────────────────────────────────────


class UnknownNodeError(LandNetError, KeyError):
    """Node id is not part of the current graph."""

    def __str__(self) -> str:
        return Exception.__str__(self)
