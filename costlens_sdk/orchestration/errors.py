"""Orchestration-specific error definitions."""


class OrchestratorError(Exception):
    """Base exception for orchestration errors."""
    pass


class CostLimitExceeded(OrchestratorError):
    """Raised before any provider call when the estimated cost is above the ceiling."""

    def __init__(self, estimated_cost: float, limit: float, model: str = ""):
        self.estimated_cost = estimated_cost
        self.limit = limit
        self.model = model

        message = f"Estimated cost ${estimated_cost:.4f} exceeds limit ${limit:g}"
        super().__init__(message)
