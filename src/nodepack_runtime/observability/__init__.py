"""Observability package."""
from src.nodepack_runtime.observability.logging import (
    setup_logging,
    with_execution_context,
)

__all__ = ["setup_logging", "with_execution_context"]
