"""
Observability Module for the Invoice GL Engine

Provides:
- Structured logging with correlation IDs (organization, invoice, customer)
"""

from gl_core.observability.logging import (
    get_logger,
    configure_logging,
    CorrelationContext,
    CorrelatedLogger,
    get_correlation_context,
    with_correlation,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "CorrelationContext",
    "CorrelatedLogger",
    "get_correlation_context",
    "with_correlation",
]
