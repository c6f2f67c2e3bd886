"""Application middleware."""

from app.middleware.correlation import (
    CorrelationIDLogFilter,
    CorrelationIDMiddleware,
    get_correlation_id,
)

__all__ = ["CorrelationIDLogFilter", "CorrelationIDMiddleware", "get_correlation_id"]
