"""Observation context for domain-oriented observability.

Observation contexts carry request-scoped metadata that probes bind onto
their logger, so every event they emit includes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable metadata included with all instrumentation events.

    Attributes:
        request_id: Identifier of the current request or migration run
        user_id: User performing the operation, if any
        organization_id: Organization the operation targets, if any
        extra: Additional contextual metadata

    Example:
        context = ObservationContext(request_id="run-1", organization_id="org-1")
        probe = DefaultTeamServiceProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    organization_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging, dropping None values."""
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.organization_id is not None:
            result["organization_id"] = self.organization_id
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            user_id=self.user_id,
            organization_id=self.organization_id,
            extra={**self.extra, **kwargs},
        )


def bind_context(logger: Any, context: ObservationContext | None) -> Any:
    """Bind a context's metadata onto a structlog logger.

    Event fields passed at log time take precedence over bound values, so a
    probe argument named like a context key never clashes with it.
    """
    if context is None:
        return logger
    return logger.bind(**context.as_dict())
