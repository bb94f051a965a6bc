"""Protocol for subdomain allocation and validation observability."""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.observability_context import ObservationContext, bind_context


class SubdomainProbe(Protocol):
    """Domain probe for subdomain checks."""

    def subdomain_allocated(self, name: str, subdomain: str, attempts: int) -> None:
        """Record that a subdomain was chosen for an organization name."""
        ...

    def subdomain_lookup_failed(self, subdomain: str, error: str) -> None:
        """Record that availability could not be determined."""
        ...

    def subdomain_check_superseded(
        self, subdomain: str, sequence: int, latest: int
    ) -> None:
        """Record that a newer check made this result stale."""
        ...

    def with_context(self, context: ObservationContext) -> SubdomainProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSubdomainProbe:
    """Default implementation of SubdomainProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._root_logger = logger or structlog.get_logger()
        self._context = context
        self._logger = bind_context(self._root_logger, context)

    def with_context(self, context: ObservationContext) -> DefaultSubdomainProbe:
        return DefaultSubdomainProbe(logger=self._root_logger, context=context)

    def subdomain_allocated(self, name: str, subdomain: str, attempts: int) -> None:
        self._logger.info(
            "subdomain_allocated",
            name=name,
            subdomain=subdomain,
            attempts=attempts,
        )

    def subdomain_lookup_failed(self, subdomain: str, error: str) -> None:
        self._logger.warning(
            "subdomain_lookup_failed",
            subdomain=subdomain,
            error=error,
        )

    def subdomain_check_superseded(
        self, subdomain: str, sequence: int, latest: int
    ) -> None:
        self._logger.debug(
            "subdomain_check_superseded",
            subdomain=subdomain,
            sequence=sequence,
            latest=latest,
        )
