"""Subdomain availability, allocation and interactive validation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import StrEnum

from shared_kernel.document_store.exceptions import StoreError
from tenancy.application.observability import DefaultSubdomainProbe, SubdomainProbe
from tenancy.domain.exceptions import SubdomainTakenError
from tenancy.domain.subdomain import (
    subdomain_candidates,
    subdomain_format_error,
    validate_subdomain_format,
)
from tenancy.domain.value_objects import OrganizationId
from tenancy.ports.repositories import IOrganizationRepository

TAKEN_MESSAGE = "This subdomain is already taken"
UNKNOWN_MESSAGE = "Could not check subdomain availability. Please try again."


class SubdomainStatus(StrEnum):
    AVAILABLE = "available"
    TAKEN = "taken"
    INVALID = "invalid"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SubdomainCheckResult:
    """Outcome of validating one subdomain value.

    UNKNOWN means the lookup failed; it never counts as available.
    """

    subdomain: str
    status: SubdomainStatus
    message: str | None = None
    sequence: int = 0

    @property
    def is_available(self) -> bool:
        return self.status == SubdomainStatus.AVAILABLE


class SubdomainAllocator:
    """Checks and allocates globally unique organization subdomains.

    Generated subdomains follow a deterministic scheme: the normalized name,
    then `<name>-2`, `<name>-3` and so on up to `max_suffix`.
    """

    def __init__(
        self,
        organization_repository: IOrganizationRepository,
        max_suffix: int = 99,
        probe: SubdomainProbe | None = None,
    ):
        self._organization_repository = organization_repository
        self._max_suffix = max_suffix
        self._probe = probe or DefaultSubdomainProbe()

    async def is_available(
        self, subdomain: str, exclude: OrganizationId | None = None
    ) -> bool:
        """Whether no organization other than `exclude` claims the subdomain.

        Lookup failures propagate; availability is never assumed.
        """
        claims = await self._organization_repository.find_by_subdomain(subdomain)
        return all(organization.id == exclude for organization in claims)

    async def check(
        self, subdomain: str, exclude: OrganizationId | None = None
    ) -> SubdomainCheckResult:
        """Validate format, then availability, without raising."""
        error = subdomain_format_error(subdomain)
        if error is not None:
            return SubdomainCheckResult(subdomain, SubdomainStatus.INVALID, error)

        try:
            available = await self.is_available(subdomain, exclude)
        except StoreError as e:
            self._probe.subdomain_lookup_failed(subdomain=subdomain, error=str(e))
            return SubdomainCheckResult(
                subdomain, SubdomainStatus.UNKNOWN, UNKNOWN_MESSAGE
            )

        if not available:
            return SubdomainCheckResult(subdomain, SubdomainStatus.TAKEN, TAKEN_MESSAGE)
        return SubdomainCheckResult(subdomain, SubdomainStatus.AVAILABLE)

    async def allocate(
        self,
        name: str,
        requested: str | None = None,
        exclude: OrganizationId | None = None,
    ) -> str:
        """Pick a subdomain for an organization.

        Args:
            name: Organization name used to generate a subdomain
            requested: Subdomain entered by the user; used verbatim if valid
            exclude: Organization whose own claim does not count as taken

        Raises:
            TenancyValidationError: If `requested` is malformed
            SubdomainTakenError: If `requested` is taken, or every generated
                candidate is
        """
        if requested is not None:
            validate_subdomain_format(requested)
            if not await self.is_available(requested, exclude):
                raise SubdomainTakenError(requested)
            return requested

        candidate = ""
        for attempt, candidate in enumerate(
            subdomain_candidates(name, self._max_suffix), start=1
        ):
            if await self.is_available(candidate, exclude):
                self._probe.subdomain_allocated(
                    name=name, subdomain=candidate, attempts=attempt
                )
                return candidate

        raise SubdomainTakenError(candidate)


class SubdomainValidationSession:
    """Race-safe validation for a subdomain field edited interactively.

    Every call to `check` takes the next sequence number. Format problems are
    reported immediately. Otherwise the check waits for the debounce window
    and only queries availability if no newer call arrived meanwhile. A
    result is applied to `state` only if its sequence number is still the
    latest when it completes; stale results are dropped and None is returned.
    """

    def __init__(
        self,
        allocator: SubdomainAllocator,
        debounce_seconds: float = 0.5,
        exclude: OrganizationId | None = None,
        probe: SubdomainProbe | None = None,
    ):
        self._allocator = allocator
        self._debounce_seconds = debounce_seconds
        self._exclude = exclude
        self._probe = probe or DefaultSubdomainProbe()
        self._latest = 0
        self.state: SubdomainCheckResult | None = None

    @property
    def latest_sequence(self) -> int:
        return self._latest

    async def check(self, value: str) -> SubdomainCheckResult | None:
        """Validate `value`; return the applied result or None if superseded."""
        self._latest += 1
        sequence = self._latest

        error = subdomain_format_error(value)
        if error is not None:
            return self._apply(
                SubdomainCheckResult(value, SubdomainStatus.INVALID, error), sequence
            )

        await asyncio.sleep(self._debounce_seconds)
        if sequence != self._latest:
            self._probe.subdomain_check_superseded(
                subdomain=value, sequence=sequence, latest=self._latest
            )
            return None

        result = await self._allocator.check(value, self._exclude)
        return self._apply(result, sequence)

    def _apply(
        self, result: SubdomainCheckResult, sequence: int
    ) -> SubdomainCheckResult | None:
        if sequence != self._latest:
            self._probe.subdomain_check_superseded(
                subdomain=result.subdomain, sequence=sequence, latest=self._latest
            )
            return None
        self.state = replace(result, sequence=sequence)
        return self.state
