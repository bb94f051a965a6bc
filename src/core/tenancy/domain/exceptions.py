"""Domain exceptions for the tenancy context.

Four families, each handled differently by callers:

- TenancyValidationError: bad input; surfaced as a field-level message
- ConflictError: the operation contradicts current state; carries a reason
  string and must not be retried blindly
- NotFoundError: the referenced entity does not exist
- PermissionDeniedError: the actor lacks the capability; never downgraded
  to a no-op
"""


class TenancyError(Exception):
    """Base class for tenancy rule violations."""

    pass


class TenancyValidationError(TenancyError):
    """Raised when input fails validation.

    Attributes:
        field: Name of the offending field
        message: Human-readable explanation suitable for display next to it
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ConflictError(TenancyError):
    """Raised when an operation conflicts with the current state."""

    reason = "conflict"

    def __init__(self, message: str, reason: str | None = None):
        if reason is not None:
            self.reason = reason
        self.message = message
        super().__init__(message)


class LastAdminProtectedError(ConflictError):
    """Raised when an operation would leave an organization without an admin."""

    reason = "last_admin_protected"

    def __init__(
        self,
        message: str = "Cannot remove the last admin. Promote another member first.",
        reason: str | None = None,
    ):
        super().__init__(message, reason)


class OwnerRemovalProtectedError(ConflictError):
    """Raised when attempting to remove the organization owner."""

    reason = "owner_removal_protected"

    def __init__(self, message: str = "The organization owner cannot be removed."):
        super().__init__(message)


class SubdomainTakenError(ConflictError):
    """Raised when a subdomain is already claimed by another organization."""

    reason = "subdomain_taken"

    def __init__(self, subdomain: str):
        self.subdomain = subdomain
        super().__init__("This subdomain is already taken")


class AlreadyProcessedError(ConflictError):
    """Raised when approving or rejecting a join request that is not pending."""

    reason = "already_processed"

    def __init__(self, request_id: str, status: str):
        self.request_id = request_id
        self.status = status
        super().__init__(f"Request has already been processed ({status})")


class WorkspaceLimitReachedError(ConflictError):
    """Raised when an organization has used every workspace its tier allows."""

    reason = "workspace_limit_reached"

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"Workspace limit of {limit} reached. Upgrade your plan to add more."
        )


class AlreadyAffiliatedError(ConflictError):
    """Raised when a user who already belongs to an organization tries to join or create one."""

    reason = "already_affiliated"

    def __init__(
        self,
        message: str = "You already belong to an organization. "
        "Leave your current organization before joining another.",
    ):
        super().__init__(message)


class DuplicatePendingRequestError(ConflictError):
    """Raised when a pending join request already exists for the same user and organization."""

    reason = "duplicate_pending_request"

    def __init__(self):
        super().__init__(
            "You already have a pending request for this organization"
        )


class NotFoundError(TenancyError):
    """Raised when a referenced entity does not exist."""

    entity = "entity"

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found")


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization cannot be found by id or subdomain."""

    entity = "Organization"


class WorkspaceNotFoundError(NotFoundError):
    """Raised when a workspace cannot be found."""

    entity = "Workspace"


class MemberNotFoundError(NotFoundError):
    """Raised when a user cannot be found, or is not a member where one is required."""

    entity = "Member"


class JoinRequestNotFoundError(NotFoundError):
    """Raised when a join request cannot be found."""

    entity = "Join request"


class SubscriptionNotFoundError(NotFoundError):
    """Raised when an organization has no subscription record."""

    entity = "Subscription"


class PermissionDeniedError(TenancyError):
    """Raised when the acting user lacks the capability for an operation."""

    def __init__(self, action: str, message: str | None = None):
        self.action = action
        super().__init__(message or f"Not permitted to {action}")
