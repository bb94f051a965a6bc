"""Unit tests for the JoinRequest state machine."""

import pytest

from tenancy.domain.aggregates import JoinRequest
from tenancy.domain.exceptions import AlreadyProcessedError
from tenancy.domain.value_objects import (
    JoinRequestStatus,
    OrganizationId,
    UserId,
)

ORG = OrganizationId.from_string("org-1")
ALICE = UserId.from_string("alice")
ADMIN = UserId.from_string("admin")


@pytest.fixture
def request_():
    return JoinRequest.create(ORG, ALICE, "alice@example.com")


class TestCreate:
    def test_new_request_is_pending(self, request_):
        assert request_.status == JoinRequestStatus.PENDING
        assert request_.is_pending
        assert request_.processed_at is None
        assert request_.processed_by is None
        assert request_.user_email == "alice@example.com"

    def test_ids_are_unique(self):
        first = JoinRequest.create(ORG, ALICE, None)
        second = JoinRequest.create(ORG, ALICE, None)

        assert first.id != second.id


class TestTransitions:
    def test_approve(self, request_):
        request_.approve(ADMIN)

        assert request_.status == JoinRequestStatus.APPROVED
        assert request_.processed_by == ADMIN
        assert request_.processed_at is not None

    def test_reject(self, request_):
        request_.reject(ADMIN)

        assert request_.status == JoinRequestStatus.REJECTED
        assert request_.processed_by == ADMIN

    @pytest.mark.parametrize("first", ["approve", "reject"])
    @pytest.mark.parametrize("second", ["approve", "reject"])
    def test_terminal_states_cannot_be_processed_again(self, request_, first, second):
        getattr(request_, first)(ADMIN)
        status, processed_at = request_.status, request_.processed_at

        with pytest.raises(AlreadyProcessedError) as exc_info:
            getattr(request_, second)(UserId.from_string("other-admin"))

        assert exc_info.value.reason == "already_processed"
        assert exc_info.value.status == status.value
        assert request_.status == status
        assert request_.processed_at == processed_at
        assert request_.processed_by == ADMIN
