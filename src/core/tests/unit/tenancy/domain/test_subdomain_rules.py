"""Unit tests for subdomain normalization, format rules and candidates."""

import random
import string

import pytest

from tenancy.domain.exceptions import TenancyValidationError
from tenancy.domain.subdomain import (
    MAX_SUBDOMAIN_LENGTH,
    normalize_subdomain,
    subdomain_candidates,
    subdomain_format_error,
    validate_subdomain_format,
)

ALPHABET = string.ascii_letters + string.digits + " -_.!@#&/'éÅß日本" + "\t"


def _random_text(rng: random.Random) -> str:
    return "".join(rng.choice(ALPHABET) for _ in range(rng.randrange(0, 80)))


class TestNormalizeSubdomain:
    """Tests for normalize_subdomain()."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Acme Corp!", "acme-corp"),
            ("  Hello   World  ", "hello-world"),
            ("--Research__Lab--", "research-lab"),
            ("ACME", "acme"),
            ("a--b---c", "a-b-c"),
            ("Café Olé", "caf-ol"),
            ("!!!", ""),
            ("", ""),
        ],
    )
    def test_examples(self, name, expected):
        assert normalize_subdomain(name) == expected

    def test_truncates_to_fifty_without_trailing_hyphen(self):
        name = "a" * 49 + " b" + "c" * 10

        result = normalize_subdomain(name)

        assert len(result) <= MAX_SUBDOMAIN_LENGTH
        assert result == "a" * 49

    @pytest.mark.parametrize("seed", range(20))
    def test_is_a_projection(self, seed):
        rng = random.Random(seed)
        for _ in range(50):
            text = _random_text(rng)
            once = normalize_subdomain(text)

            assert normalize_subdomain(once) == once
            assert set(once) <= set(string.ascii_lowercase + string.digits + "-")
            assert not once.startswith("-")
            assert not once.endswith("-")
            assert len(once) <= MAX_SUBDOMAIN_LENGTH


class TestSubdomainFormat:
    """Tests for format validation."""

    @pytest.mark.parametrize("value", ["abc", "acme-corp", "a1b2c3", "x" * 50])
    def test_valid(self, value):
        assert subdomain_format_error(value) is None
        assert validate_subdomain_format(value) == value

    @pytest.mark.parametrize(
        "value,message",
        [
            ("ab", "Subdomain must be at least 3 characters"),
            ("x" * 51, "Subdomain must be at most 50 characters"),
            (
                "Acme",
                "Subdomain can only contain lowercase letters, numbers, and hyphens",
            ),
            (
                "acme corp",
                "Subdomain can only contain lowercase letters, numbers, and hyphens",
            ),
            ("-acme", "Subdomain cannot start or end with a hyphen"),
            ("acme-", "Subdomain cannot start or end with a hyphen"),
        ],
    )
    def test_invalid(self, value, message):
        assert subdomain_format_error(value) == message

        with pytest.raises(TenancyValidationError) as exc_info:
            validate_subdomain_format(value)
        assert exc_info.value.field == "subdomain"
        assert exc_info.value.message == message


class TestSubdomainCandidates:
    """Tests for the collision suffix sequence."""

    def test_sequence_starts_with_slug_then_numbered(self):
        candidates = list(subdomain_candidates("Acme Corp!", max_suffix=4))

        assert candidates == ["acme-corp", "acme-corp-2", "acme-corp-3", "acme-corp-4"]

    def test_is_deterministic(self):
        assert list(subdomain_candidates("Acme", 10)) == list(subdomain_candidates("Acme", 10))

    def test_short_names_get_org_suffix(self):
        assert next(subdomain_candidates("AB")) == "ab-org"
        assert next(subdomain_candidates("!!")) == "org"

    def test_long_names_leave_room_for_suffix(self):
        candidates = list(subdomain_candidates("x" * 80, max_suffix=12))

        assert all(len(c) <= MAX_SUBDOMAIN_LENGTH for c in candidates)
        assert candidates[-1] == "x" * 47 + "-12"

    def test_every_candidate_is_well_formed(self):
        for name in ["Acme Corp!", "x" * 60, "ab", "", "a-" * 30]:
            for candidate in subdomain_candidates(name, max_suffix=15):
                assert subdomain_format_error(candidate) is None, candidate
