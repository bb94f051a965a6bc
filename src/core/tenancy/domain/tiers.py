"""Tier feature gate and plan limits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from tenancy.domain.permissions import capability
from tenancy.domain.value_objects import Feature, Role, Tier

TRIAL_PERIOD_DAYS = 14


@dataclass(frozen=True)
class TierConfig:
    """Fixed plan definition."""

    tier: Tier
    display_name: str
    workspace_limit: int | None
    features: frozenset[Feature]


TIER_CONFIGS: dict[Tier, TierConfig] = {
    Tier.STARTER: TierConfig(
        tier=Tier.STARTER,
        display_name="Starter",
        workspace_limit=1,
        features=frozenset({Feature.DASHBOARD}),
    ),
    Tier.TEAM: TierConfig(
        tier=Tier.TEAM,
        display_name="Team",
        workspace_limit=10,
        features=frozenset({Feature.DASHBOARD, Feature.SSO}),
    ),
    Tier.ENTERPRISE: TierConfig(
        tier=Tier.ENTERPRISE,
        display_name="Enterprise",
        workspace_limit=None,
        features=frozenset(Feature),
    ),
}


def get_tier_config(tier: Tier | str | None) -> TierConfig:
    """Return the plan definition, falling back to starter for unknown tiers."""
    return TIER_CONFIGS[Tier.parse(tier)]


def has_feature(tier: Tier | str | None, feature: Feature) -> bool:
    """Whether the plan includes the feature at all."""
    return feature in get_tier_config(tier).features


def can_use_feature(
    tier: Tier | str | None, role: Role | None, feature: Feature
) -> bool:
    """Tier and role must both allow the feature."""
    return has_feature(tier, feature) and capability(role).allows(feature)


def get_workspace_limit(tier: Tier | str | None) -> int | None:
    """Maximum workspaces for the plan; None means unlimited."""
    return get_tier_config(tier).workspace_limit


def can_create_workspace(workspace_limit: int | None, current_count: int) -> bool:
    """True iff the limit is unlimited or not yet reached."""
    return workspace_limit is None or current_count < workspace_limit


def calculate_trial_end(
    now: datetime | None = None, trial_days: int = TRIAL_PERIOD_DAYS
) -> datetime:
    return (now or datetime.now(UTC)) + timedelta(days=trial_days)
