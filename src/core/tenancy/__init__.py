"""Tenancy bounded context.

Organizations, workspaces, members, subscriptions and join requests, plus
the authorization rules (roles, tiers, admin invariant) that govern them.
"""
