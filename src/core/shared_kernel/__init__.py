"""Shared Kernel module.

This module contains foundational components that are explicitly shared across
multiple bounded contexts. Changes to this module affect every context that
reads or writes tenancy data and should be carefully coordinated.
"""
