#!/usr/bin/env python3
"""Create organizations for users that predate multi-tenancy.

Groups users by email domain (or into one organization with --single-org, or
one per user with --per-user),
creates an organization, default workspace and trial subscription per group,
assigns workspaceId to the group's sessions, projects and themes, and
affiliates the users. Safe to re-run.

Usage:
    ./scripts/migrate_to_organizations.py --dry-run
    ./scripts/migrate_to_organizations.py --single-org
    ./scripts/migrate_to_organizations.py --yes
"""

import sys
from pathlib import Path

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "core"))

from migration.presentation.cli import migrate_to_organizations_main  # noqa: E402

if __name__ == "__main__":
    sys.exit(migrate_to_organizations_main())
