#!/usr/bin/env python3
"""Set ownerId on workspaces that predate workspace ownership.

The workspace creator (createdBy) becomes the owner. Workspaces that already
have an ownerId are left alone. Safe to re-run.

Usage:
    ./scripts/migrate_workspace_ownership.py --dry-run
    ./scripts/migrate_workspace_ownership.py --yes
"""

import sys
from pathlib import Path

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "core"))

from migration.presentation.cli import migrate_workspace_ownership_main  # noqa: E402

if __name__ == "__main__":
    sys.exit(migrate_workspace_ownership_main())
