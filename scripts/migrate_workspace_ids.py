#!/usr/bin/env python3
"""Assign workspaceId to sessions, projects and themes that lack one.

Each resource gets its owner's first workspace, or the default workspace of
the owner's organization, then a data integrity report is printed.

Usage:
    ./scripts/migrate_workspace_ids.py --dry-run
    ./scripts/migrate_workspace_ids.py --collection sessions
"""

import sys
from pathlib import Path

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "core"))

from migration.presentation.cli import migrate_workspace_ids_main  # noqa: E402

if __name__ == "__main__":
    sys.exit(migrate_workspace_ids_main())
