#!/usr/bin/env python3
"""Copy the problemSpaces collection into themes, or roll the copy back.

Documents keep their ids. --rollback deletes every document in themes and
always asks for confirmation unless combined with --dry-run.

Usage:
    ./scripts/migrate_problem_spaces_to_themes.py --dry-run
    ./scripts/migrate_problem_spaces_to_themes.py
    ./scripts/migrate_problem_spaces_to_themes.py --rollback
"""

import sys
from pathlib import Path

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "core"))

from migration.presentation.cli import migrate_problem_spaces_to_themes_main  # noqa: E402

if __name__ == "__main__":
    sys.exit(migrate_problem_spaces_to_themes_main())
