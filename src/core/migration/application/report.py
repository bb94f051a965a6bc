"""Accumulator for the outcome of a migration run.

Engines thread one MigrationReport through their call chain and return it,
so a run can be inspected by tests or rendered by the CLI afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CategoryCounts:
    """Per-category counters. In a dry run they count would-be writes."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    orphaned: int = 0
    errored: int = 0


@dataclass(frozen=True)
class ItemError:
    """A single item that failed without stopping the batch."""

    category: str
    item_id: str
    error: str


@dataclass(frozen=True)
class IntegrityFinding:
    """Post-run data problem found by a validation pass."""

    kind: str
    item_id: str
    detail: str


@dataclass
class MigrationReport:
    """Counters, item errors and integrity findings for one run."""

    name: str
    dry_run: bool = False
    counts: dict[str, CategoryCounts] = field(default_factory=dict)
    errors: list[ItemError] = field(default_factory=list)
    findings: list[IntegrityFinding] = field(default_factory=list)

    def category(self, name: str) -> CategoryCounts:
        return self.counts.setdefault(name, CategoryCounts())

    def record_created(self, category: str, count: int = 1) -> None:
        self.category(category).created += count

    def record_updated(self, category: str, count: int = 1) -> None:
        self.category(category).updated += count

    def record_deleted(self, category: str, count: int = 1) -> None:
        self.category(category).deleted += count

    def record_skipped(self, category: str, count: int = 1) -> None:
        self.category(category).skipped += count

    def record_orphaned(self, category: str, count: int = 1) -> None:
        self.category(category).orphaned += count

    def record_error(self, category: str, item_id: str, error: Exception | str) -> None:
        self.category(category).errored += 1
        self.errors.append(ItemError(category=category, item_id=item_id, error=str(error)))

    def record_finding(self, kind: str, item_id: str, detail: str) -> None:
        self.findings.append(IntegrityFinding(kind=kind, item_id=item_id, detail=detail))

    @property
    def total_created(self) -> int:
        return sum(c.created for c in self.counts.values())

    @property
    def total_updated(self) -> int:
        return sum(c.updated for c in self.counts.values())

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
