"""Copy of one collection into another under the same document ids.

Used to rename problemSpaces to themes. The copy never overwrites: ids that
already exist in the target are skipped, so re-running only fills gaps.
Rollback deletes the whole target collection and is never run implicitly.
"""

from __future__ import annotations

from migration.application.observability import (
    DefaultMigrationProbe,
    MigrationProbe,
)
from migration.application.report import MigrationReport
from shared_kernel.document_store import (
    DocumentAlreadyExistsError,
    DocumentStore,
    StoreError,
    StoreUnavailableError,
)

PROBLEM_SPACES = "problemSpaces"
THEMES = "themes"


class CollectionCopy:
    """Copies every document of `source` into `target`."""

    def __init__(
        self,
        store: DocumentStore,
        source: str = PROBLEM_SPACES,
        target: str = THEMES,
        probe: MigrationProbe | None = None,
    ):
        self._store = store
        self._source = source
        self._target = target
        self._probe = probe or DefaultMigrationProbe()

    @property
    def source(self) -> str:
        return self._source

    @property
    def target(self) -> str:
        return self._target

    async def count_target(self) -> int:
        """Number of documents already in the target collection."""
        return len(await self._store.query(self._target))

    async def copy(self, dry_run: bool = False) -> MigrationReport:
        """Copy missing documents from source to target.

        Raises:
            StoreUnavailableError: If the store cannot be reached at all
        """
        report = MigrationReport(name=f"{self._source}-to-{self._target}", dry_run=dry_run)
        self._probe.run_started(report.name, dry_run)

        documents = await self._store.query(self._source)
        self._probe.step(f"Found {len(documents)} document(s) in {self._source}")
        existing = {d.id for d in await self._store.query(self._target)}

        for document in documents:
            if document.id in existing:
                report.record_skipped(self._target)
                self._probe.item_skipped(self._target, document.id, "Already copied")
                continue

            if dry_run:
                report.record_created(self._target)
                self._probe.would_write("copy document", document.id)
                continue

            try:
                await self._store.create(self._target, dict(document.data), document.id)
            except DocumentAlreadyExistsError:
                report.record_skipped(self._target)
                self._probe.item_skipped(self._target, document.id, "Already copied")
                continue
            except StoreUnavailableError:
                raise
            except StoreError as e:
                report.record_error(self._target, document.id, e)
                self._probe.item_failed(self._target, document.id, str(e))
                continue

            report.record_created(self._target)
            self._probe.item_written(self._target, document.id, "copied")

        self._probe.run_finished(report)
        return report

    async def rollback(self, dry_run: bool = False) -> MigrationReport:
        """Delete every document in the target collection.

        Destructive; callers are expected to have confirmed with the operator.
        """
        report = MigrationReport(name=f"{self._target}-rollback", dry_run=dry_run)
        self._probe.run_started(report.name, dry_run)

        documents = await self._store.query(self._target)
        self._probe.step(f"Found {len(documents)} document(s) in {self._target}")

        for document in documents:
            if dry_run:
                report.record_deleted(self._target)
                self._probe.would_write("delete document", document.id)
                continue

            try:
                await self._store.delete(self._target, document.id)
            except StoreUnavailableError:
                raise
            except StoreError as e:
                report.record_error(self._target, document.id, e)
                self._probe.item_failed(self._target, document.id, str(e))
                continue

            report.record_deleted(self._target)
            self._probe.item_written(self._target, document.id, "deleted")

        self._probe.run_finished(report)
        return report
