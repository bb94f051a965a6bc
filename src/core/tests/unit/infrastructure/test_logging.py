"""Unit tests for the structlog setup."""

import json
import logging

import structlog

from infrastructure.logging import configure_logging


class TestConfigureLogging:
    def test_events_go_to_stderr_as_json(self, capsys, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        configure_logging()

        structlog.get_logger().info("member_removed", organization_id="org-1")

        captured = capsys.readouterr()
        assert captured.out == ""
        entry = json.loads(captured.err)
        assert entry["event"] == "member_removed"
        assert entry["organization_id"] == "org-1"
        assert entry["level"] == "info"

    def test_level_filters_quieter_events(self, capsys, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        configure_logging(logging.WARNING)
        logger = structlog.get_logger()

        logger.info("migration_step", message="Found 3 document(s)")
        logger.warning("migration_item_failed", item_id="bob")

        lines = capsys.readouterr().err.splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["migration_item_failed"]
