"""Tests for the command-line interface."""

import json

import pytest
import typer
from typer.testing import CliRunner

from creative_recall.cli import _read_items, app

runner = CliRunner()


class TestReadItems:
    """Batch file parsing."""

    def test_fields_are_canonicalized(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text(json.dumps([
            {"entityType": "task", "entityId": "t-1", "fields": {"title": "Mix vocals", "priority": "high"}},
            {"entityType": "note", "entityId": "n-1", "content": "ready-made"},
        ]))

        items = _read_items(path)

        assert items[0] == {"entityType": "task", "entityId": "t-1", "content": "Mix vocals. Priority: high"}
        assert items[1]["content"] == "ready-made"

    @pytest.mark.parametrize("payload", [{"entityType": "task"}, [1, 2]])
    def test_rejects_malformed_files(self, tmp_path, payload):
        path = tmp_path / "items.json"
        path.write_text(json.dumps(payload))
        with pytest.raises(typer.BadParameter):
            _read_items(path)


class TestCommands:
    """Commands against an empty local store."""

    def test_usage_on_empty_store(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        result = runner.invoke(app, ["usage", "--data", str(tmp_path / "recall"), "--days", "3"])

        assert result.exit_code == 0, result.output
        assert "AI Usage (last 3 days)" in result.output
        assert "Events: 0" in result.output

    def test_log_rejects_unknown_event_type(self, tmp_path):
        result = runner.invoke(
            app, ["log", "Finished bridge", "--user", "u-1", "--event-type", "bogus",
                  "--data", str(tmp_path / "recall")],
        )
        assert result.exit_code != 0

    def test_search_without_endpoint(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.delenv("CREATIVE_RECALL_SEARCH_ENDPOINT_URL", raising=False)
        result = runner.invoke(
            app, ["search", "bridge", "--user", "u-1", "--data", str(tmp_path / "recall")]
        )
        assert result.exit_code == 0, result.output
        assert "No results." in result.output
