"""Tests for RecallConfig."""

import pytest

from creative_recall.config.settings import RecallConfig


class TestRecallConfig:
    """Defaults, environment, files and overrides."""

    def test_defaults(self, monkeypatch):
        for name in ("CREATIVE_RECALL_EMBEDDING_WINDOW", "CREATIVE_RECALL_REQUEST_TIMEOUT",
                     "CREATIVE_RECALL_SEARCH_ENDPOINT_URL"):
            monkeypatch.delenv(name, raising=False)
        config = RecallConfig()
        assert config.embedding_window_size == 5
        assert config.request_timeout_seconds == 30.0
        assert config.search_max_limit == 50
        assert config.search_default_threshold == 0.3
        assert config.search_endpoint_url is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("CREATIVE_RECALL_EMBEDDING_WINDOW", "3")
        monkeypatch.setenv("CREATIVE_RECALL_REQUEST_TIMEOUT", "12.5")
        monkeypatch.setenv("CREATIVE_RECALL_SEARCH_ENDPOINT_URL", "https://x.test/search")

        config = RecallConfig.from_env()

        assert config.openai_api_key == "sk-test"
        assert config.embedding_window_size == 3
        assert config.request_timeout_seconds == 12.5
        assert config.search_endpoint_url == "https://x.test/search"

    def test_explicit_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("CREATIVE_RECALL_EMBEDDING_WINDOW", "3")
        assert RecallConfig(embedding_window_size=8).embedding_window_size == 8

    def test_unknown_option(self):
        with pytest.raises(ValueError):
            RecallConfig(window=3)

    def test_from_file_sections(self, tmp_path, monkeypatch):
        for name in ("OPENAI_API_KEY", "CREATIVE_RECALL_EMBEDDING_WINDOW",
                     "CREATIVE_RECALL_EMBEDDING_PROVIDER", "CREATIVE_RECALL_LLM_MODEL",
                     "CREATIVE_RECALL_EMBEDDING_ENDPOINT_URL", "CREATIVE_RECALL_REQUEST_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)
        path = tmp_path / "recall.toml"
        path.write_text(
            '[llm]\nmodel = "gpt-4o"\n\n'
            '[embedding]\nwindow_size = 2\nprovider = "http"\n'
            'endpoint_url = "https://x.test/embed"\n\n'
            '[search]\nmax_limit = 20\n\n'
            '[api_keys]\nopenai = "sk-file"\n\n'
            '[processing]\nrequest_timeout_seconds = 10.0\n'
        )

        config = RecallConfig.from_file(path)

        assert config.llm_model == "gpt-4o"
        assert config.embedding_window_size == 2
        assert config.embedding_provider == "http"
        assert config.embedding_endpoint_url == "https://x.test/embed"
        assert config.search_max_limit == 20
        assert config.openai_api_key == "sk-file"
        assert config.request_timeout_seconds == 10.0

    def test_environment_wins_over_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CREATIVE_RECALL_EMBEDDING_WINDOW", "7")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        path = tmp_path / "recall.toml"
        path.write_text('[embedding]\nwindow_size = 3\n\n[api_keys]\nopenai = "sk-file"\n')

        config = RecallConfig.from_file(path)

        assert config.embedding_window_size == 7
        # Unset environment variables leave file values alone.
        assert config.openai_api_key == "sk-file"

    def test_from_file_overrides_win(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CREATIVE_RECALL_EMBEDDING_WINDOW", "7")
        path = tmp_path / "recall.toml"
        path.write_text("[embedding]\nwindow_size = 3\n")

        config = RecallConfig.from_file(path, embedding_window_size=2)

        assert config.embedding_window_size == 2

    def test_from_file_unknown_option(self, tmp_path):
        path = tmp_path / "recall.toml"
        path.write_text("window = 3\n")

        with pytest.raises(ValueError):
            RecallConfig.from_file(path)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RecallConfig.from_file(tmp_path / "nope.toml")

    def test_to_file_round_trip_without_keys(self, tmp_path, monkeypatch):
        for name in ("OPENAI_API_KEY", "CREATIVE_RECALL_EMBEDDING_WINDOW",
                     "CREATIVE_RECALL_SEARCH_ENDPOINT_URL"):
            monkeypatch.delenv(name, raising=False)
        path = tmp_path / "out" / "recall.toml"
        RecallConfig(
            openai_api_key="sk-secret", embedding_window_size=4, search_endpoint_url="https://x.test/s"
        ).to_file(path)

        text = path.read_text()
        assert "sk-secret" not in text

        loaded = RecallConfig.from_file(path)
        assert loaded.embedding_window_size == 4
        assert loaded.search_endpoint_url == "https://x.test/s"
        assert loaded.openai_api_key is None

    def test_with_overrides(self):
        base = RecallConfig(search_default_limit=7)
        derived = base.with_overrides(search_max_limit=15)
        assert derived.search_default_limit == 7
        assert derived.search_max_limit == 15
        assert base.search_max_limit == 50
