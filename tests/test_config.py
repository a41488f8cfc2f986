from __future__ import annotations

import pytest

from searchparty.config import SearchPartyConfig
from searchparty.exceptions import SearchPartyConfigError


def test_defaults_match_product_cadence() -> None:
    config = SearchPartyConfig()
    assert config.sample_interval == 15
    assert config.presence_interval == 15
    assert config.heatmap_interval == 30
    assert config.heatmap_window_ms == 3_600_000
    assert (config.min_intensity, config.max_intensity, config.live_intensity) == (0.1, 0.8, 1.0)
    assert config.validate() is config


def test_from_env_reads_variables_and_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEARCHPARTY_PROJECT_ID", "env-project")
    monkeypatch.setenv("SEARCHPARTY_API_KEY", "env-key")
    monkeypatch.setenv("SEARCHPARTY_SAMPLE_INTERVAL", "5")
    monkeypatch.setenv("SEARCHPARTY_HEATMAP_WINDOW_MS", "600000")
    monkeypatch.setenv("SEARCHPARTY_PRESENCE_INTERVAL", "7.5")

    config = SearchPartyConfig.from_env(presence_interval=2.0, project_id="override")

    assert config.project_id == "override"
    assert config.api_key == "env-key"
    assert config.sample_interval == 5.0
    assert config.presence_interval == 2.0
    assert config.heatmap_window_ms == 600_000


def test_from_env_rejects_non_numeric(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEARCHPARTY_HEATMAP_INTERVAL", "soon")
    with pytest.raises(SearchPartyConfigError, match="SEARCHPARTY_HEATMAP_INTERVAL"):
        SearchPartyConfig.from_env()


@pytest.mark.parametrize(
    "overrides",
    [
        {"sample_interval": 0},
        {"heatmap_interval": -1},
        {"heatmap_window_ms": 0},
        {"history_query_limit": 0},
        {"max_intensity": 1.5},
        {"min_intensity": 0.9, "max_intensity": 0.8},
    ],
)
def test_validate_rejects_inconsistent_settings(overrides: dict) -> None:
    with pytest.raises(SearchPartyConfigError):
        SearchPartyConfig(**overrides).validate()


def test_documents_root_requires_project() -> None:
    assert SearchPartyConfig(project_id="p").documents_root == "projects/p/databases/(default)/documents"
    with pytest.raises(SearchPartyConfigError):
        _ = SearchPartyConfig().documents_root
