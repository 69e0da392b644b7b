"""
Tests for configuration module.
"""

from pathlib import Path

import pydantic
import pytest

from crsgraph.core.config import Settings, get_settings, settings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Run with no CRSGRAPH_* variables and no .env file in reach."""
    for name in ("ENVIRONMENT", "LOG_LEVEL", "JSON_LOGS", "LOG_FILE", "DISCOVERY_STRATEGY"):
        monkeypatch.delenv(f"CRSGRAPH_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self, clean_env) -> None:
        """Test that default values are set correctly."""
        s = Settings()

        assert s.environment == "development"
        assert s.log_level is None
        assert s.json_logs is False
        assert s.log_file is None
        assert s.discovery_strategy == "depth_first"

    def test_custom_values(self, clean_env, tmp_path: Path) -> None:
        """Test setting custom configuration values."""
        s = Settings(
            environment="production",
            log_level="warning",
            json_logs=True,
            log_file=tmp_path / "crsgraph.log",
            discovery_strategy="breadth_first",
        )

        assert s.environment == "production"
        assert s.json_logs is True
        assert s.log_file == tmp_path / "crsgraph.log"
        assert s.discovery_strategy == "breadth_first"

    def test_environment_variables(self, clean_env) -> None:
        """Test that CRSGRAPH_* variables are read."""
        clean_env.setenv("CRSGRAPH_DISCOVERY_STRATEGY", "breadth_first")
        clean_env.setenv("CRSGRAPH_JSON_LOGS", "true")

        s = Settings()

        assert s.discovery_strategy == "breadth_first"
        assert s.json_logs is True

    def test_env_file(self, clean_env, tmp_path: Path) -> None:
        """Test that a .env file in the working directory is read."""
        (tmp_path / ".env").write_text("CRSGRAPH_ENVIRONMENT=staging\n", encoding="utf-8")

        assert Settings().environment == "staging"

    def test_invalid_strategy(self, clean_env) -> None:
        """Test that unknown strategies are rejected at load time."""
        with pytest.raises(pydantic.ValidationError):
            Settings(discovery_strategy="a_star")

    def test_effective_log_level(self, clean_env) -> None:
        """Test log level derivation from environment."""
        assert Settings().effective_log_level == "DEBUG"
        assert Settings(environment="production").effective_log_level == "INFO"
        assert Settings(environment="production", log_level="error").effective_log_level == "ERROR"

    def test_get_settings(self) -> None:
        assert get_settings() is settings
