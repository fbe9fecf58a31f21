"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from accounts import AppConfig, load_config
from accounts.config import BCRYPT_ROUNDS, ENV_OVERRIDES, MAX_ATTEMPTS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without SKILLZ_* overrides."""
    for name in ENV_OVERRIDES.values():
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Environment overrides are validated like any other value."""

    def test_defaults(self):
        config = load_config()
        assert config.max_attempts == MAX_ATTEMPTS
        assert config.bcrypt_rounds == BCRYPT_ROUNDS

    def test_env_overrides_applied(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SKILLZ_MAX_ATTEMPTS", "3")
        monkeypatch.setenv("SKILLZ_BCRYPT_ROUNDS", "4")
        monkeypatch.setenv("SKILLZ_DB_PATH", str(tmp_path / "env.db"))
        config = load_config()
        assert config.max_attempts == 3
        assert config.bcrypt_rounds == 4
        assert config.db_path == str(tmp_path / "env.db")

    def test_argument_beats_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SKILLZ_DB_PATH", str(tmp_path / "env.db"))
        assert load_config(str(tmp_path / "arg.db")).db_path == str(tmp_path / "arg.db")

    def test_zero_attempts_rejected(self, monkeypatch):
        """A budget of zero would abort before the first prompt."""
        monkeypatch.setenv("SKILLZ_MAX_ATTEMPTS", "0")
        with pytest.raises(ValidationError):
            load_config()

    @pytest.mark.parametrize("rounds", ["3", "99"])
    def test_out_of_range_rounds_rejected(self, monkeypatch, rounds):
        monkeypatch.setenv("SKILLZ_BCRYPT_ROUNDS", rounds)
        with pytest.raises(ValidationError):
            load_config()

    def test_non_numeric_rejected(self, monkeypatch):
        monkeypatch.setenv("SKILLZ_MAX_ATTEMPTS", "five")
        with pytest.raises(ValidationError):
            load_config()

    def test_direct_construction_validated(self):
        with pytest.raises(ValidationError):
            AppConfig(max_attempts=0)
