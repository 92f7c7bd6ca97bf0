"""Tests for runtime configuration — env-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from lyricgate.config import (
    DEFAULT_CONTRACT_ADDRESS,
    ConfigurationError,
    LyricGateSettings,
    load_settings,
)

_ENV_NAMES = (
    "LYRICGATE_RPC_URL",
    "RPC_URL",
    "LYRICGATE_CONTRACT_ADDRESS",
    "CONTRACT_ADDRESS",
    "LYRICGATE_ENVIRONMENT_ID",
    "ORBIS_ENVIRONMENT_ID",
    "LYRICGATE_SONG_MODEL_ID",
    "ORBIS_SONG_MODEL",
    "LYRICGATE_CONTEXT_ID",
    "ORBIS_CONTEXT_ID",
    "LYRICGATE_PRIVATE_KEY",
    "PRIVATE_KEY",
    "LYRICGATE_ENVIRONMENT",
    "LYRICGATE_LOG_LEVEL",
    "LYRICGATE_PURCHASE_PRICE_WEI",
)

_KEY = "0x" + "11" * 32


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    # No stray .env file is picked up from the working directory.
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def full_env(clean_env):
    clean_env.setenv("LYRICGATE_RPC_URL", "https://sepolia.base.org")
    clean_env.setenv("LYRICGATE_ENVIRONMENT_ID", "did:pkh:eip155:1:0xabc")
    clean_env.setenv("LYRICGATE_SONG_MODEL_ID", "model-songs")
    clean_env.setenv("LYRICGATE_CONTEXT_ID", "context-karaoke")
    clean_env.setenv("LYRICGATE_PRIVATE_KEY", _KEY)
    return clean_env


class TestLoadSettings:
    def test_from_prefixed_env(self, full_env):
        settings = load_settings()
        assert settings.rpc_url == "https://sepolia.base.org"
        assert settings.song_model_id == "model-songs"
        assert settings.private_key.get_secret_value() == _KEY

    def test_defaults(self, full_env):
        settings = load_settings()
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.contract_address == DEFAULT_CONTRACT_ADDRESS
        assert settings.lit_network == "datil-test"
        assert settings.purchase_price_wei == 10**15
        assert settings.is_production is False

    def test_legacy_names_accepted(self, clean_env):
        clean_env.setenv("RPC_URL", "http://localhost:8545")
        clean_env.setenv("ORBIS_ENVIRONMENT_ID", "env")
        clean_env.setenv("ORBIS_SONG_MODEL", "model")
        clean_env.setenv("ORBIS_CONTEXT_ID", "ctx")
        clean_env.setenv("PRIVATE_KEY", _KEY)
        settings = load_settings()
        assert settings.rpc_url == "http://localhost:8545"
        assert settings.context_id == "ctx"

    def test_missing_everything(self, clean_env):
        with pytest.raises(ConfigurationError, match="Missing environment variable") as excinfo:
            load_settings()
        message = str(excinfo.value)
        for name in ("RPC_URL", "ENVIRONMENT_ID", "SONG_MODEL", "CONTEXT_ID", "PRIVATE_KEY"):
            assert name in message

    def test_missing_one(self, full_env):
        full_env.delenv("LYRICGATE_CONTEXT_ID")
        with pytest.raises(ConfigurationError) as excinfo:
            load_settings()
        assert "CONTEXT_ID" in str(excinfo.value)
        assert "RPC_URL" not in str(excinfo.value)

    def test_invalid_value(self, full_env):
        full_env.setenv("LYRICGATE_PURCHASE_PRICE_WEI", "-1")
        with pytest.raises(ConfigurationError, match="Invalid setting"):
            load_settings()

    def test_overrides_win(self, full_env):
        settings = load_settings(environment="production")
        assert settings.is_production is True

    def test_private_key_hidden_in_repr(self, full_env):
        assert _KEY not in repr(load_settings())


class TestSongDbPath:
    def test_default_path_per_environment(self, full_env):
        settings = load_settings()
        assert settings.song_db_path == Path(".lyricgate/did_pkh_eip155_1_0xabc/songs.db")

    def test_explicit_path(self, settings: LyricGateSettings, tmp_path: Path):
        assert settings.song_db_path == tmp_path / "session-songs.db"
