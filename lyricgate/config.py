"""Runtime configuration — env-driven.

Settings come from ``LYRICGATE_*`` environment variables or a ``.env``
file.  Fields that earlier deployments read under other names also
accept those names (``RPC_URL``, ``ORBIS_CONTEXT_ID``, ...).

Required settings have no default.  ``load_settings()`` is the startup
entry point: it turns a validation failure into a ``ConfigurationError``
naming every missing variable.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from lyricgate.core.orchestrator import DEFAULT_PURCHASE_PRICE_WEI

DEFAULT_CONTRACT_ADDRESS = "0x83F569503ee532A60e90Ab00fF6BC265826556e0"


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or invalid.

    Fatal at startup; the process should exit.
    """


class LyricGateSettings(BaseSettings):
    """LyricGate configuration with environment variable overrides.

    Examples
    --------
    Via environment::

        export LYRICGATE_RPC_URL=https://sepolia.base.org
        export LYRICGATE_ENVIRONMENT_ID=did:pkh:...
        export LYRICGATE_SONG_MODEL_ID=kjzl6hvfrbw6c...
        export LYRICGATE_CONTEXT_ID=kjzl6kcym7w8y...
        export LYRICGATE_PRIVATE_KEY=0x...

    Or via .env file::

        LYRICGATE_LIT_NETWORK=datil-test
        LYRICGATE_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LYRICGATE_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Ledger node
    rpc_url: str = Field(validation_alias=AliasChoices("LYRICGATE_RPC_URL", "RPC_URL"))
    contract_address: str = Field(
        default=DEFAULT_CONTRACT_ADDRESS,
        validation_alias=AliasChoices("LYRICGATE_CONTRACT_ADDRESS", "CONTRACT_ADDRESS"),
    )
    confirmation_timeout_seconds: float = Field(default=120.0, gt=0)
    purchase_price_wei: int = Field(default=DEFAULT_PURCHASE_PRICE_WEI, ge=0)

    # Threshold network
    lit_network: str = "datil-test"

    # Content store
    environment_id: str = Field(
        validation_alias=AliasChoices("LYRICGATE_ENVIRONMENT_ID", "ORBIS_ENVIRONMENT_ID")
    )
    song_model_id: str = Field(
        validation_alias=AliasChoices("LYRICGATE_SONG_MODEL_ID", "ORBIS_SONG_MODEL")
    )
    context_id: str = Field(
        validation_alias=AliasChoices("LYRICGATE_CONTEXT_ID", "ORBIS_CONTEXT_ID")
    )
    content_db_path: Path | None = None

    # Wallet
    private_key: SecretStr = Field(
        validation_alias=AliasChoices("LYRICGATE_PRIVATE_KEY", "PRIVATE_KEY")
    )

    # Sign-In with Ethereum challenge
    siwe_domain: str = "localhost"
    siwe_uri: str = "https://localhost/login"
    siwe_statement: str = (
        "Sign this message to access encrypted lyrics with Lit Protocol."
    )

    @property
    def song_db_path(self) -> Path:
        """SQLite path for song records, one database per environment."""
        if self.content_db_path is not None:
            return self.content_db_path
        return Path(".lyricgate") / self.environment_id.replace(":", "_") / "songs.db"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings(**overrides: object) -> LyricGateSettings:
    """Load settings, failing with ``ConfigurationError`` on any problem."""
    try:
        return LyricGateSettings(**overrides)
    except ValidationError as exc:
        missing: list[str] = []
        invalid: list[str] = []
        for err in exc.errors():
            name = str(err["loc"][0]) if err["loc"] else "?"
            if err["type"] == "missing":
                missing.append(name.upper())
            else:
                invalid.append(f"{name}: {err['msg']}")
        parts: list[str] = []
        if missing:
            parts.append("Missing environment variable(s): " + ", ".join(missing))
        if invalid:
            parts.append("Invalid setting(s): " + "; ".join(invalid))
        raise ConfigurationError(". ".join(parts) or str(exc)) from exc
