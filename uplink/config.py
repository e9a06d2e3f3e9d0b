import logging
from pathlib import Path

from pydantic import Field  # type: ignore[import-not-found]
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore[import-not-found]

from .constants import DEFAULT_FAUCET_URL, DEFAULT_RIPPLED, DEFAULT_TESTNET_RIPPLED


class Settings(BaseSettings):
    """Uplink runtime configuration using Pydantic v2."""

    model_config = SettingsConfigDict(
        env_file=[".env.local", ".env"],
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields to avoid validation errors
    )

    # Application
    APP_NAME: str = "XRP Uplink"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = Field(default="INFO")

    # Persisted uplink configuration
    UPLINK_CONFIG_PATH: str = Field(default="~/.xrp-uplink.json")

    # XRP Ledger
    XRP_SERVER: str = Field(default=DEFAULT_RIPPLED)
    XRP_TESTNET_SERVER: str = Field(default=DEFAULT_TESTNET_RIPPLED)
    XRP_FAUCET_URL: str = Field(default=DEFAULT_FAUCET_URL)
    FAUCET_SETTLE_SECONDS: float = Field(default=10.0)  # Time for the faucet payment to validate
    FAUCET_TIMEOUT: float = Field(default=30.0)

    # Parent connectors offered as defaults, per network
    PARENT_CONNECTORS_LIVE: list[str] = Field(default_factory=list)
    PARENT_CONNECTORS_TEST: list[str] = Field(default_factory=list)

    # Settlement plugin, "package.module:ClassName"
    SETTLEMENT_PLUGIN: str = Field(default="")

    # Optional deadline for a whole CLI operation, in seconds
    OPERATION_TIMEOUT: float | None = Field(default=None)

    def config_path(self) -> Path:
        """Return the expanded path of the persisted uplink config."""
        return Path(self.UPLINK_CONFIG_PATH).expanduser()

    def default_server(self, testnet: bool) -> str:
        """Return the rippled endpoint offered by default for a network."""
        return self.XRP_TESTNET_SERVER if testnet else self.XRP_SERVER

    def parent_connectors(self, testnet: bool) -> list[str]:
        """Return the known parent connector hosts for a network."""
        return self.PARENT_CONNECTORS_TEST if testnet else self.PARENT_CONNECTORS_LIVE


# Create settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the shared settings instance."""
    return settings


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
