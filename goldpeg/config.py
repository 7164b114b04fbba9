from pathlib import Path
from typing import Any, Dict

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # Contract addresses (zero address means "not configured")
    poipoi_token_address: str = Field(
        default=ZERO_ADDRESS,
        description="POI token contract address",
        validation_alias=AliasChoices("poipoi_token_address", "VITE_POIPOI_TOKEN_ADDRESS"),
    )
    gold_price_oracle_address: str = Field(
        default=ZERO_ADDRESS,
        description="Gold price oracle (always-configured fallback source)",
        validation_alias=AliasChoices("gold_price_oracle_address", "VITE_GOLD_PRICE_ORACLE_ADDRESS"),
    )
    poipoi_manager_address: str = Field(
        default=ZERO_ADDRESS,
        description="Mint/redeem manager contract address",
        validation_alias=AliasChoices("poipoi_manager_address", "VITE_POIPOI_MANAGER_ADDRESS"),
    )
    gold_reader_address: str = Field(
        default=ZERO_ADDRESS,
        description="Cross-chain gold reader (primary source with staleness reporting)",
        validation_alias=AliasChoices("gold_reader_address", "VITE_GOLD_READER_ADDRESS"),
    )

    # Chains
    chain_id: int = Field(
        default=30,
        description="Rootstock mainnet chain id",
        validation_alias=AliasChoices("chain_id", "VITE_CHAIN_ID"),
    )
    testnet_chain_id: int = Field(
        default=31,
        description="Rootstock testnet chain id",
        validation_alias=AliasChoices("testnet_chain_id", "VITE_TESTNET_CHAIN_ID"),
    )
    local_chain_id: int = Field(default=31337, description="Local development chain id (Anvil)")
    target_chain_id: int = Field(
        default=31337,
        description="Chain the wallet is asked to switch to when connected to an unsupported chain",
    )

    # RPC URLs
    rootstock_rpc_url: str = Field(
        default="https://public-node.rsk.co",
        description="Rootstock mainnet RPC URL",
        validation_alias=AliasChoices("rootstock_rpc_url", "VITE_ROOTSTOCK_RPC_URL"),
    )
    rootstock_testnet_rpc_url: str = Field(
        default="https://public-node.testnet.rsk.co",
        description="Rootstock testnet RPC URL",
        validation_alias=AliasChoices("rootstock_testnet_rpc_url", "VITE_ROOTSTOCK_TESTNET_RPC_URL"),
    )
    local_rpc_url: str = Field(default="http://localhost:8545", description="Local development RPC URL")

    # Polling / transport
    price_poll_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Interval between gold price refreshes",
    )
    request_timeout_seconds: int = Field(default=30, description="JSON-RPC request timeout")
    gas_buffer_percent: int = Field(
        default=20,
        ge=0,
        description="Extra gas added on top of the estimate for mint/redeem",
    )
    receipt_timeout_seconds: float = Field(default=120.0, description="Max wait for a transaction receipt")
    receipt_poll_interval_seconds: float = Field(default=2.0, description="Receipt polling interval")

    @property
    def contract_addresses(self) -> Dict[str, str]:
        return {
            "POIPOI": self.poipoi_token_address,
            "GOLD_PRICE_ORACLE": self.gold_price_oracle_address,
            "POIPOI_MANAGER": self.poipoi_manager_address,
            "GOLD_READER": self.gold_reader_address,
        }

    def rpc_url_for(self, chain_id: int) -> str:
        """RPC URL for a chain id; unknown ids use the testnet node."""
        urls: Dict[int, Any] = {
            self.chain_id: self.rootstock_rpc_url,
            self.testnet_chain_id: self.rootstock_testnet_rpc_url,
            self.local_chain_id: self.local_rpc_url,
        }
        return urls.get(chain_id, self.rootstock_testnet_rpc_url)


# Global settings instance
settings = Settings()
