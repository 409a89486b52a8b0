import os
from dataclasses import dataclass

from .etherscan_client import DEFAULT_BASE_URL

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_RPC_TIMEOUT = 15.0


@dataclass
class Config:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    log_level: str = "INFO"


def load_config() -> Config:
    """Load configuration from environment variables."""
    api_key = os.getenv("ETHERSCAN_API_KEY")
    if not api_key:
        raise ValueError("ETHERSCAN_API_KEY is required but not set.")

    base_url = os.getenv("ETHERSCAN_BASE_URL", DEFAULT_BASE_URL).rstrip("/")
    request_timeout = float(os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT)))
    rpc_timeout = float(os.getenv("RPC_TIMEOUT", str(DEFAULT_RPC_TIMEOUT)))
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    return Config(
        api_key=api_key,
        base_url=base_url,
        request_timeout=request_timeout,
        rpc_timeout=rpc_timeout,
        log_level=log_level,
    )
