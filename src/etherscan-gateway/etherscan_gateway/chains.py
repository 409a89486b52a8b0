from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

# Placeholder contract address used by wallets/DEX aggregators for the native asset.
NATIVE_TOKEN_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"
DEFAULT_NATIVE_SYMBOL = "ETH"

# Free public endpoints used when Etherscan gates a chain behind a paid plan.
FALLBACK_RPC_URLS: Mapping[str, str] = MappingProxyType(
    {
        "56": "https://binance.llamarpc.com",  # BNB Smart Chain
        "8453": "https://base.llamarpc.com",  # Base
        "43114": "https://api.avax.network/ext/bc/C/rpc",  # Avalanche C-Chain
    }
)

NATIVE_SYMBOLS: Mapping[str, str] = MappingProxyType(
    {
        "1": "ETH",  # Ethereum
        "10": "ETH",  # Optimism
        "25": "CRO",  # Cronos
        "50": "XDC",  # XDC
        "56": "BNB",  # BNB Smart Chain
        "100": "xDAI",  # Gnosis
        "137": "MATIC",  # Polygon
        "199": "BTT",  # BitTorrent
        "204": "BNB",  # opBNB
        "250": "FTM",  # Fantom
        "252": "frxETH",  # Fraxtal
        "255": "ETH",  # Kroma
        "324": "ETH",  # zkSync Era
        "480": "ETH",  # World Chain
        "1101": "ETH",  # Polygon zkEVM
        "1111": "WEMIX",  # Wemix
        "1284": "GLMR",  # Moonbeam
        "1285": "MOVR",  # Moonriver
        "5000": "MNT",  # Mantle
        "8453": "ETH",  # Base
        "33139": "APE",  # ApeChain
        "42161": "ETH",  # Arbitrum One
        "42170": "ETH",  # Arbitrum Nova
        "42220": "CELO",  # Celo
        "43114": "AVAX",  # Avalanche C-Chain
        "59144": "ETH",  # Linea
        "81457": "ETH",  # Blast
        "167000": "ETH",  # Taiko
        "534352": "ETH",  # Scroll
        "660279": "XAI",  # Xai
    }
)

# (chain_id, lowercase address) -> details. USDT's on-chain metadata trips up generic decoding.
WELL_KNOWN_TOKENS: Mapping[Tuple[str, str], Mapping[str, object]] = MappingProxyType(
    {
        ("1", "0xdac17f958d2ee523a2206206994597c13d831ec7"): MappingProxyType(
            {"name": "Tether USD", "symbol": "USDT", "decimals": 6}
        ),
    }
)


class BackendChoice(Enum):
    PRIMARY_ONLY = "primary_only"
    FALLBACK_CAPABLE = "fallback_capable"


def select_backend(chain_id: str) -> BackendChoice:
    if chain_id in FALLBACK_RPC_URLS:
        return BackendChoice.FALLBACK_CAPABLE
    return BackendChoice.PRIMARY_ONLY


def native_symbol(chain_id: str) -> str:
    return NATIVE_SYMBOLS.get(chain_id, DEFAULT_NATIVE_SYMBOL)


def is_native_token(address: str) -> bool:
    return (address or "").strip().lower() == NATIVE_TOKEN_ADDRESS
