import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from .chains import WELL_KNOWN_TOKENS, BackendChoice, is_native_token, native_symbol, select_backend
from .codec import UINT64_MAX, decode_abi_string, hex_to_int
from .errors import GatewayError, PaidPlanRequiredError
from .etherscan_client import EtherscanClient
from .rpc_client import RpcClient

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unknown Token"
DEFAULT_SYMBOL = "UNKNOWN"
DEFAULT_DECIMALS = 18

NAME_SELECTOR = "0x06fdde03"  # name()
SYMBOL_SELECTOR = "0x95d89b41"  # symbol()
DECIMALS_SELECTOR = "0x313ce567"  # decimals()


@dataclass(frozen=True)
class TokenDetails:
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    decimals: int = DEFAULT_DECIMALS

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _parse_decimals(value: Any) -> Optional[int]:
    try:
        parsed = hex_to_int(value, "decimals")
    except GatewayError:
        return None
    if parsed > UINT64_MAX:
        return None
    return parsed


def _details_from_token_info(result: Any) -> Optional[TokenDetails]:
    """Map a token/tokeninfo payload to TokenDetails, or None if it does not indicate success."""
    entry: Any = None
    if isinstance(result, Mapping):
        if result.get("status") != "1":
            return None
        entry = result.get("result")
        if isinstance(entry, list):
            entry = entry[0] if entry else None
    elif isinstance(result, list) and result:
        entry = result[0]

    if not isinstance(entry, Mapping):
        return None

    name = entry.get("tokenName") or entry.get("name")
    symbol = entry.get("symbol")
    if not name and not symbol:
        return None

    decimals = DEFAULT_DECIMALS
    raw_decimals = entry.get("divisor", entry.get("decimals"))
    if isinstance(raw_decimals, int) and not isinstance(raw_decimals, bool):
        decimals = raw_decimals
    elif isinstance(raw_decimals, str) and raw_decimals.strip().isdigit():
        decimals = int(raw_decimals.strip())

    return TokenDetails(
        name=str(name or DEFAULT_NAME),
        symbol=str(symbol or DEFAULT_SYMBOL),
        decimals=decimals,
    )


class TokenResolver:
    """
    Best-effort ERC-20 metadata lookup. Never raises: every unresolved field
    keeps its default.

    Order: native placeholder, well-known tokens, Etherscan tokeninfo, then
    name()/symbol()/decimals() calls through Etherscan's eth_call proxy or,
    when Etherscan requires a paid plan for the chain, the fallback RPC.
    """

    def __init__(self, explorer: EtherscanClient, rpc: Optional[RpcClient] = None) -> None:
        self.explorer = explorer
        self.rpc = rpc

    def resolve(self, chain_id: str, contract_address: str) -> TokenDetails:
        if is_native_token(contract_address):
            symbol = native_symbol(chain_id)
            return TokenDetails(name=symbol, symbol=symbol, decimals=18)

        known = WELL_KNOWN_TOKENS.get((chain_id, (contract_address or "").lower()))
        if known is not None:
            return TokenDetails(**known)

        use_fallback = False
        try:
            info = self.explorer.get_token_info(chain_id, contract_address)
        except PaidPlanRequiredError:
            use_fallback = self._fallback_available(chain_id)
            info = None
        except GatewayError as exc:
            logger.debug("tokeninfo failed chainid=%s contract=%s: %s", chain_id, contract_address, exc)
            info = None

        details = _details_from_token_info(info) if info is not None else None
        if details is not None:
            return details

        return self._resolve_from_contract(chain_id, contract_address, use_fallback)

    def _fallback_available(self, chain_id: str) -> bool:
        return (
            self.rpc is not None
            and select_backend(chain_id) is BackendChoice.FALLBACK_CAPABLE
            and self.rpc.supports(chain_id)
        )

    def _resolve_from_contract(self, chain_id: str, contract_address: str, use_fallback: bool) -> TokenDetails:
        name = DEFAULT_NAME
        symbol = DEFAULT_SYMBOL
        decimals = DEFAULT_DECIMALS

        raw_name = self._call(chain_id, contract_address, NAME_SELECTOR, use_fallback)
        decoded = decode_abi_string(raw_name)
        if decoded:
            name = decoded

        raw_symbol = self._call(chain_id, contract_address, SYMBOL_SELECTOR, use_fallback)
        decoded = decode_abi_string(raw_symbol)
        if decoded:
            symbol = decoded

        raw_decimals = self._call(chain_id, contract_address, DECIMALS_SELECTOR, use_fallback)
        parsed = _parse_decimals(raw_decimals)
        if parsed is not None:
            decimals = parsed

        return TokenDetails(name=name, symbol=symbol, decimals=decimals)

    def _call(self, chain_id: str, contract_address: str, selector: str, use_fallback: bool) -> Any:
        try:
            if use_fallback and self.rpc is not None:
                return self.rpc.eth_call(chain_id, contract_address, selector)
            return self.explorer.execute_contract_method(chain_id, contract_address, selector)
        except GatewayError as exc:
            logger.warning(
                "token call %s failed chainid=%s contract=%s: %s",
                selector,
                chain_id,
                contract_address,
                exc,
            )
            return None
