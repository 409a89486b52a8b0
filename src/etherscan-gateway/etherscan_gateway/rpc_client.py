import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from .chains import FALLBACK_RPC_URLS
from .codec import hex_to_decimal, hex_to_uint64_text, pad_address
from .errors import DecodeError, TransportError, UnsupportedChainError, UpstreamRPCError

logger = logging.getLogger(__name__)

BALANCE_OF_SELECTOR = "0x70a08231"  # balanceOf(address)


class RpcClient:
    """JSON-RPC 2.0 client for the chains Etherscan gates behind a paid plan."""

    def __init__(
        self,
        timeout: float = 15,
        rpc_urls: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.rpc_urls = FALLBACK_RPC_URLS if rpc_urls is None else rpc_urls
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def supports(self, chain_id: str) -> bool:
        return chain_id in self.rpc_urls

    def call(self, chain_id: str, method: str, params: Optional[List[Any]] = None) -> Any:
        rpc_url = self.rpc_urls.get(chain_id)
        if not rpc_url:
            raise UnsupportedChainError(chain_id)

        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params if params is not None else [],
        }

        logger.debug("rpc request chainid=%s method=%s", chain_id, method)
        try:
            response = self.session.post(rpc_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"RPC request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError("Failed to parse RPC response.") from exc
        if not isinstance(data, dict):
            raise DecodeError("Unexpected JSON-RPC response (non-object).")

        error_obj = data.get("error")
        if isinstance(error_obj, dict) and error_obj:
            raise UpstreamRPCError(error_obj.get("code"), str(error_obj.get("message") or ""))

        return data.get("result")

    def block_number(self, chain_id: str) -> str:
        result = self.call(chain_id, "eth_blockNumber", [])
        return hex_to_uint64_text(self._hex_result(result, "block number"))

    def get_balance(self, chain_id: str, address: str) -> str:
        result = self.call(chain_id, "eth_getBalance", [address, "latest"])
        return hex_to_decimal(self._hex_result(result, "balance"), "balance")

    def get_token_balance(self, chain_id: str, contract_address: str, address: str) -> str:
        data = f"{BALANCE_OF_SELECTOR}{pad_address(address)}"
        result = self.eth_call(chain_id, contract_address, data)
        return hex_to_decimal(self._hex_result(result, "token balance"), "token balance")

    def get_transaction_by_hash(self, chain_id: str, tx_hash: str) -> Any:
        return self.call(chain_id, "eth_getTransactionByHash", [tx_hash])

    def get_transaction_receipt(self, chain_id: str, tx_hash: str) -> Any:
        return self.call(chain_id, "eth_getTransactionReceipt", [tx_hash])

    def get_transaction_count(self, chain_id: str, address: str, tag: str = "latest") -> Any:
        return self.call(chain_id, "eth_getTransactionCount", [address, tag or "latest"])

    def eth_call(self, chain_id: str, to: str, data: str) -> Any:
        call_obj: Dict[str, str] = {"to": to, "data": data}
        return self.call(chain_id, "eth_call", [call_obj, "latest"])

    @staticmethod
    def _hex_result(result: Any, field: str) -> str:
        if not isinstance(result, str):
            raise DecodeError(f"Failed to parse {field}: expected a JSON string.")
        return result
