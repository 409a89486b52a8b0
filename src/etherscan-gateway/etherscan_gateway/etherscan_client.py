import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import requests

from .codec import hex_to_uint64_text, to_hex_quantity
from .errors import (
    DecodeError,
    PaidPlanRequiredError,
    TransportError,
    UpstreamAPIError,
    UpstreamRPCError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.etherscan.io/v2/api"


class EnvelopeKind(Enum):
    RPC = "rpc"
    STATUS = "status"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class Envelope:
    kind: EnvelopeKind
    result: Any = None
    status: str = ""
    message: str = ""
    error: Optional[Dict[str, Any]] = None


def parse_envelope(payload: Any) -> Envelope:
    """
    Classify a decoded Etherscan reply.

    Proxy actions answer with a JSON-RPC 2.0 object; every other action uses
    the status/message/result shape. The JSON-RPC shape is tried first.
    """
    if not isinstance(payload, dict):
        return Envelope(EnvelopeKind.UNPARSEABLE, result=payload)

    version = payload.get("jsonrpc")
    if isinstance(version, str) and version:
        error_obj = payload.get("error")
        return Envelope(
            EnvelopeKind.RPC,
            result=payload.get("result"),
            error=error_obj if isinstance(error_obj, dict) else None,
        )

    status = payload.get("status")
    message = payload.get("message")
    if status is None:
        status = ""
    if message is None:
        message = ""
    if not isinstance(status, str) or not isinstance(message, str):
        return Envelope(EnvelopeKind.UNPARSEABLE, result=payload)

    return Envelope(
        EnvelopeKind.STATUS,
        result=payload.get("result"),
        status=status,
        message=message,
    )


def unwrap_envelope(envelope: Envelope) -> Any:
    """Return the inner result of an envelope or raise its classified error."""
    if envelope.kind is EnvelopeKind.RPC:
        if envelope.error is not None:
            raise UpstreamRPCError(envelope.error.get("code"), str(envelope.error.get("message") or ""))
        return envelope.result

    if envelope.kind is EnvelopeKind.STATUS:
        if envelope.status not in ("1", ""):
            if envelope.status == "0" and envelope.message == "NOTOK":
                result = envelope.result
                detail = result if isinstance(result, str) else json.dumps(result)
                raise PaidPlanRequiredError(detail)
            raise UpstreamAPIError(envelope.status, envelope.message)
        return envelope.result

    raise DecodeError("Unexpected response from Etherscan (not a JSON object envelope).")


def _scalar_string(result: Any, field: str) -> str:
    if not isinstance(result, str):
        raise DecodeError(f"Failed to parse {field}: expected a JSON string, got {type(result).__name__}.")
    return result


class EtherscanClient:
    """Thin wrapper around the Etherscan V2 multichain API (single attempt per call)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"X-API-Key": api_key})

    def request(
        self,
        chain_id: str,
        module: str,
        action: str,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        query: Dict[str, str] = {
            "module": module,
            "action": action,
            "apikey": self.api_key,
            "chainid": chain_id,
        }
        query.update(params or {})

        logger.debug("etherscan request chainid=%s module=%s action=%s", chain_id, module, action)
        try:
            response = self.session.get(self.base_url, params=query, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"Failed to reach Etherscan: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError("Failed to parse response from Etherscan.") from exc

        return unwrap_envelope(parse_envelope(payload))

    def get_account_balance(self, chain_id: str, address: str) -> str:
        result = self.request(chain_id, "account", "balance", {"address": address, "tag": "latest"})
        return _scalar_string(result, "balance")

    def get_block_by_number(self, chain_id: str, block_number: str) -> Any:
        return self.request(chain_id, "block", "getblockreward", {"blockno": block_number})

    def get_block_by_number_raw(self, chain_id: str, block_number: str) -> Any:
        params = {
            "tag": to_hex_quantity(block_number),
            "boolean": "true",
        }
        return self.request(chain_id, "proxy", "eth_getBlockByNumber", params)

    def get_block_rewards(self, chain_id: str, block_number: str) -> Any:
        return self.request(chain_id, "block", "getblockreward", {"blockno": block_number})

    def get_contract_abi(self, chain_id: str, contract_address: str) -> str:
        result = self.request(chain_id, "contract", "getabi", {"address": contract_address})
        return _scalar_string(result, "ABI")

    def get_contract_source_code(self, chain_id: str, contract_address: str) -> Any:
        return self.request(chain_id, "contract", "getsourcecode", {"address": contract_address})

    def execute_contract_method(
        self,
        chain_id: str,
        contract_address: str,
        data: str,
        method_params: str = "",
    ) -> Any:
        params = {"to": contract_address, "data": data}
        if method_params:
            params["params"] = method_params
        return self.request(chain_id, "proxy", "eth_call", params)

    def get_gas_oracle(self, chain_id: str) -> Any:
        return self.request(chain_id, "gastracker", "gasoracle")

    def get_token_balance(self, chain_id: str, contract_address: str, address: str) -> str:
        params = {
            "contractaddress": contract_address,
            "address": address,
            "tag": "latest",
        }
        result = self.request(chain_id, "account", "tokenbalance", params)
        return _scalar_string(result, "token balance")

    def get_token_info(self, chain_id: str, contract_address: str) -> Any:
        return self.request(chain_id, "token", "tokeninfo", {"contractaddress": contract_address})

    def get_transaction_by_hash(self, chain_id: str, tx_hash: str) -> Any:
        return self.request(chain_id, "proxy", "eth_getTransactionByHash", {"txhash": tx_hash})

    def get_transaction_by_block_number_and_index(
        self, chain_id: str, block_number: str, index: str
    ) -> Any:
        params = {
            "tag": to_hex_quantity(block_number),
            "index": to_hex_quantity(index),
        }
        return self.request(chain_id, "proxy", "eth_getTransactionByBlockNumberAndIndex", params)

    def get_transaction_count(self, chain_id: str, address: str, tag: str = "latest") -> Any:
        params = {"address": address, "tag": tag or "latest"}
        return self.request(chain_id, "proxy", "eth_getTransactionCount", params)

    def get_transaction_receipt(self, chain_id: str, tx_hash: str) -> Any:
        return self.request(chain_id, "proxy", "eth_getTransactionReceipt", {"txhash": tx_hash})

    def get_transaction_status(self, chain_id: str, tx_hash: str) -> Any:
        return self.request(chain_id, "transaction", "getstatus", {"txhash": tx_hash})

    def get_transactions_by_address(
        self, chain_id: str, address: str, params: Optional[Dict[str, str]] = None
    ) -> Any:
        return self._address_listing(chain_id, "txlist", address, params)

    def get_internal_transactions_by_address(
        self, chain_id: str, address: str, params: Optional[Dict[str, str]] = None
    ) -> Any:
        return self._address_listing(chain_id, "txlistinternal", address, params)

    def get_token_transfers_by_address(
        self, chain_id: str, address: str, params: Optional[Dict[str, str]] = None
    ) -> Any:
        return self._address_listing(chain_id, "tokentx", address, params)

    def get_erc721_transfers(
        self, chain_id: str, address: str, params: Optional[Dict[str, str]] = None
    ) -> Any:
        return self._address_listing(chain_id, "tokennfttx", address, params)

    def get_latest_block_number(self, chain_id: str) -> str:
        result = self.request(chain_id, "proxy", "eth_blockNumber")
        return hex_to_uint64_text(_scalar_string(result, "block number"))

    def _address_listing(
        self, chain_id: str, action: str, address: str, params: Optional[Dict[str, str]]
    ) -> Any:
        merged = dict(params or {})
        merged["address"] = address
        return self.request(chain_id, "account", action, merged)
