import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from .chains import BackendChoice, select_backend
from .config import Config
from .errors import PaidPlanRequiredError
from .etherscan_client import EtherscanClient
from .rpc_client import RpcClient
from .tokens import TokenResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryGateway:
    """Route read queries to Etherscan, or to a public RPC node when Etherscan requires a paid plan."""

    def __init__(
        self,
        config: Config,
        explorer: Optional[EtherscanClient] = None,
        rpc: Optional[RpcClient] = None,
    ) -> None:
        self.config = config
        self.explorer = explorer or EtherscanClient(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.request_timeout,
        )
        self.rpc = rpc or RpcClient(timeout=config.rpc_timeout)
        self.tokens = TokenResolver(self.explorer, self.rpc)

    def get_account_balance(self, chain_id: str, address: str) -> Dict[str, str]:
        balance = self._route(
            chain_id,
            lambda: self.explorer.get_account_balance(chain_id, address),
            lambda: self.rpc.get_balance(chain_id, address),
        )
        return {"balance": balance}

    def get_token_balance(self, chain_id: str, contract_address: str, address: str) -> Dict[str, str]:
        balance = self._route(
            chain_id,
            lambda: self.explorer.get_token_balance(chain_id, contract_address, address),
            lambda: self.rpc.get_token_balance(chain_id, contract_address, address),
        )
        return {"balance": balance}

    def get_latest_block_number(self, chain_id: str) -> Dict[str, str]:
        block_number = self._route(
            chain_id,
            lambda: self.explorer.get_latest_block_number(chain_id),
            lambda: self.rpc.block_number(chain_id),
        )
        return {"blockNumber": block_number}

    def get_transaction_by_hash(self, chain_id: str, tx_hash: str) -> Any:
        return self._route(
            chain_id,
            lambda: self.explorer.get_transaction_by_hash(chain_id, tx_hash),
            lambda: self.rpc.get_transaction_by_hash(chain_id, tx_hash),
        )

    def get_transaction_receipt(self, chain_id: str, tx_hash: str) -> Any:
        return self._route(
            chain_id,
            lambda: self.explorer.get_transaction_receipt(chain_id, tx_hash),
            lambda: self.rpc.get_transaction_receipt(chain_id, tx_hash),
        )

    def get_transaction_count(self, chain_id: str, address: str, tag: str = "latest") -> Any:
        return self._route(
            chain_id,
            lambda: self.explorer.get_transaction_count(chain_id, address, tag),
            lambda: self.rpc.get_transaction_count(chain_id, address, tag),
        )

    def execute_contract_method(
        self,
        chain_id: str,
        contract_address: str,
        data: str,
        method_params: str = "",
    ) -> Any:
        def via_rpc() -> Any:
            return self.rpc.eth_call(chain_id, contract_address, data)

        # The node has no equivalent of Etherscan's extra `params` argument.
        fallback = None if method_params else via_rpc
        return self._route(
            chain_id,
            lambda: self.explorer.execute_contract_method(chain_id, contract_address, data, method_params),
            fallback,
        )

    def get_token_details(self, chain_id: str, contract_address: str) -> Dict[str, Any]:
        return self.tokens.resolve(chain_id, contract_address).to_dict()

    def get_block_by_number(self, chain_id: str, block_number: str) -> Any:
        return self.explorer.get_block_by_number(chain_id, block_number)

    def get_block_by_number_raw(self, chain_id: str, block_number: str) -> Any:
        return self.explorer.get_block_by_number_raw(chain_id, block_number)

    def get_block_rewards(self, chain_id: str, block_number: str) -> Any:
        return self.explorer.get_block_rewards(chain_id, block_number)

    def get_contract_abi(self, chain_id: str, contract_address: str) -> str:
        return self.explorer.get_contract_abi(chain_id, contract_address)

    def get_contract_source_code(self, chain_id: str, contract_address: str) -> Any:
        return self.explorer.get_contract_source_code(chain_id, contract_address)

    def get_gas_oracle(self, chain_id: str) -> Any:
        return self.explorer.get_gas_oracle(chain_id)

    def get_transaction_status(self, chain_id: str, tx_hash: str) -> Any:
        return self.explorer.get_transaction_status(chain_id, tx_hash)

    def get_transaction_by_block_number_and_index(self, chain_id: str, block_number: str, index: str) -> Any:
        return self.explorer.get_transaction_by_block_number_and_index(chain_id, block_number, index)

    def get_transactions_by_address(
        self,
        chain_id: str,
        address: str,
        start_block: Optional[str] = None,
        end_block: Optional[str] = None,
        page: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> Any:
        params = self._listing_params(start_block, end_block, page, offset)
        return self.explorer.get_transactions_by_address(chain_id, address, params)

    def get_internal_transactions_by_address(
        self,
        chain_id: str,
        address: str,
        start_block: Optional[str] = None,
        end_block: Optional[str] = None,
        page: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> Any:
        params = self._listing_params(start_block, end_block, page, offset)
        return self.explorer.get_internal_transactions_by_address(chain_id, address, params)

    def get_token_transfers_by_address(
        self,
        chain_id: str,
        address: str,
        contract_address: Optional[str] = None,
        start_block: Optional[str] = None,
        end_block: Optional[str] = None,
        page: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> Any:
        params = self._listing_params(start_block, end_block, page, offset, contract_address)
        return self.explorer.get_token_transfers_by_address(chain_id, address, params)

    def get_erc721_transfers(
        self,
        chain_id: str,
        address: str,
        contract_address: Optional[str] = None,
        start_block: Optional[str] = None,
        end_block: Optional[str] = None,
        page: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> Any:
        params = self._listing_params(start_block, end_block, page, offset, contract_address)
        return self.explorer.get_erc721_transfers(chain_id, address, params)

    def _route(
        self,
        chain_id: str,
        primary: Callable[[], T],
        fallback: Optional[Callable[[], T]] = None,
    ) -> T:
        try:
            return primary()
        except PaidPlanRequiredError:
            if fallback is None or not self._fallback_available(chain_id):
                raise
            logger.info("Etherscan requires a paid plan for chain %s, using RPC fallback.", chain_id)
            return fallback()

    def _fallback_available(self, chain_id: str) -> bool:
        return select_backend(chain_id) is BackendChoice.FALLBACK_CAPABLE and self.rpc.supports(chain_id)

    def _listing_params(
        self,
        start_block: Optional[str],
        end_block: Optional[str],
        page: Optional[str],
        offset: Optional[str],
        contract_address: Optional[str] = None,
    ) -> Dict[str, str]:
        candidates = {
            "contractaddress": contract_address,
            "startblock": start_block,
            "endblock": end_block,
            "page": page,
            "offset": offset,
        }
        return {key: value for key, value in candidates.items() if value}
