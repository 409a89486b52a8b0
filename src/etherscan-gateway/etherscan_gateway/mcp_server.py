"""
MCP server exposing the multichain query gateway (Etherscan V2 with RPC fallback).
"""

import argparse
import logging
import sys
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from .config import load_config
from .service import QueryGateway

server = FastMCP(
    name="etherscan-gateway",
    instructions=(
        "Read balances, blocks, transactions, token metadata and contract calls on any "
        "Etherscan-supported chain. chain_id is the numeric chain ID (1 = Ethereum, 42161 = Arbitrum One)."
    ),
)

_gateway: Optional[QueryGateway] = None


def _get_gateway() -> QueryGateway:
    global _gateway
    if _gateway is None:
        _gateway = QueryGateway(load_config())
    return _gateway


@server.tool(
    name="get_account_balance",
    title="Get Account Balance",
    description="Get the native balance (wei) of an account on a specific chain.",
)
def get_account_balance(chain_id: str, address: str) -> dict:
    return _get_gateway().get_account_balance(chain_id, address)


@server.tool(
    name="get_token_balance",
    title="Get Token Balance",
    description="Get the ERC-20 token balance (raw units) of an account on a specific chain.",
)
def get_token_balance(chain_id: str, contract_address: str, address: str) -> dict:
    return _get_gateway().get_token_balance(chain_id, contract_address, address)


@server.tool(
    name="get_token_details",
    title="Get Token Details",
    description="Get token name, symbol and decimals. Unresolvable fields fall back to defaults.",
)
def get_token_details(chain_id: str, contract_address: str) -> dict:
    return _get_gateway().get_token_details(chain_id, contract_address)


@server.tool(
    name="get_latest_block_number",
    title="Get Latest Block Number",
    description="Get the latest block number (decimal).",
)
def get_latest_block_number(chain_id: str) -> dict:
    return _get_gateway().get_latest_block_number(chain_id)


@server.tool(
    name="get_block_by_number",
    title="Get Block By Number",
    description="Get block information (reward summary) by decimal block number.",
)
def get_block_by_number(chain_id: str, block_number: str) -> Any:
    return _get_gateway().get_block_by_number(chain_id, block_number)


@server.tool(
    name="get_block_by_number_raw",
    title="Get Raw Block By Number",
    description="Get the full block with transactions via eth_getBlockByNumber. block_number: decimal or latest.",
)
def get_block_by_number_raw(chain_id: str, block_number: str) -> Any:
    return _get_gateway().get_block_by_number_raw(chain_id, block_number)


@server.tool(
    name="get_block_rewards",
    title="Get Block Rewards",
    description="Get block and uncle rewards by decimal block number.",
)
def get_block_rewards(chain_id: str, block_number: str) -> Any:
    return _get_gateway().get_block_rewards(chain_id, block_number)


@server.tool(
    name="get_contract_abi",
    title="Get Contract ABI",
    description="Get the ABI (JSON text) for a verified contract.",
)
def get_contract_abi(chain_id: str, contract_address: str) -> str:
    return _get_gateway().get_contract_abi(chain_id, contract_address)


@server.tool(
    name="get_contract_source_code",
    title="Get Contract Source Code",
    description="Get the source code of a verified contract.",
)
def get_contract_source_code(chain_id: str, contract_address: str) -> Any:
    return _get_gateway().get_contract_source_code(chain_id, contract_address)


@server.tool(
    name="execute_contract_method",
    title="Execute Read-Only Contract Method",
    description="eth_call a contract with 0x-prefixed call data (selector + encoded args). Returns the raw hex result.",
)
def execute_contract_method(
    chain_id: str,
    contract_address: str,
    method_abi: str,
    method_params: str = "",
) -> Any:
    return _get_gateway().execute_contract_method(chain_id, contract_address, method_abi, method_params)


@server.tool(
    name="get_gas_oracle",
    title="Get Gas Oracle",
    description="Get current safe/propose/fast gas prices.",
)
def get_gas_oracle(chain_id: str) -> Any:
    return _get_gateway().get_gas_oracle(chain_id)


@server.tool(
    name="get_transaction_by_hash",
    title="Get Transaction By Hash",
    description="Get transaction details by hash.",
)
def get_transaction_by_hash(chain_id: str, tx_hash: str) -> Any:
    return _get_gateway().get_transaction_by_hash(chain_id, tx_hash)


@server.tool(
    name="get_transaction_by_block_number_and_index",
    title="Get Transaction By Block And Index",
    description="Get a transaction by block number (decimal or latest) and index within the block.",
)
def get_transaction_by_block_number_and_index(chain_id: str, block_number: str, index: str) -> Any:
    return _get_gateway().get_transaction_by_block_number_and_index(chain_id, block_number, index)


@server.tool(
    name="get_transaction_count",
    title="Get Transaction Count",
    description="Get the number of transactions sent from an address (hex nonce).",
)
def get_transaction_count(chain_id: str, address: str, tag: str = "latest") -> Any:
    return _get_gateway().get_transaction_count(chain_id, address, tag)


@server.tool(
    name="get_transaction_receipt",
    title="Get Transaction Receipt",
    description="Get the receipt of a mined transaction.",
)
def get_transaction_receipt(chain_id: str, tx_hash: str) -> Any:
    return _get_gateway().get_transaction_receipt(chain_id, tx_hash)


@server.tool(
    name="get_transaction_status",
    title="Get Transaction Status",
    description="Check contract execution status (error flag and description) of a transaction.",
)
def get_transaction_status(chain_id: str, tx_hash: str) -> Any:
    return _get_gateway().get_transaction_status(chain_id, tx_hash)


@server.tool(
    name="get_transactions_by_address",
    title="List Transactions",
    description="List normal transactions for an address with optional block range and pagination.",
)
def get_transactions_by_address(
    chain_id: str,
    address: str,
    start_block: str = "",
    end_block: str = "",
    page: str = "",
    offset: str = "",
) -> Any:
    return _get_gateway().get_transactions_by_address(chain_id, address, start_block, end_block, page, offset)


@server.tool(
    name="get_internal_transactions_by_address",
    title="List Internal Transactions",
    description="List internal transactions for an address with optional block range and pagination.",
)
def get_internal_transactions_by_address(
    chain_id: str,
    address: str,
    start_block: str = "",
    end_block: str = "",
    page: str = "",
    offset: str = "",
) -> Any:
    return _get_gateway().get_internal_transactions_by_address(
        chain_id, address, start_block, end_block, page, offset
    )


@server.tool(
    name="get_token_transfers_by_address",
    title="List ERC-20 Transfers",
    description="List ERC-20 transfers for an address, optionally filtered by token contract.",
)
def get_token_transfers_by_address(
    chain_id: str,
    address: str,
    contract_address: str = "",
    start_block: str = "",
    end_block: str = "",
    page: str = "",
    offset: str = "",
) -> Any:
    return _get_gateway().get_token_transfers_by_address(
        chain_id, address, contract_address, start_block, end_block, page, offset
    )


@server.tool(
    name="get_erc721_transfers",
    title="List ERC-721 Transfers",
    description="List ERC-721 transfers for an address, optionally filtered by token contract.",
)
def get_erc721_transfers(
    chain_id: str,
    address: str,
    contract_address: str = "",
    start_block: str = "",
    end_block: str = "",
    page: str = "",
    offset: str = "",
) -> Any:
    return _get_gateway().get_erc721_transfers(
        chain_id, address, contract_address, start_block, end_block, page, offset
    )


def configure_logging(level: str) -> None:
    # stdout carries the stdio transport.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Etherscan gateway MCP server.")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Transport protocol for MCP.",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=4000,
        help="Port for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--mount-path",
        default="/",
        help="Mount path for SSE transport (only when transport=sse).",
    )
    args = parser.parse_args()

    config = load_config()
    configure_logging(config.log_level)
    global _gateway
    _gateway = QueryGateway(config)

    server.settings.host = args.host
    server.settings.port = args.port

    logging.getLogger(__name__).info("Starting etherscan-gateway MCP server (%s)", args.transport)
    if args.transport == "sse":
        server.run(transport="sse", mount_path=args.mount_path)
    else:
        server.run(transport=args.transport)


if __name__ == "__main__":
    main()
