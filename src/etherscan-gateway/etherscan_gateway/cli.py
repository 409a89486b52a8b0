import argparse
import json
import logging
import sys
from typing import Optional

from .config import load_config
from .service import QueryGateway


def _add_chain(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--chain-id",
        required=True,
        help="Numeric chain ID (e.g. 1 for Ethereum, 8453 for Base).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query chain data through Etherscan with RPC fallback.",
        allow_abbrev=False,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    balance_parser = subparsers.add_parser("balance", help="Native balance of an address (wei)")
    _add_chain(balance_parser)
    balance_parser.add_argument("--address", required=True, help="Account address (0x-prefixed).")

    token_balance_parser = subparsers.add_parser("token-balance", help="ERC-20 balance of an address")
    _add_chain(token_balance_parser)
    token_balance_parser.add_argument("--contract", required=True, help="Token contract address.")
    token_balance_parser.add_argument("--address", required=True, help="Holder address.")

    block_number_parser = subparsers.add_parser("block-number", help="Latest block number")
    _add_chain(block_number_parser)

    block_parser = subparsers.add_parser("block", help="Full block by number or latest")
    _add_chain(block_parser)
    block_parser.add_argument(
        "--block",
        required=True,
        help="Block identifier: latest or decimal number.",
    )

    tx_parser = subparsers.add_parser("tx", help="Transaction by hash")
    _add_chain(tx_parser)
    tx_parser.add_argument("--hash", required=True, help="Transaction hash (0x-prefixed).")

    receipt_parser = subparsers.add_parser("receipt", help="Transaction receipt by hash")
    _add_chain(receipt_parser)
    receipt_parser.add_argument("--hash", required=True, help="Transaction hash (0x-prefixed).")

    token_parser = subparsers.add_parser("token-details", help="Token name, symbol and decimals")
    _add_chain(token_parser)
    token_parser.add_argument("--contract", required=True, help="Token contract address.")

    call_parser = subparsers.add_parser("call", help="Read-only contract call (eth_call)")
    _add_chain(call_parser)
    call_parser.add_argument("--contract", required=True, help="Contract address.")
    call_parser.add_argument("--data", required=True, help="0x-prefixed call data.")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config()
        logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO), stream=sys.stderr)
        gateway = QueryGateway(config)

        if args.command == "balance":
            result = gateway.get_account_balance(args.chain_id, args.address)
        elif args.command == "token-balance":
            result = gateway.get_token_balance(args.chain_id, args.contract, args.address)
        elif args.command == "block-number":
            result = gateway.get_latest_block_number(args.chain_id)
        elif args.command == "block":
            result = gateway.get_block_by_number_raw(args.chain_id, args.block)
        elif args.command == "tx":
            result = gateway.get_transaction_by_hash(args.chain_id, args.hash)
        elif args.command == "receipt":
            result = gateway.get_transaction_receipt(args.chain_id, args.hash)
        elif args.command == "token-details":
            result = gateway.get_token_details(args.chain_id, args.contract)
        else:
            result = gateway.execute_contract_method(args.chain_id, args.contract, args.data)
        print(json.dumps(result, indent=2))
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
