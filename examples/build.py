#!/usr/bin/env python3
"""Example CLI that prepares context and builds an unsigned transaction."""

import argparse
import json
import logging
import sys

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.client import Client
from txbuilder.errors import TxBuilderError
from txbuilder.solend import build_deposit_transaction, build_withdraw_transaction
from txbuilder.transaction import transaction_info
from txbuilder.wallet import build_transfer_transaction


def main() -> None:
    parser = argparse.ArgumentParser(description="Build an unsigned Solana transaction")
    parser.add_argument(
        "--env",
        default="mainnet-beta",
        choices=["mainnet-beta", "testnet", "devnet", "localnet"],
        help="Environment to connect to",
    )
    parser.add_argument("--wallet", required=True, help="Fee payer and signer address")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log builder warnings")
    sub = parser.add_subparsers(dest="command", required=True)

    transfer = sub.add_parser("transfer", help="SOL or SPL token transfer")
    transfer.add_argument("--to", required=True, help="Recipient address")
    transfer.add_argument("--amount", required=True, help="Amount in human units")
    transfer.add_argument("--symbol", default=None, help="Token symbol (default SOL)")
    transfer.add_argument("--memo", default=None)

    for name in ("deposit", "withdraw"):
        p = sub.add_parser(name, help=f"Solend USDC {name}")
        p.add_argument("--amount", required=True, type=int, help="Amount in USDC smallest units")

    sub.add_parser("position", help="Show the wallet's Solend USDC position")

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.ERROR)

    client = Client.from_env(args.env)
    wallet = Pubkey.from_string(args.wallet)

    try:
        if args.command == "position":
            position = client.fetch_position(wallet)
            print(f"Obligation:  {position.obligation}")
            print(f"Exists:      {position.exists}")
            print(f"Deposited:   {position.deposited} USDC ({position.deposited_raw} raw)")
            return

        if args.command == "transfer":
            recipient = Pubkey.from_string(args.to)
            ctx = client.prepare_transfer_context(wallet, recipient, symbol=args.symbol)
            result = build_transfer_transaction(
                args.wallet, args.to, args.amount, ctx, symbol=args.symbol, memo=args.memo
            )
        else:
            ctx = client.prepare_solend_context(wallet)
            build = build_deposit_transaction if args.command == "deposit" else build_withdraw_transaction
            result = build(args.wallet, args.amount, ctx)
    except TxBuilderError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(json.dumps(result.to_dict(), indent=2))
    info = transaction_info(result.wire_transaction)
    print(f"\nSize: {info['size_in_bytes']}/{info['size_limit']} bytes ({info['percent_used']}%)")


if __name__ == "__main__":
    main()
