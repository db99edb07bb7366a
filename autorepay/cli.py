"""Command-line interface for the self-repaying vault."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .app import Application
from .config import load_config
from .errors import VaultError
from .logging_setup import configure_logging
from .units import format_units, parse_units


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="autorepay",
        description="Self-repaying collateral vault",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show positions, fees and sweep state")

    deposit_parser = sub.add_parser("deposit", help="Deposit collateral for an account")
    deposit_parser.add_argument("account")
    deposit_parser.add_argument("amount", help="Amount in asset units, e.g. 1.5")

    withdraw_parser = sub.add_parser("withdraw", help="Withdraw collateral for an account")
    withdraw_parser.add_argument("account")
    withdraw_parser.add_argument("amount", help="Amount in asset units, e.g. 1.5")

    sub.add_parser("sweep", help="Run a sweep if one is due")

    keeper_parser = sub.add_parser("keeper", help="Continuous sweep keeper loop")
    keeper_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Poll interval in seconds (overrides config)",
    )

    fund_parser = sub.add_parser("fund", help="Credit a wallet in the simulated market")
    fund_parser.add_argument("account")
    fund_parser.add_argument("amount")

    yield_parser = sub.add_parser(
        "simulate-yield", help="Accrue yield in the simulated market"
    )
    yield_parser.add_argument("amount")

    return parser


def _print_status(app: Application) -> None:
    decimals = app.config.vault.asset_decimals
    asset = app.config.vault.asset
    state = app.vault.state
    scheduler = app.vault.scheduler

    print(f"Accounts: {len(state.ledger)}")
    for account, position in state.ledger.positions():
        if position.is_empty:
            print(f"  {account}: empty")
            continue
        print(
            f"  {account}: collateral {format_units(position.collateral_amount, decimals)} {asset}"
            f" · debt ${format_units(position.borrowed_amount, 18, 2)}"
            f" · updated {position.last_updated}"
        )
    print(f"Fees collected: {format_units(state.fees_collected, decimals)} {asset}")
    print(f"Last sweep: {scheduler.global_last_update} · due: {scheduler.is_due()}")


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    app = Application(config)
    decimals = config.vault.asset_decimals

    try:
        if args.command == "status":
            _print_status(app)
        elif args.command == "deposit":
            await app.vault.manager.deposit(args.account, parse_units(args.amount, decimals))
            _print_status(app)
        elif args.command == "withdraw":
            await app.vault.manager.withdraw(args.account, parse_units(args.amount, decimals))
            _print_status(app)
        elif args.command == "sweep":
            result = await app.keeper.tick()
            print("Sweep ran" if result.ran else "Sweep not due")
        elif args.command == "keeper":
            await app.keeper.run_continuous(args.interval)
        elif args.command == "fund":
            app.env.fund(args.account, parse_units(args.amount, decimals))
        elif args.command == "simulate-yield":
            app.env.market.accrue_yield(parse_units(args.amount, decimals))
        else:
            build_parser().print_help()
            sys.exit(1)
    finally:
        app.save_simulation()


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except VaultError as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        sys.exit(2)
