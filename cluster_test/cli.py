"""Run the coin index scenario against a live cluster.

Usage:
    coin-index-test --rpc-url http://127.0.0.1:9000 \\
        --faucet-url http://127.0.0.1:9123 \\
        --package-path build/managed_coin.json

Endpoints and the package path fall back to SUI_RPC_URL, SUI_FAUCET_URL and
FT_PACKAGE_PATH.
"""

import argparse
import sys

import asyncio

from rich.console import Console
from rich.table import Table

from cluster_test.helpers.logging import LOG_LEVELS, get_logger, set_log_level
from cluster_test.test_case.base import TestCase, TestResult, run_test_case
from cluster_test.test_case.coin_index import CoinIndexTest
from cluster_test.test_case.context import ClusterConfig, TestContext


logger = get_logger(__name__)

TEST_CASES: tuple[TestCase, ...] = (CoinIndexTest(),)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Verify coin index balances against transaction effects"
    )
    parser.add_argument("--rpc-url", help="Full node JSON-RPC URL (SUI_RPC_URL)")
    parser.add_argument("--faucet-url", help="Faucet URL (SUI_FAUCET_URL)")
    parser.add_argument(
        "--package-path",
        help="Compiled coin package JSON from `sui move build --dump-bytecode-as-base64`",
    )
    parser.add_argument(
        "--log-level", choices=sorted(LOG_LEVELS), default=None, help="Log level"
    )
    return parser.parse_args(argv)


def render_results(console: Console, results: list[TestResult]) -> None:
    table = Table(title="Cluster test results")
    table.add_column("Test")
    table.add_column("Result")
    table.add_column("Step")
    table.add_column("Duration (s)", justify="right")
    table.add_column("Error", overflow="fold")
    for result in results:
        table.add_row(
            result.name,
            "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]",
            result.step or "",
            f"{result.duration_seconds:.2f}",
            result.error or "",
        )
    console.print(table)


async def run_all(config: ClusterConfig) -> list[TestResult]:
    results: list[TestResult] = []
    for case in TEST_CASES:
        # Each case gets a fresh HTTP client
        async with TestContext(config) as ctx:
            results.append(await run_test_case(case, ctx))
    return results


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.log_level:
        set_log_level(args.log_level)
    console = Console()

    try:
        config = ClusterConfig.from_env(args.rpc_url, args.faucet_url, args.package_path)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    results = asyncio.run(run_all(config))
    render_results(console, results)
    return 0 if all(result.passed for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
