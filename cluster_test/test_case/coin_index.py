"""Coin index consistency scenario.

Drives one account through a faucet funding, a SUI transfer, a staking
delegation and a coin package publish followed by a mint. After every
transaction the balance changes recorded in its effects are combined with
the previous index snapshot to predict the next one, which must equal what
the index reports once the transaction is locally executed.

State machine (forward only, no retries)::

    INIT -> FUNDED -> TRANSFERRED -> STAKED -> PUBLISHED -> MINTED -> DONE

Any error moves the scenario to FAILED and aborts the run.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import StrEnum

from pydantic import BaseModel

from cluster_test.balances.snapshot import counterparty_delta, delta_for, query
from cluster_test.balances.verifier import (
    verify_coin_type,
    verify_gas_only,
    verify_mint,
    verify_stake,
    verify_transfer_recipient,
    verify_transfer_sender,
)
from cluster_test.helpers.constants import (
    MINT_FUNCTION,
    MINT_GAS_UNITS,
    MINT_MODULE,
    SUI_COIN_TYPE,
)
from cluster_test.helpers.errors import MissingArtifactError, ScenarioError, TestFailure
from cluster_test.helpers.logging import get_logger
from cluster_test.helpers.models import BalanceSnapshot
from cluster_test.helpers.parsers import mist_to_sui, normalize_sui_address, random_sui_address
from cluster_test.test_case.base import TestCase
from cluster_test.test_case.context import TestContext
from cluster_test.test_case.package import (
    CompiledPackage,
    PublishedPackage,
    find_published_artifacts,
    load_compiled_package,
)


logger = get_logger(__name__)


class ScenarioStep(StrEnum):
    INIT = "INIT"
    FUNDED = "FUNDED"
    TRANSFERRED = "TRANSFERRED"
    STAKED = "STAKED"
    PUBLISHED = "PUBLISHED"
    MINTED = "MINTED"
    DONE = "DONE"
    FAILED = "FAILED"


class ScenarioState(BaseModel):
    """Running state of one scenario; advanced only by verified steps."""

    account: str
    step: ScenarioStep = ScenarioStep.INIT
    snapshot: BalanceSnapshot | None = None
    recipient: str | None = None
    package: PublishedPackage | None = None

    def require_snapshot(self) -> BalanceSnapshot:
        if self.snapshot is None:
            msg = f"No verified snapshot before {self.step}"
            raise RuntimeError(msg)
        return self.snapshot


class CoinIndexTest(TestCase):
    """Checks coin index aggregates against transaction balance changes."""

    def __init__(self, package: CompiledPackage | None = None) -> None:
        """Initialize the scenario.

        Args:
            package: Compiled coin package to publish; loaded from the
                context's ``ft_package_path`` when omitted
        """
        self.package = package

    def name(self) -> str:
        return "CoinIndex"

    def description(self) -> str:
        return "Test executing coin index"

    @asynccontextmanager
    async def _step(
        self, state: ScenarioState, step: ScenarioStep
    ) -> AsyncIterator[None]:
        logger.info("%s: entering %s from %s", self.name(), step, state.step)
        try:
            yield
        except ScenarioError as e:
            logger.error("%s: %s failed: %s", self.name(), step, e)
            state.step = ScenarioStep.FAILED
            raise TestFailure(self.name(), step.value, e) from e
        state.step = step

    async def run(self, ctx: TestContext) -> None:
        await self.execute(ctx)

    async def execute(self, ctx: TestContext) -> ScenarioState:
        """Run every step in order and return the final state.

        Raises:
            TestFailure: On the first failing step
        """
        state = ScenarioState(account=normalize_sui_address(ctx.address))

        async with self._step(state, ScenarioStep.FUNDED):
            state.snapshot = await self._fund(ctx, state)
        async with self._step(state, ScenarioStep.TRANSFERRED):
            state.snapshot = await self._transfer(ctx, state)
        async with self._step(state, ScenarioStep.STAKED):
            state.snapshot = await self._stake(ctx, state)
        async with self._step(state, ScenarioStep.PUBLISHED):
            state.package, state.snapshot = await self._publish(ctx, state)
        async with self._step(state, ScenarioStep.MINTED):
            state.snapshot = await self._mint(ctx, state)

        state.step = ScenarioStep.DONE
        logger.info(
            "%s: done, %s holds %d coins, %s SUI",
            self.name(),
            state.account,
            state.snapshot.coin_object_count,
            mist_to_sui(state.snapshot.total_balance),
        )
        return state

    async def _fund(self, ctx: TestContext, state: ScenarioState) -> BalanceSnapshot:
        await ctx.get_sui_from_faucet()
        baseline = await query(ctx, state.account)
        verify_coin_type(baseline, state.account)
        logger.info("Baseline for %s: %s", state.account, baseline)
        return baseline

    async def _transfer(self, ctx: TestContext, state: ScenarioState) -> BalanceSnapshot:
        pre = state.require_snapshot()
        recipient = random_sui_address()

        txn = await ctx.make_transfer_transaction(recipient, ctx.config.transfer_amount)
        response = await ctx.sign_and_execute(txn, "transfer sui")

        owner_balance = delta_for(response, state.account)
        recipient_balance = counterparty_delta(response, state.account)
        logger.info(
            "Transfer deltas: sender %d, recipient %d",
            owner_balance.amount,
            recipient_balance.amount,
        )

        post = await query(ctx, state.account)
        verified = verify_transfer_sender(pre, owner_balance, post, state.account)

        recipient_address = recipient_balance.owner.get_owner_address()
        recipient_post = await query(ctx, recipient_address)
        verify_transfer_recipient(recipient_balance, recipient_post, recipient_address)

        state.recipient = recipient_address
        return verified

    async def _stake(self, ctx: TestContext, state: ScenarioState) -> BalanceSnapshot:
        pre = state.require_snapshot()

        system_state = await ctx.get_latest_sui_system_state()
        if not system_state.active_validators:
            raise MissingArtifactError("active validator", "system state lists none")
        validator = system_state.active_validators[0].sui_address

        txn = await ctx.make_staking_transaction(validator)
        response = await ctx.sign_and_execute(txn, f"stake with {validator}")

        balance_change = delta_for(response, state.account)
        logger.info("Stake delta: %d", balance_change.amount)

        post = await query(ctx, state.account)
        return verify_stake(pre, balance_change, post, state.account)

    async def _publish(
        self, ctx: TestContext, state: ScenarioState
    ) -> tuple[PublishedPackage, BalanceSnapshot]:
        pre = state.require_snapshot()
        package = self.package
        if package is None:
            if ctx.config.ft_package_path is None:
                raise MissingArtifactError("compiled package", "FT_PACKAGE_PATH is not set")
            package = load_compiled_package(ctx.config.ft_package_path)

        txn = await ctx.build_transaction_remotely(
            "unsafe_publish", package.publish_params(state.account)
        )
        response = await ctx.sign_and_execute(txn, "publish ft package")

        published = find_published_artifacts(response, state.account)
        logger.info(
            "Published package %s with treasury cap %s",
            published.package_id,
            published.treasury_cap_id,
        )

        gas = delta_for(response, state.account)
        post = await query(ctx, state.account)
        return published, verify_gas_only(pre, gas, post, state.account)

    async def _mint(self, ctx: TestContext, state: ScenarioState) -> BalanceSnapshot:
        pre = state.require_snapshot()
        if state.package is None:
            raise MissingArtifactError("published package", "publish step left none")

        rgp = await ctx.get_reference_gas_price()
        txn = await ctx.build_move_call(
            state.package.package_id,
            MINT_MODULE,
            MINT_FUNCTION,
            [],
            [
                state.package.treasury_cap_id,
                str(ctx.config.mint_amount),
                state.account,
            ],
            rgp * MINT_GAS_UNITS,
        )
        response = await ctx.sign_and_execute(txn, "mint managed coin to self")

        verify_mint(response, state.account)
        gas = delta_for(response, state.account, SUI_COIN_TYPE)
        post = await query(ctx, state.account)
        verified = verify_gas_only(pre, gas, post, state.account)

        balances = await ctx.get_all_balances(state.account)
        for balance in balances:
            logger.info(
                "Balance of %s: %s x%d = %d",
                state.account,
                balance.coin_type,
                balance.coin_object_count,
                balance.total_balance,
            )
        return verified


__all__ = ["CoinIndexTest", "ScenarioState", "ScenarioStep"]
