"""Test context: configuration plus collaborator handles for a scenario run."""

from pathlib import Path

from typing import Any, Self

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cluster_test.helpers.config import (
    get_ft_package_path,
    get_int_env,
    get_optional_env,
    get_sui_faucet_url,
    get_sui_rpc_url,
)
from cluster_test.helpers.constants import (
    DEFAULT_MINT_AMOUNT,
    DEFAULT_TIMEOUT,
    DEFAULT_TRANSFER_AMOUNT,
    STAKE_GAS_UNITS,
    SUI_COIN_TYPE,
    TRANSFER_GAS_UNITS,
)
from cluster_test.helpers.errors import MissingArtifactError, TransactionFailedError
from cluster_test.helpers.faucet import FaucetClient
from cluster_test.helpers.http import collaborator_errors, create_http_client
from cluster_test.helpers.logging import get_logger
from cluster_test.helpers.models import (
    BalanceSnapshot,
    Coin,
    FaucetCoin,
    SuiSystemStateSummary,
    TransactionBlockResponse,
    TransactionBytes,
)
from cluster_test.helpers.rpc import SuiRPCClient
from cluster_test.helpers.rpc_models import (
    ExecuteTransactionRequestType,
    TransactionBlockResponseOptions,
)
from cluster_test.helpers.wallet import Ed25519Keypair, decode_seed


logger = get_logger(__name__)


class ClusterConfig(BaseModel):
    """Endpoints, key material and amounts for a scenario run."""

    model_config = ConfigDict(hide_input_in_errors=True)

    rpc_url: str
    faucet_url: str
    ft_package_path: Path | None = None
    private_key: str | None = Field(default=None, repr=False)
    transfer_amount: int = Field(default=DEFAULT_TRANSFER_AMOUNT, gt=0)
    mint_amount: int = Field(default=DEFAULT_MINT_AMOUNT, gt=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, value: str | None) -> str | None:
        if value:
            decode_seed(value)
        return value

    @classmethod
    def from_env(
        cls,
        rpc_url: str | None = None,
        faucet_url: str | None = None,
        ft_package_path: str | Path | None = None,
    ) -> Self:
        """Build configuration from arguments, falling back to the environment.

        Raises:
            ValueError: If a required endpoint is neither given nor set, or
                SUI_PRIVATE_KEY is not a valid seed
        """
        package_path = ft_package_path or get_optional_env("FT_PACKAGE_PATH")
        return cls(
            rpc_url=get_sui_rpc_url(rpc_url),
            faucet_url=get_sui_faucet_url(faucet_url),
            ft_package_path=get_ft_package_path(package_path) if package_path else None,
            private_key=get_optional_env("SUI_PRIVATE_KEY"),
            transfer_amount=get_int_env("TRANSFER_AMOUNT", DEFAULT_TRANSFER_AMOUNT),
            mint_amount=get_int_env("MINT_AMOUNT", DEFAULT_MINT_AMOUNT),
        )


class TestContext:
    """Facade over the full node, faucet and wallet used by test cases.

    Every collaborator failure surfaces as a ``CollaboratorError``. Use it as
    an async context manager; an HTTP client it created is closed on exit,
    an injected one is left to the caller.
    """

    __test__ = False

    def __init__(
        self,
        config: ClusterConfig,
        *,
        wallet: Ed25519Keypair | None = None,
        http_client: httpx.AsyncClient | None = None,
        rpc: SuiRPCClient | None = None,
        faucet: FaucetClient | None = None,
    ) -> None:
        self.config = config
        if wallet is None:
            wallet = (
                Ed25519Keypair.from_seed(config.private_key)
                if config.private_key
                else Ed25519Keypair.generate()
            )
        self.wallet = wallet
        self._owns_http_client = http_client is None
        self.http_client = http_client or create_http_client(timeout=config.timeout)
        self.rpc = rpc or SuiRPCClient(config.rpc_url, timeout=config.timeout)
        self.faucet = faucet or FaucetClient(config.faucet_url)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    @property
    def address(self) -> str:
        """Primary account address of this run."""
        return self.wallet.address

    async def get_sui_from_faucet(self, address: str | None = None) -> list[FaucetCoin]:
        """Fund ``address`` (default: primary account) and wait until indexed."""
        recipient = address or self.address
        async with collaborator_errors("faucet funding"):
            return await self.faucet.fund(self.http_client, self.rpc, recipient)

    async def get_balance(
        self, owner: str, coin_type: str | None = None
    ) -> BalanceSnapshot:
        async with collaborator_errors("get balance"):
            return await self.rpc.get_balance(self.http_client, owner, coin_type)

    async def get_all_balances(self, owner: str) -> list[BalanceSnapshot]:
        async with collaborator_errors("get all balances"):
            return await self.rpc.get_all_balances(self.http_client, owner)

    async def get_coins(
        self, owner: str | None = None, coin_type: str = SUI_COIN_TYPE
    ) -> list[Coin]:
        async with collaborator_errors("get coins"):
            return await self.rpc.get_coins(
                self.http_client, owner or self.address, coin_type
            )

    async def get_reference_gas_price(self) -> int:
        async with collaborator_errors("get reference gas price"):
            return await self.rpc.get_reference_gas_price(self.http_client)

    async def get_latest_sui_system_state(self) -> SuiSystemStateSummary:
        async with collaborator_errors("get system state"):
            return await self.rpc.get_latest_sui_system_state(self.http_client)

    async def _coins_by_balance(self, needed: int) -> list[Coin]:
        coins = sorted(await self.get_coins(), key=lambda c: c.balance, reverse=True)
        if len(coins) < needed:
            raise MissingArtifactError(
                "gas coins", f"need {needed} SUI coins, {self.address} owns {len(coins)}"
            )
        return coins

    async def make_transfer_transaction(
        self, recipient: str, amount: int
    ) -> TransactionBytes:
        """Build a split-and-transfer of ``amount`` MIST from the largest coin."""
        (coin, *_) = await self._coins_by_balance(1)
        rgp = await self.get_reference_gas_price()
        async with collaborator_errors("build transfer"):
            return await self.rpc.transfer_sui(
                self.http_client,
                self.address,
                coin.coin_object_id,
                TRANSFER_GAS_UNITS * rgp,
                recipient,
                amount,
            )

    async def make_staking_transaction(self, validator: str) -> TransactionBytes:
        """Build a delegation staking the second largest coin whole.

        The largest coin pays gas, so exactly one coin object is consumed.
        """
        gas_coin, stake_coin, *_ = await self._coins_by_balance(2)
        rgp = await self.get_reference_gas_price()
        async with collaborator_errors("build stake"):
            return await self.rpc.request_add_stake(
                self.http_client,
                self.address,
                [stake_coin.coin_object_id],
                validator,
                gas_coin.coin_object_id,
                STAKE_GAS_UNITS * rgp,
            )

    async def build_move_call(
        self,
        package: str,
        module: str,
        function: str,
        type_arguments: list[str],
        arguments: list[Any],
        gas_budget: int,
    ) -> TransactionBytes:
        async with collaborator_errors(f"build {module}::{function}"):
            return await self.rpc.move_call(
                self.http_client,
                self.address,
                package,
                module,
                function,
                type_arguments,
                arguments,
                None,
                gas_budget,
            )

    async def build_transaction_remotely(
        self, method: str, params: list[Any]
    ) -> TransactionBytes:
        """Build a transaction with a node-side builder that has no typed wrapper."""
        async with collaborator_errors(method):
            return await self.rpc.build_transaction(self.http_client, method, params)

    async def sign_and_execute(
        self, txn: TransactionBytes, description: str
    ) -> TransactionBlockResponse:
        """Sign with the primary key, submit and wait for local execution.

        Effects, balance changes and object changes are always requested.

        Raises:
            TransactionFailedError: If the effects report a failure status
            CollaboratorError: If submission fails
        """
        signature = self.wallet.sign_transaction(txn.tx_bytes)
        options = (
            TransactionBlockResponseOptions()
            .with_effects()
            .with_balance_changes()
            .with_object_changes()
        )
        async with collaborator_errors(description):
            response = await self.rpc.execute_transaction_block(
                self.http_client,
                txn.tx_bytes,
                [signature],
                options,
                ExecuteTransactionRequestType.WAIT_FOR_LOCAL_EXECUTION,
            )

        if response.effects is not None and not response.effects.status.is_success:
            raise TransactionFailedError(response.digest, response.effects.status.error)
        logger.info("%s executed: %s", description, response.digest)
        return response


__all__ = ["ClusterConfig", "TestContext"]
