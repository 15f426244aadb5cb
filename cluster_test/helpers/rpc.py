"""Sui JSON-RPC client utilities."""

from typing import Any

import httpx

from cluster_test.helpers.constants import COIN_PAGE_LIMIT, EXECUTION_TIMEOUT
from cluster_test.helpers.errors import RPCError
from cluster_test.helpers.models import (
    BalanceSnapshot,
    Coin,
    CoinPage,
    SuiSystemStateSummary,
    TransactionBlockResponse,
    TransactionBytes,
)
from cluster_test.helpers.parsers import parse_big_int
from cluster_test.helpers.rpc_models import (
    ExecuteTransactionRequestType,
    JsonRpcRequest,
    TransactionBlockResponseOptions,
)


class SuiRPCClient:
    """Sui full node JSON-RPC client.

    Read methods go through the coin index (``suix_*``); transaction builders
    use the node-side ``unsafe_*`` methods, which return unsigned
    ``TransactionBytes`` for the caller to sign.
    """

    def __init__(self, rpc_url: str, timeout: float = 30.0) -> None:
        """Initialize RPC client.

        Args:
            rpc_url: Full node JSON-RPC endpoint URL
            timeout: Default timeout for requests in seconds

        Raises:
            ValueError: If rpc_url is empty or None
        """
        if not rpc_url:
            msg = "RPC URL cannot be empty"
            raise ValueError(msg)

        self.rpc_url = rpc_url
        self.timeout = timeout
        self._request_id = 0

    async def call(
        self,
        client: httpx.AsyncClient,
        method: str,
        params: list[Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        """Make a single JSON-RPC call.

        Args:
            client: HTTP client instance
            method: RPC method name (e.g., "suix_getBalance")
            params: Method parameters list
            timeout: Optional timeout override

        Returns:
            RPC result value

        Raises:
            httpx.HTTPError: If the HTTP request fails
            RPCError: If the reply is not a JSON object or carries an error
        """
        self._request_id += 1
        payload = JsonRpcRequest(
            method=method, params=params or [], id=self._request_id
        ).model_dump()

        response = await client.post(
            self.rpc_url, json=payload, timeout=timeout or self.timeout
        )
        response.raise_for_status()
        result = response.json()

        if not isinstance(result, dict):
            raise RPCError(
                method, f"malformed reply, expected an object, got {type(result).__name__}"
            )
        if "error" in result:
            raise RPCError(method, result["error"])

        return result.get("result")

    async def get_balance(
        self,
        client: httpx.AsyncClient,
        owner: str,
        coin_type: str | None = None,
    ) -> BalanceSnapshot:
        """Get the indexed balance of one coin type for an owner.

        Args:
            client: HTTP client instance
            owner: Account address
            coin_type: Coin type; None lets the node default to SUI

        Returns:
            Coin count and total balance snapshot
        """
        result = await self.call(client, "suix_getBalance", [owner, coin_type])
        return BalanceSnapshot.model_validate(result)

    async def get_all_balances(
        self, client: httpx.AsyncClient, owner: str
    ) -> list[BalanceSnapshot]:
        """Get indexed balances of every coin type an owner holds."""
        result = await self.call(client, "suix_getAllBalances", [owner])
        return [BalanceSnapshot.model_validate(item) for item in result or []]

    async def get_coins(
        self,
        client: httpx.AsyncClient,
        owner: str,
        coin_type: str | None = None,
        *,
        limit: int = COIN_PAGE_LIMIT,
    ) -> list[Coin]:
        """List every coin object of a type owned by an address.

        Follows ``nextCursor`` until the listing is exhausted.

        Args:
            client: HTTP client instance
            owner: Account address
            coin_type: Coin type; None lets the node default to SUI
            limit: Page size

        Returns:
            All coin objects in listing order
        """
        coins: list[Coin] = []
        cursor: str | None = None
        while True:
            result = await self.call(
                client, "suix_getCoins", [owner, coin_type, cursor, limit]
            )
            page = CoinPage.model_validate(result)
            coins.extend(page.data)
            if not page.has_next_page or page.next_cursor is None:
                return coins
            cursor = page.next_cursor

    async def get_reference_gas_price(self, client: httpx.AsyncClient) -> int:
        """Get the reference gas price of the current epoch in MIST."""
        result = await self.call(client, "suix_getReferenceGasPrice", [])
        return parse_big_int(result)

    async def get_latest_sui_system_state(
        self, client: httpx.AsyncClient
    ) -> SuiSystemStateSummary:
        """Get the latest system state summary, including active validators."""
        result = await self.call(client, "suix_getLatestSuiSystemState", [])
        return SuiSystemStateSummary.model_validate(result)

    async def execute_transaction_block(
        self,
        client: httpx.AsyncClient,
        tx_bytes: str,
        signatures: list[str],
        options: TransactionBlockResponseOptions | None = None,
        request_type: ExecuteTransactionRequestType | None = None,
    ) -> TransactionBlockResponse:
        """Submit a signed transaction.

        With ``WaitForLocalExecution`` the call returns only once the full
        node has executed the transaction, so its effects are visible to
        subsequent index reads.

        Args:
            client: HTTP client instance
            tx_bytes: Base64 BCS transaction data
            signatures: Base64 serialized signatures
            options: Response content selection
            request_type: Finality wait mode

        Returns:
            Executed transaction response
        """
        options = options or TransactionBlockResponseOptions()
        result = await self.call(
            client,
            "sui_executeTransactionBlock",
            [
                tx_bytes,
                signatures,
                options.to_params(),
                request_type.value if request_type else None,
            ],
            timeout=EXECUTION_TIMEOUT,
        )
        return TransactionBlockResponse.model_validate(result)

    async def build_transaction(
        self, client: httpx.AsyncClient, method: str, params: list[Any]
    ) -> TransactionBytes:
        """Build a transaction with any node-side builder method.

        Used directly for builders without a typed wrapper, e.g.
        ``unsafe_publish``.
        """
        result = await self.call(client, method, params)
        return TransactionBytes.model_validate(result)

    async def transfer_sui(
        self,
        client: httpx.AsyncClient,
        signer: str,
        sui_object_id: str,
        gas_budget: int,
        recipient: str,
        amount: int | None = None,
    ) -> TransactionBytes:
        """Build a split-and-transfer paying gas from the same coin.

        Args:
            client: HTTP client instance
            signer: Sender address
            sui_object_id: Coin to split from, also used as gas
            gas_budget: Gas budget in MIST
            recipient: Receiving address
            amount: MIST to send; None transfers the whole coin

        Returns:
            Unsigned transaction
        """
        return await self.build_transaction(
            client,
            "unsafe_transferSui",
            [
                signer,
                sui_object_id,
                str(gas_budget),
                recipient,
                str(amount) if amount is not None else None,
            ],
        )

    async def request_add_stake(
        self,
        client: httpx.AsyncClient,
        signer: str,
        coins: list[str],
        validator: str,
        gas: str | None,
        gas_budget: int,
        amount: int | None = None,
    ) -> TransactionBytes:
        """Build a staking delegation to ``validator``.

        Args:
            client: HTTP client instance
            signer: Delegator address
            coins: Coins to stake; with amount None they are consumed whole
            validator: Validator address
            gas: Gas coin, or None to let the node select one
            gas_budget: Gas budget in MIST
            amount: Optional amount to stake

        Returns:
            Unsigned transaction
        """
        return await self.build_transaction(
            client,
            "unsafe_requestAddStake",
            [
                signer,
                coins,
                str(amount) if amount is not None else None,
                validator,
                gas,
                str(gas_budget),
            ],
        )

    async def move_call(
        self,
        client: httpx.AsyncClient,
        signer: str,
        package_object_id: str,
        module: str,
        function: str,
        type_arguments: list[str],
        arguments: list[Any],
        gas: str | None,
        gas_budget: int,
    ) -> TransactionBytes:
        """Build a Move entry function call.

        Args:
            client: HTTP client instance
            signer: Sender address
            package_object_id: Package containing the module
            module: Module name
            function: Entry function name
            type_arguments: Type arguments
            arguments: JSON-encoded call arguments
            gas: Gas coin, or None to let the node select one
            gas_budget: Gas budget in MIST

        Returns:
            Unsigned transaction
        """
        return await self.build_transaction(
            client,
            "unsafe_moveCall",
            [
                signer,
                package_object_id,
                module,
                function,
                type_arguments,
                arguments,
                gas,
                str(gas_budget),
            ],
        )


__all__ = ["SuiRPCClient"]
