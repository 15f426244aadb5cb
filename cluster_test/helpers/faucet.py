"""Faucet client for funding test accounts."""

import httpx

from cluster_test.helpers.constants import (
    FAUCET_POLL_DELAY,
    FAUCET_POLL_RETRIES,
    MAX_RETRIES,
    RETRY_BASE_DELAY,
)
from cluster_test.helpers.errors import FaucetError
from cluster_test.helpers.http import retry_with_backoff
from cluster_test.helpers.logging import get_logger
from cluster_test.helpers.models import FaucetCoin, FaucetResponse
from cluster_test.helpers.rpc import SuiRPCClient


logger = get_logger(__name__)


class CoinsNotVisibleError(FaucetError):
    """Faucet coins were transferred but the index does not list them yet."""


class FaucetClient:
    """Client for the faucet ``/gas`` endpoint."""

    def __init__(
        self,
        faucet_url: str,
        *,
        max_retries: int = MAX_RETRIES,
        base_delay: float = RETRY_BASE_DELAY,
        poll_retries: int = FAUCET_POLL_RETRIES,
        poll_delay: float = FAUCET_POLL_DELAY,
    ) -> None:
        """Initialize faucet client.

        Args:
            faucet_url: Faucet base URL, e.g. ``http://127.0.0.1:9123``
            max_retries: Attempts for the funding request itself
            base_delay: Initial backoff delay for the funding request
            poll_retries: Attempts while waiting for coins to be indexed
            poll_delay: Initial backoff delay while waiting for coins

        Raises:
            ValueError: If faucet_url is empty
        """
        if not faucet_url:
            msg = "Faucet URL cannot be empty"
            raise ValueError(msg)

        self.faucet_url = faucet_url.rstrip("/")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.poll_retries = poll_retries
        self.poll_delay = poll_delay

    async def request_gas(
        self, client: httpx.AsyncClient, recipient: str
    ) -> list[FaucetCoin]:
        """Request gas coins for ``recipient``.

        HTTP failures are retried with exponential backoff; a faucet-reported
        error is not.

        Args:
            client: HTTP client instance
            recipient: Address to fund

        Returns:
            Gas objects transferred by the faucet

        Raises:
            FaucetError: If the faucet reports an error or transfers nothing
            httpx.HTTPError: If every attempt fails at the HTTP level
        """

        @retry_with_backoff(max_retries=self.max_retries, base_delay=self.base_delay)
        async def _post() -> FaucetResponse:
            response = await client.post(
                f"{self.faucet_url}/gas",
                json={"FixedAmountRequest": {"recipient": recipient}},
            )
            response.raise_for_status()
            return FaucetResponse.model_validate(response.json())

        result = await _post()
        if result.error:
            msg = f"Faucet error for {recipient}: {result.error}"
            raise FaucetError(msg)
        if not result.transferred_gas_objects:
            msg = f"Faucet transferred no gas objects to {recipient}"
            raise FaucetError(msg)

        logger.info(
            "Faucet sent %d coins (%d MIST) to %s",
            len(result.transferred_gas_objects),
            sum(coin.amount for coin in result.transferred_gas_objects),
            recipient,
        )
        return result.transferred_gas_objects

    async def wait_for_coins(
        self,
        client: httpx.AsyncClient,
        rpc: SuiRPCClient,
        owner: str,
        coins: list[FaucetCoin],
    ) -> None:
        """Poll the coin listing until every faucet coin is visible.

        Args:
            client: HTTP client instance
            rpc: RPC client used for the coin listing
            owner: Funded address
            coins: Coins reported by ``request_gas``

        Raises:
            CoinsNotVisibleError: If coins are still missing after all polls
        """
        expected = {coin.id for coin in coins}

        @retry_with_backoff(
            max_retries=self.poll_retries,
            base_delay=self.poll_delay,
            retry_on=(CoinsNotVisibleError, httpx.HTTPError),
        )
        async def _poll() -> None:
            listed = {coin.coin_object_id for coin in await rpc.get_coins(client, owner)}
            missing = expected - listed
            if missing:
                msg = f"{len(missing)} faucet coins not yet indexed for {owner}"
                raise CoinsNotVisibleError(msg)

        await _poll()

    async def fund(
        self, client: httpx.AsyncClient, rpc: SuiRPCClient, recipient: str
    ) -> list[FaucetCoin]:
        """Request gas and wait until the index lists it."""
        coins = await self.request_gas(client, recipient)
        await self.wait_for_coins(client, rpc, recipient, coins)
        return coins


__all__ = ["CoinsNotVisibleError", "FaucetClient"]
