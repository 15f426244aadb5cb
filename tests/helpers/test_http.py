"""Tests for HTTP helpers including retry logic and error translation."""

import httpx
import pytest

from cluster_test.helpers.errors import CollaboratorError, FaucetError
from cluster_test.helpers.http import (
    collaborator_errors,
    create_http_client,
    retry_with_backoff,
)


class TestRetryWithBackoff:
    """Tests for retry_with_backoff decorator."""

    @pytest.mark.asyncio
    async def test_succeeds_on_first_try(self) -> None:
        """Test function succeeds without retries."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01, log_errors=False)
        async def success_func() -> str:
            nonlocal call_count
            call_count += 1
            return "success"

        result = await success_func()
        assert result == "success"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retries_on_http_error(self) -> None:
        """Test function retries on HTTP errors."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01, log_errors=False)
        async def failing_func() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise httpx.HTTPError("Network error")
            return "success"

        result = await failing_func()
        assert result == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_retries_on_timeout(self) -> None:
        """Test function retries on timeout errors."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01)
        async def timeout_func() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise httpx.TimeoutException("Timeout")
            return "success"

        result = await timeout_func()
        assert result == "success"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_raises_after_max_retries(self) -> None:
        """Test function raises after exhausting retries."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01)
        async def always_fails() -> None:
            nonlocal call_count
            call_count += 1
            raise httpx.HTTPError("Persistent error")

        with pytest.raises(httpx.HTTPError, match="Persistent error"):
            await always_fails()
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_custom_retry_on(self) -> None:
        """Test retry_on widens the set of retried exceptions."""
        call_count = 0

        @retry_with_backoff(
            max_retries=4, base_delay=0.01, retry_on=(FaucetError,), log_errors=False
        )
        async def not_visible_yet() -> int:
            nonlocal call_count
            call_count += 1
            if call_count < 4:
                raise FaucetError("not indexed")
            return call_count

        assert await not_visible_yet() == 4

    @pytest.mark.asyncio
    async def test_timeout_outside_retry_on_propagates(self) -> None:
        """Test timeouts are not retried when retry_on excludes them."""
        call_count = 0

        @retry_with_backoff(
            max_retries=3, base_delay=0.01, retry_on=(FaucetError,), log_errors=False
        )
        async def times_out() -> None:
            nonlocal call_count
            call_count += 1
            raise httpx.TimeoutException("Timeout")

        with pytest.raises(httpx.TimeoutException):
            await times_out()
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        """Test non-matching exceptions propagate immediately."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01, log_errors=False)
        async def bad_value() -> None:
            nonlocal call_count
            call_count += 1
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            await bad_value()
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_zero_retries(self) -> None:
        """Test max_retries of zero never calls the function."""

        @retry_with_backoff(max_retries=0)
        async def never_called() -> None:
            raise AssertionError

        with pytest.raises(RuntimeError, match="failed without exception"):
            await never_called()


class TestCreateHttpClient:
    """Tests for create_http_client function."""

    @pytest.mark.asyncio
    async def test_timeout_applied(self) -> None:
        """Test the default timeout is set on the client."""
        async with create_http_client(timeout=12.5) as client:
            assert isinstance(client, httpx.AsyncClient)
            assert client.timeout.read == 12.5


class TestCollaboratorErrors:
    """Tests for collaborator_errors context manager."""

    @pytest.mark.asyncio
    async def test_passes_through_on_success(self) -> None:
        """Test nothing happens without an error."""
        async with collaborator_errors("noop"):
            value = 1
        assert value == 1

    @pytest.mark.asyncio
    async def test_wraps_http_error(self) -> None:
        """Test httpx errors become CollaboratorError chained to the cause."""
        with pytest.raises(CollaboratorError, match="get balance failed: refused") as exc_info:
            async with collaborator_errors("get balance"):
                raise httpx.ConnectError("refused")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_wraps_value_error(self) -> None:
        """Test malformed payloads become CollaboratorError."""
        with pytest.raises(CollaboratorError, match="get coins failed"):
            async with collaborator_errors("get coins"):
                raise ValueError("unexpected payload")

    @pytest.mark.asyncio
    async def test_collaborator_errors_unchanged(self) -> None:
        """Test taxonomy errors are re-raised as is."""
        error = FaucetError("rate limited")

        with pytest.raises(FaucetError) as exc_info:
            async with collaborator_errors("faucet funding"):
                raise error

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self) -> None:
        """Test unrelated exceptions are not translated."""
        with pytest.raises(KeyError):
            async with collaborator_errors("lookup"):
                raise KeyError("missing")
