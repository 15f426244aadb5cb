"""Balance snapshots and effects-derived deltas."""

from typing import Protocol

from cluster_test.helpers.constants import SUI_COIN_TYPE, U128_MAX
from cluster_test.helpers.errors import (
    AmbiguousDeltaError,
    CollaboratorError,
    ConsistencyViolation,
    MissingDeltaError,
    QueryError,
)
from cluster_test.helpers.models import (
    BalanceChange,
    BalanceSnapshot,
    OwnerKind,
    TransactionBlockResponse,
)


class BalanceReader(Protocol):
    async def get_balance(
        self, owner: str, coin_type: str | None = None
    ) -> BalanceSnapshot: ...


async def query(
    reader: BalanceReader, account: str, coin_type: str = SUI_COIN_TYPE
) -> BalanceSnapshot:
    """Read the coin index snapshot of ``account`` for ``coin_type``.

    Args:
        reader: Anything exposing ``get_balance``, normally the test context
        account: Account address
        coin_type: Coin type to read

    Returns:
        Fresh snapshot

    Raises:
        QueryError: If the underlying read fails
    """
    try:
        return await reader.get_balance(account, coin_type)
    except CollaboratorError as e:
        raise QueryError(account, coin_type, str(e)) from e


def _select_unique(
    matches: list[BalanceChange], account: str, coin_type: str | None
) -> BalanceChange:
    if not matches:
        raise MissingDeltaError(account, coin_type)
    if len(matches) > 1:
        raise AmbiguousDeltaError(account, coin_type, len(matches))
    return matches[0]


def _balance_changes(
    response: TransactionBlockResponse, account: str, coin_type: str | None
) -> list[BalanceChange]:
    # Balance changes not returned at all means nothing can be attributed
    if response.balance_changes is None:
        raise MissingDeltaError(account, coin_type)
    return [
        change
        for change in response.balance_changes
        if coin_type is None or change.coin_type == coin_type
    ]


def delta_for(
    response: TransactionBlockResponse,
    account: str,
    coin_type: str | None = SUI_COIN_TYPE,
) -> BalanceChange:
    """Find the unique balance change owned by ``account``.

    Args:
        response: Executed transaction with balance changes
        account: Account address
        coin_type: Restrict to one coin type; None matches any

    Returns:
        The single matching balance change

    Raises:
        MissingDeltaError: If no entry belongs to the account
        AmbiguousDeltaError: If more than one entry belongs to the account
    """
    matches = [
        change
        for change in _balance_changes(response, account, coin_type)
        if change.owner.is_address_owner(account)
    ]
    return _select_unique(matches, account, coin_type)


def counterparty_delta(
    response: TransactionBlockResponse,
    account: str,
    coin_type: str | None = SUI_COIN_TYPE,
) -> BalanceChange:
    """Find the unique balance change of another address owner.

    For a transfer from ``account`` this is the recipient's credit. Entries
    without an address owner are never counterparties.

    Raises:
        MissingDeltaError: If no other address was credited or debited
        AmbiguousDeltaError: If several other owners were affected
    """
    matches = [
        change
        for change in _balance_changes(response, account, coin_type)
        if change.owner.kind == OwnerKind.ADDRESS
        and not change.owner.is_address_owner(account)
    ]
    return _select_unique(matches, f"counterparty of {account}", coin_type)


def changes_for(
    response: TransactionBlockResponse, account: str
) -> list[BalanceChange]:
    """Return every balance change of ``account`` across coin types.

    Raises:
        MissingDeltaError: If the account has no entry at all
    """
    matches = [
        change
        for change in _balance_changes(response, account, None)
        if change.owner.is_address_owner(account)
    ]
    if not matches:
        raise MissingDeltaError(account)
    return matches


def apply_delta(total: int, delta: int, *, rule: str, account: str) -> int:
    """Add a signed delta to an unsigned balance.

    Python integers do not overflow, so the sum is exact; it is then
    range-checked back into the unsigned 128-bit balance domain.

    Raises:
        ConsistencyViolation: If the result is negative or exceeds u128
    """
    result = total + delta
    if result < 0 or result > U128_MAX:
        raise ConsistencyViolation(
            rule, f"0 <= {total} + ({delta}) <= {U128_MAX}", result, account
        )
    return result


def predict(
    pre: BalanceSnapshot,
    delta: BalanceChange,
    *,
    count_change: int,
    rule: str,
    account: str,
) -> BalanceSnapshot:
    """Predict the post-transaction snapshot from ``pre`` and the effects delta.

    Raises:
        ConsistencyViolation: If the predicted balance or count leaves its domain
    """
    count = pre.coin_object_count + count_change
    if count < 0:
        raise ConsistencyViolation(
            rule, f"{pre.coin_object_count} + ({count_change}) >= 0", count, account
        )
    return BalanceSnapshot(
        coin_type=pre.coin_type,
        coin_object_count=count,
        total_balance=apply_delta(
            pre.total_balance, delta.amount, rule=rule, account=account
        ),
    )


__all__ = [
    "BalanceReader",
    "apply_delta",
    "changes_for",
    "counterparty_delta",
    "delta_for",
    "predict",
    "query",
]
