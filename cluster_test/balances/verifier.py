"""Consistency rules between effects-derived deltas and coin index snapshots.

Each rule takes the snapshot before a step, the balance change the step's
effects attribute to the account, and a snapshot freshly read after finality.
It predicts the post-state from the first two and raises
``ConsistencyViolation`` on the first field that disagrees with the third.
The verified snapshot is returned so the caller can carry it forward.
"""

from cluster_test.balances.snapshot import changes_for, predict
from cluster_test.helpers.constants import SUI_COIN_TYPE
from cluster_test.helpers.errors import ConsistencyViolation
from cluster_test.helpers.logging import get_logger
from cluster_test.helpers.models import (
    BalanceChange,
    BalanceSnapshot,
    TransactionBlockResponse,
)


logger = get_logger(__name__)

RULE_COIN_TYPE = "coin type invariance"
RULE_TRANSFER_SENDER = "rule T (transfer, sender)"
RULE_TRANSFER_RECIPIENT = "rule T (transfer, recipient)"
RULE_STAKE = "rule S (stake)"
RULE_GAS_ONLY = "rule G (gas only)"
RULE_MINT = "rule M (mint)"


def verify_coin_type(
    post: BalanceSnapshot, account: str, expected: str = SUI_COIN_TYPE
) -> None:
    """Fail if the index answered for a different coin type than requested."""
    if post.coin_type != expected:
        raise ConsistencyViolation(RULE_COIN_TYPE, expected, post.coin_type, account)


def _assert_matches(
    expected: BalanceSnapshot, post: BalanceSnapshot, *, rule: str, account: str
) -> BalanceSnapshot:
    if post.coin_object_count != expected.coin_object_count:
        raise ConsistencyViolation(
            f"{rule}: coin_object_count",
            expected.coin_object_count,
            post.coin_object_count,
            account,
        )
    if post.total_balance != expected.total_balance:
        raise ConsistencyViolation(
            f"{rule}: total_balance",
            expected.total_balance,
            post.total_balance,
            account,
        )
    return post


def _verify_against_delta(
    pre: BalanceSnapshot,
    delta: BalanceChange,
    post: BalanceSnapshot,
    *,
    count_change: int,
    rule: str,
    account: str,
) -> BalanceSnapshot:
    verify_coin_type(post, account, pre.coin_type)
    expected = predict(pre, delta, count_change=count_change, rule=rule, account=account)
    logger.debug(
        "%s for %s: pre=%s delta=%d expected=%s observed=%s",
        rule,
        account,
        pre,
        delta.amount,
        expected,
        post,
    )
    return _assert_matches(expected, post, rule=rule, account=account)


def verify_transfer_sender(
    pre: BalanceSnapshot, delta: BalanceChange, post: BalanceSnapshot, account: str
) -> BalanceSnapshot:
    """Sender keeps its coin count and moves by exactly its (negative) delta."""
    return _verify_against_delta(
        pre, delta, post, count_change=0, rule=RULE_TRANSFER_SENDER, account=account
    )


def verify_transfer_recipient(
    delta: BalanceChange, post: BalanceSnapshot, account: str
) -> BalanceSnapshot:
    """A previously empty recipient holds exactly the one received coin."""
    verify_coin_type(post, account, delta.coin_type)
    if delta.amount <= 0:
        raise ConsistencyViolation(
            f"{RULE_TRANSFER_RECIPIENT}: delta", "> 0", delta.amount, account
        )
    expected = BalanceSnapshot(
        coin_type=delta.coin_type, coin_object_count=1, total_balance=delta.amount
    )
    return _assert_matches(expected, post, rule=RULE_TRANSFER_RECIPIENT, account=account)


def verify_stake(
    pre: BalanceSnapshot, delta: BalanceChange, post: BalanceSnapshot, account: str
) -> BalanceSnapshot:
    """Staking consumes exactly one coin object; the balance moves by the delta."""
    return _verify_against_delta(
        pre, delta, post, count_change=-1, rule=RULE_STAKE, account=account
    )


def verify_gas_only(
    pre: BalanceSnapshot, delta: BalanceChange, post: BalanceSnapshot, account: str
) -> BalanceSnapshot:
    """A transaction that only pays gas from one coin keeps the coin count."""
    return _verify_against_delta(
        pre, delta, post, count_change=0, rule=RULE_GAS_ONLY, account=account
    )


def verify_mint(
    response: TransactionBlockResponse, account: str
) -> list[BalanceChange]:
    """Require that the mint transaction recorded a balance change for ``account``.

    Only presence is asserted. Equality of the minted credit with the
    requested quantity depends on the token's mint semantics and is not
    checked here.

    Raises:
        MissingDeltaError: If the account has no balance change at all
    """
    changes = changes_for(response, account)
    for change in changes:
        logger.info(
            "%s: %s changed %s by %d", RULE_MINT, account, change.coin_type, change.amount
        )
    return changes


__all__ = [
    "RULE_COIN_TYPE",
    "RULE_GAS_ONLY",
    "RULE_MINT",
    "RULE_STAKE",
    "RULE_TRANSFER_RECIPIENT",
    "RULE_TRANSFER_SENDER",
    "verify_coin_type",
    "verify_gas_only",
    "verify_mint",
    "verify_stake",
    "verify_transfer_recipient",
    "verify_transfer_sender",
]
