"""Exception hierarchy for cluster test scenarios.

Every error raised while a scenario runs derives from ``ScenarioError``.
None of them are recovered from locally: the first one aborts the scenario
and is wrapped into a ``TestFailure`` annotated with the step that raised it.
"""

from typing import Any


class ScenarioError(Exception):
    """Base class for all scenario errors."""


class CollaboratorError(ScenarioError):
    """A ledger client, faucet or network call failed."""


class RPCError(CollaboratorError):
    """JSON-RPC response carried an ``error`` member."""

    def __init__(self, method: str, error: Any) -> None:
        self.method = method
        self.error = error
        code = error.get("code") if isinstance(error, dict) else None
        message = error.get("message") if isinstance(error, dict) else error
        self.code = code
        super().__init__(f"RPC error from {method}: {message} (code={code})")


class QueryError(CollaboratorError):
    """Balance query against the coin index failed."""

    def __init__(self, account: str, coin_type: str | None, reason: str) -> None:
        self.account = account
        self.coin_type = coin_type
        super().__init__(
            f"Balance query failed for {account} ({coin_type or 'default'}): {reason}"
        )


class TransactionFailedError(CollaboratorError):
    """Transaction executed but its effects report a failure status."""

    def __init__(self, digest: str | None, error: str | None) -> None:
        self.digest = digest
        self.error = error
        super().__init__(f"Transaction {digest} failed: {error}")


class FaucetError(CollaboratorError):
    """Faucet refused or could not fund the account."""


class DeltaError(ScenarioError):
    """Balance-change entry for an account could not be resolved."""

    def __init__(self, account: str, coin_type: str | None, message: str) -> None:
        self.account = account
        self.coin_type = coin_type
        super().__init__(message)


class MissingDeltaError(DeltaError):
    """Transaction effects carry no balance change for the account."""

    def __init__(self, account: str, coin_type: str | None = None) -> None:
        super().__init__(
            account,
            coin_type,
            f"No balance change for {account} ({coin_type or 'any coin type'})",
        )


class AmbiguousDeltaError(DeltaError):
    """More than one balance change matched the owner filter."""

    def __init__(self, account: str, coin_type: str | None, matches: int) -> None:
        self.matches = matches
        super().__init__(
            account,
            coin_type,
            f"{matches} balance changes matched {account} "
            f"({coin_type or 'any coin type'}), expected exactly one",
        )


class ConsistencyViolation(ScenarioError):
    """Index snapshot disagrees with the effects-derived prediction."""

    def __init__(self, rule: str, expected: Any, observed: Any, account: str) -> None:
        self.rule = rule
        self.expected = expected
        self.observed = observed
        self.account = account
        super().__init__(
            f"{rule} violated for {account}: expected {expected!r}, observed {observed!r}"
        )


class MissingArtifactError(ScenarioError):
    """Expected object could not be uniquely located."""

    def __init__(self, artifact: str, detail: str) -> None:
        self.artifact = artifact
        super().__init__(f"Cannot locate {artifact}: {detail}")


class TestFailure(Exception):
    """First error of a scenario run, annotated with the failing step."""

    __test__ = False

    def __init__(self, test_name: str, step: str, cause: BaseException) -> None:
        self.test_name = test_name
        self.step = step
        self.cause = cause
        super().__init__(f"{test_name} failed at {step}: {cause}")


__all__ = [
    "AmbiguousDeltaError",
    "CollaboratorError",
    "ConsistencyViolation",
    "DeltaError",
    "FaucetError",
    "MissingArtifactError",
    "MissingDeltaError",
    "QueryError",
    "RPCError",
    "ScenarioError",
    "TestFailure",
    "TransactionFailedError",
]
