"""Tests for JSON-RPC request models."""

from cluster_test.helpers.rpc_models import (
    ExecuteTransactionRequestType,
    JsonRpcRequest,
    TransactionBlockResponseOptions,
)


class TestJsonRpcRequest:
    """Tests for the JSON-RPC envelope."""

    def test_defaults(self) -> None:
        """Test version defaults to 2.0 and params to an empty list."""
        request = JsonRpcRequest(method="suix_getReferenceGasPrice", id=7)

        assert request.model_dump() == {
            "jsonrpc": "2.0",
            "method": "suix_getReferenceGasPrice",
            "params": [],
            "id": 7,
        }


class TestTransactionBlockResponseOptions:
    """Tests for response content selection."""

    def test_all_disabled_by_default(self) -> None:
        """Test nothing is requested unless asked for."""
        assert not any(TransactionBlockResponseOptions().to_params().values())

    def test_builders_do_not_mutate(self) -> None:
        """Test with_* return copies."""
        base = TransactionBlockResponseOptions()
        extended = base.with_effects().with_balance_changes().with_object_changes()

        assert base.show_effects is False
        assert extended.show_effects is True
        assert extended.show_balance_changes is True
        assert extended.show_object_changes is True

    def test_params_use_camel_case(self) -> None:
        """Test serialised keys match the node's option names."""
        params = TransactionBlockResponseOptions().with_balance_changes().to_params()

        assert set(params) == {
            "showInput",
            "showRawInput",
            "showEffects",
            "showEvents",
            "showObjectChanges",
            "showBalanceChanges",
        }
        assert params["showBalanceChanges"] is True


class TestExecuteTransactionRequestType:
    """Tests for finality wait modes."""

    def test_wire_values(self) -> None:
        """Test enum values match the node's request types."""
        assert ExecuteTransactionRequestType.WAIT_FOR_LOCAL_EXECUTION == "WaitForLocalExecution"
        assert ExecuteTransactionRequestType.WAIT_FOR_EFFECTS_CERT == "WaitForEffectsCert"
