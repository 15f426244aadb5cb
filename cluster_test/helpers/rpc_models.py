"""Pydantic models for JSON-RPC requests and submission options."""

from enum import StrEnum

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request model."""

    jsonrpc: str = Field(default="2.0", description="JSON-RPC version")
    method: str = Field(..., description="Method name to call")
    params: list[Any] = Field(
        default_factory=list, description="Method parameters"
    )
    id: int | str = Field(..., description="Request ID")


class ExecuteTransactionRequestType(StrEnum):
    """How long ``sui_executeTransactionBlock`` waits before returning."""

    WAIT_FOR_EFFECTS_CERT = "WaitForEffectsCert"
    WAIT_FOR_LOCAL_EXECUTION = "WaitForLocalExecution"


class TransactionBlockResponseOptions(BaseModel):
    """Which parts of the executed transaction the node should return."""

    show_input: bool = Field(default=False, alias="showInput")
    show_raw_input: bool = Field(default=False, alias="showRawInput")
    show_effects: bool = Field(default=False, alias="showEffects")
    show_events: bool = Field(default=False, alias="showEvents")
    show_object_changes: bool = Field(default=False, alias="showObjectChanges")
    show_balance_changes: bool = Field(default=False, alias="showBalanceChanges")

    model_config = ConfigDict(populate_by_name=True)

    def with_effects(self) -> "TransactionBlockResponseOptions":
        return self.model_copy(update={"show_effects": True})

    def with_balance_changes(self) -> "TransactionBlockResponseOptions":
        return self.model_copy(update={"show_balance_changes": True})

    def with_object_changes(self) -> "TransactionBlockResponseOptions":
        return self.model_copy(update={"show_object_changes": True})

    def to_params(self) -> dict[str, bool]:
        """Serialise with the camelCase keys the node expects."""
        return self.model_dump(by_alias=True)


__all__ = [
    "ExecuteTransactionRequestType",
    "JsonRpcRequest",
    "TransactionBlockResponseOptions",
]
