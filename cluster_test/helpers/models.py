"""Pydantic models for Sui JSON-RPC responses used by the cluster tests."""

from enum import StrEnum

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cluster_test.helpers.constants import I128_MAX, I128_MIN, U128_MAX
from cluster_test.helpers.parsers import normalize_sui_address


class OwnerKind(StrEnum):
    """Ownership variants reported by the node."""

    ADDRESS = "AddressOwner"
    OBJECT = "ObjectOwner"
    SHARED = "Shared"
    IMMUTABLE = "Immutable"


class Owner(BaseModel):
    """Object or balance owner.

    The node encodes owners either as the bare string ``"Immutable"`` or as a
    single-key object such as ``{"AddressOwner": "0x..."}``.
    """

    kind: OwnerKind
    address: str | None = None
    initial_shared_version: int | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"kind": data}
        if isinstance(data, dict) and "kind" not in data and len(data) == 1:
            ((kind, value),) = data.items()
            if kind == OwnerKind.SHARED:
                return {
                    "kind": kind,
                    "initial_shared_version": value.get("initial_shared_version"),
                }
            return {"kind": kind, "address": value}
        return data

    @field_validator("address")
    @classmethod
    def _normalize_address(cls, value: str | None) -> str | None:
        return normalize_sui_address(value) if value is not None else None

    @classmethod
    def address_owner(cls, address: str) -> "Owner":
        """Build an ``AddressOwner`` for ``address``."""
        return cls(kind=OwnerKind.ADDRESS, address=address)

    @classmethod
    def immutable(cls) -> "Owner":
        """Build the ``Immutable`` owner."""
        return cls(kind=OwnerKind.IMMUTABLE)

    def is_address_owner(self, address: str) -> bool:
        """Return True if this owner is the account ``address``."""
        return (
            self.kind == OwnerKind.ADDRESS
            and self.address == normalize_sui_address(address)
        )

    def get_owner_address(self) -> str:
        """Return the owning address.

        Raises:
            ValueError: If the owner is shared or immutable
        """
        if self.address is None:
            msg = f"{self.kind} owner has no address"
            raise ValueError(msg)
        return self.address


class BalanceSnapshot(BaseModel):
    """Coin index answer to "how much of a coin type does an account hold"."""

    coin_type: str = Field(..., alias="coinType")
    coin_object_count: int = Field(..., alias="coinObjectCount", ge=0)
    total_balance: int = Field(..., alias="totalBalance", ge=0, le=U128_MAX)

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class BalanceChange(BaseModel):
    """Signed balance movement of one owner and coin type in a transaction."""

    owner: Owner
    coin_type: str = Field(..., alias="coinType")
    amount: int = Field(..., ge=I128_MIN, le=I128_MAX)

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class ObjectRef(BaseModel):
    """Reference to a specific object version."""

    object_id: str = Field(..., alias="objectId")
    version: int
    digest: str

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("object_id")
    @classmethod
    def _normalize_object_id(cls, value: str) -> str:
        return normalize_sui_address(value)


class OwnedObjectRef(BaseModel):
    """Object reference tagged with its owner, as listed in effects."""

    owner: Owner
    reference: ObjectRef

    model_config = ConfigDict(frozen=True)

    @property
    def object_id(self) -> str:
        return self.reference.object_id


class ExecutionStatus(BaseModel):
    """Execution outcome recorded in effects."""

    status: str
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == "success"


class TransactionEffects(BaseModel):
    """Subset of transaction effects the scenarios inspect."""

    status: ExecutionStatus
    created: list[OwnedObjectRef] = Field(default_factory=list)
    mutated: list[OwnedObjectRef] = Field(default_factory=list)
    deleted: list[ObjectRef] = Field(default_factory=list)
    gas_object: OwnedObjectRef | None = Field(default=None, alias="gasObject")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectChange(BaseModel):
    """Typed object change; ``published`` entries carry a package ID."""

    type: str
    sender: str | None = None
    owner: Owner | None = None
    object_type: str | None = Field(default=None, alias="objectType")
    object_id: str | None = Field(default=None, alias="objectId")
    package_id: str | None = Field(default=None, alias="packageId")
    version: int | None = None
    digest: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TransactionBlockResponse(BaseModel):
    """Response of ``sui_executeTransactionBlock``.

    Together ``effects`` and ``balance_changes`` form the effects record the
    verifier reconciles against the coin index.
    """

    digest: str
    effects: TransactionEffects | None = None
    balance_changes: list[BalanceChange] | None = Field(
        default=None, alias="balanceChanges"
    )
    object_changes: list[ObjectChange] | None = Field(
        default=None, alias="objectChanges"
    )
    confirmed_local_execution: bool | None = Field(
        default=None, alias="confirmedLocalExecution"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TransactionBytes(BaseModel):
    """Unsigned transaction built by a node-side ``unsafe_*`` builder."""

    tx_bytes: str = Field(..., alias="txBytes")
    gas: list[ObjectRef] = Field(default_factory=list)
    input_objects: list[Any] = Field(default_factory=list, alias="inputObjects")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Coin(BaseModel):
    """Coin object listed by ``suix_getCoins``."""

    coin_type: str = Field(..., alias="coinType")
    coin_object_id: str = Field(..., alias="coinObjectId")
    version: int
    digest: str
    balance: int = Field(..., ge=0)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("coin_object_id")
    @classmethod
    def _normalize_coin_id(cls, value: str) -> str:
        return normalize_sui_address(value)


class CoinPage(BaseModel):
    """One page of a coin listing."""

    data: list[Coin] = Field(default_factory=list)
    next_cursor: str | None = Field(default=None, alias="nextCursor")
    has_next_page: bool = Field(default=False, alias="hasNextPage")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ValidatorSummary(BaseModel):
    """Active validator entry of the system state."""

    sui_address: str = Field(..., alias="suiAddress")
    name: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SuiSystemStateSummary(BaseModel):
    """Subset of ``suix_getLatestSuiSystemState``."""

    epoch: int | None = None
    reference_gas_price: int | None = Field(default=None, alias="referenceGasPrice")
    active_validators: list[ValidatorSummary] = Field(
        default_factory=list, alias="activeValidators"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FaucetCoin(BaseModel):
    """Gas object transferred by the faucet."""

    amount: int
    id: str
    transfer_tx_digest: str | None = Field(default=None, alias="transferTxDigest")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        return normalize_sui_address(value)


class FaucetResponse(BaseModel):
    """Response of the faucet ``/gas`` endpoint."""

    transferred_gas_objects: list[FaucetCoin] = Field(
        default_factory=list, alias="transferredGasObjects"
    )
    error: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


__all__ = [
    "BalanceChange",
    "BalanceSnapshot",
    "Coin",
    "CoinPage",
    "ExecutionStatus",
    "FaucetCoin",
    "FaucetResponse",
    "ObjectChange",
    "ObjectRef",
    "OwnedObjectRef",
    "Owner",
    "OwnerKind",
    "SuiSystemStateSummary",
    "TransactionBlockResponse",
    "TransactionBytes",
    "TransactionEffects",
    "ValidatorSummary",
]
