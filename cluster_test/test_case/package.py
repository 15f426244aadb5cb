"""Compiled Move package payloads and publish artifact lookup."""

import json
from pathlib import Path

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from cluster_test.helpers.constants import PUBLISH_GAS_BUDGET, TREASURY_CAP_TYPE_PREFIX
from cluster_test.helpers.errors import MissingArtifactError
from cluster_test.helpers.models import OwnedObjectRef, OwnerKind, TransactionBlockResponse
from cluster_test.helpers.parsers import normalize_sui_address


class CompiledPackage(BaseModel):
    """Output of ``sui move build --dump-bytecode-as-base64``."""

    modules: list[str] = Field(..., min_length=1)
    dependencies: list[str] = Field(default_factory=list)

    def publish_params(
        self, sender: str, gas_budget: int = PUBLISH_GAS_BUDGET
    ) -> list[Any]:
        """Parameters for ``unsafe_publish``; the node selects the gas coin."""
        return [sender, self.modules, self.dependencies, None, str(gas_budget)]


class PublishedPackage(BaseModel):
    """Objects a coin-defining publish leaves behind."""

    package_id: str
    treasury_cap_id: str


def load_compiled_package(path: Path) -> CompiledPackage:
    """Load a compiled package payload from disk.

    Raises:
        MissingArtifactError: If the file is missing or not a valid payload
    """
    try:
        return CompiledPackage.model_validate(json.loads(path.read_text()))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise MissingArtifactError("compiled package", f"{path}: {e}") from e


def _unique(candidates: list[str], artifact: str) -> str:
    if len(candidates) != 1:
        raise MissingArtifactError(
            artifact, f"expected exactly one candidate, found {len(candidates)}"
        )
    return candidates[0]


def _from_object_changes(
    response: TransactionBlockResponse, sender: str
) -> PublishedPackage:
    changes = response.object_changes or []
    packages = [
        change.package_id
        for change in changes
        if change.type == "published" and change.package_id
    ]
    caps = [
        change.object_id
        for change in changes
        if change.type == "created"
        and change.object_id
        and change.object_type
        and change.object_type.startswith(TREASURY_CAP_TYPE_PREFIX)
        and change.owner is not None
        and change.owner.is_address_owner(sender)
    ]
    return PublishedPackage(
        package_id=normalize_sui_address(_unique(packages, "published package")),
        treasury_cap_id=normalize_sui_address(_unique(caps, "treasury cap")),
    )


def _from_effects(response: TransactionBlockResponse, sender: str) -> PublishedPackage:
    if response.effects is None:
        raise MissingArtifactError("published package", "response carries no effects")
    created: list[OwnedObjectRef] = response.effects.created
    packages = [ref.object_id for ref in created if ref.owner.kind == OwnerKind.IMMUTABLE]
    caps = [ref.object_id for ref in created if ref.owner.is_address_owner(sender)]
    return PublishedPackage(
        package_id=_unique(packages, "published package"),
        treasury_cap_id=_unique(caps, "treasury cap"),
    )


def find_published_artifacts(
    response: TransactionBlockResponse, sender: str
) -> PublishedPackage:
    """Locate the package and its mint capability in a publish response.

    Typed object changes are preferred when present: the package is the single
    ``published`` change and the capability the single created
    ``TreasuryCap`` owned by ``sender``. Without them, the package is the
    single immutable created object and the capability the single created
    object owned by ``sender``.

    Raises:
        MissingArtifactError: If either object is absent or not unique
    """
    if response.object_changes:
        return _from_object_changes(response, sender)
    return _from_effects(response, sender)


__all__ = [
    "CompiledPackage",
    "PublishedPackage",
    "find_published_artifacts",
    "load_compiled_package",
]
