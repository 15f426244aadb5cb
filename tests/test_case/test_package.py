"""Tests for compiled package loading and publish artifact lookup."""

from pathlib import Path

import pytest

from cluster_test.helpers.errors import MissingArtifactError
from cluster_test.helpers.models import (
    ObjectChange,
    ObjectRef,
    OwnedObjectRef,
    Owner,
    TransactionBlockResponse,
)
from cluster_test.test_case.package import (
    CompiledPackage,
    find_published_artifacts,
    load_compiled_package,
)
from tests.factories import make_response


PACKAGE = "0x" + "de" * 32
CAP = "0x" + "ca" * 32
METADATA = "0x" + "3e" * 32


def created(object_id: str, owner: Owner) -> OwnedObjectRef:
    return OwnedObjectRef(
        owner=owner, reference=ObjectRef(object_id=object_id, version=1, digest="d")
    )


def cap_change(object_id: str, owner: Owner) -> ObjectChange:
    return ObjectChange(
        type="created",
        owner=owner,
        object_id=object_id,
        object_type=f"0x2::coin::TreasuryCap<{PACKAGE}::managed::MANAGED>",
    )


class TestCompiledPackage:
    """Tests for CompiledPackage."""

    def test_publish_params(self, compiled_package: CompiledPackage, account: str) -> None:
        """Test node-side publish parameters."""
        params = compiled_package.publish_params(account, gas_budget=1_000)

        assert params == [
            account,
            compiled_package.modules,
            compiled_package.dependencies,
            None,
            "1000",
        ]

    def test_load(self, tmp_path: Path, compiled_package: CompiledPackage) -> None:
        """Test the build output JSON is parsed, ignoring the digest."""
        path = tmp_path / "managed.json"
        path.write_text(
            '{"modules": ["oRzrCwYAAAAKAQAMAgweAyonBFEIBVlM"], '
            '"dependencies": ["0x1", "0x2"], "digest": [1, 2, 3]}'
        )

        package = load_compiled_package(path)

        assert package.modules == compiled_package.modules
        assert package.dependencies == ["0x1", "0x2"]

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is a missing artifact."""
        with pytest.raises(MissingArtifactError, match="compiled package"):
            load_compiled_package(tmp_path / "absent.json")

    @pytest.mark.parametrize("content", ["not json", '{"modules": []}', "[]"])
    def test_load_invalid(self, tmp_path: Path, content: str) -> None:
        """Test malformed payloads are missing artifacts."""
        path = tmp_path / "bad.json"
        path.write_text(content)

        with pytest.raises(MissingArtifactError):
            load_compiled_package(path)


class TestFindPublishedArtifacts:
    """Tests for find_published_artifacts function."""

    def test_from_object_changes(self, account: str) -> None:
        """Test typed changes are preferred and other capabilities ignored."""
        me = Owner.address_owner(account)
        response = TransactionBlockResponse(
            digest="P1",
            object_changes=[
                ObjectChange(type="published", package_id=PACKAGE),
                cap_change(CAP, me),
                ObjectChange(
                    type="created",
                    owner=me,
                    object_id="0x" + "0c" * 32,
                    object_type="0x2::package::UpgradeCap",
                ),
                ObjectChange(type="mutated", owner=me, object_id="0x" + "9a" * 32),
            ],
        )

        published = find_published_artifacts(response, account)

        assert published.package_id == PACKAGE
        assert published.treasury_cap_id == CAP

    def test_cap_owned_by_someone_else(self, account: str, recipient: str) -> None:
        """Test a capability not owned by the sender does not count."""
        response = TransactionBlockResponse(
            digest="P2",
            object_changes=[
                ObjectChange(type="published", package_id=PACKAGE),
                cap_change(CAP, Owner.address_owner(recipient)),
            ],
        )

        with pytest.raises(MissingArtifactError, match="treasury cap"):
            find_published_artifacts(response, account)

    def test_from_effects(self, account: str) -> None:
        """Test owner-based lookup without typed changes."""
        response = make_response(
            [],
            created=[created(PACKAGE, Owner.immutable()), created(CAP, Owner.address_owner(account))],
        )

        published = find_published_artifacts(response, account)

        assert published.package_id == PACKAGE
        assert published.treasury_cap_id == CAP

    def test_effects_ambiguous_package(self, account: str) -> None:
        """Test two immutable objects make the package ambiguous."""
        response = make_response(
            [],
            created=[
                created(PACKAGE, Owner.immutable()),
                created(METADATA, Owner.immutable()),
                created(CAP, Owner.address_owner(account)),
            ],
        )

        with pytest.raises(MissingArtifactError, match="found 2"):
            find_published_artifacts(response, account)

    def test_effects_without_cap(self, account: str) -> None:
        """Test a publish with no sender-owned object lacks a treasury cap."""
        response = make_response([], created=[created(PACKAGE, Owner.immutable())])

        with pytest.raises(MissingArtifactError, match="treasury cap"):
            find_published_artifacts(response, account)

    def test_no_effects(self, account: str) -> None:
        """Test a response without effects cannot be searched."""
        with pytest.raises(MissingArtifactError, match="no effects"):
            find_published_artifacts(TransactionBlockResponse(digest="P3"), account)
