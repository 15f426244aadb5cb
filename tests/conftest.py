"""Pytest configuration and shared fixtures for cluster test helpers."""

import os

import pytest

from typing import TYPE_CHECKING

from cluster_test.helpers.models import BalanceSnapshot
from cluster_test.helpers.wallet import Ed25519Keypair
from cluster_test.test_case.package import CompiledPackage
from tests.fake_ledger import FakeLedger


if TYPE_CHECKING:
    from collections.abc import Generator


ENV_KEYS = (
    "SUI_RPC_URL",
    "SUI_FAUCET_URL",
    "FT_PACKAGE_PATH",
    "SUI_PRIVATE_KEY",
    "TRANSFER_AMOUNT",
    "MINT_AMOUNT",
    "TEST_KEY",
)


@pytest.fixture
def clean_env() -> "Generator[None]":
    """Clear scenario environment variables and restore them afterwards."""
    saved_env = {key: os.environ.get(key) for key in ENV_KEYS}

    for key in saved_env:
        if key in os.environ:
            del os.environ[key]

    yield

    for key, value in saved_env.items():
        if value is not None:
            os.environ[key] = value
        elif key in os.environ:
            del os.environ[key]


@pytest.fixture
def fake_ledger() -> FakeLedger:
    """Fresh in-memory ledger with a funded-on-demand primary account."""
    return FakeLedger()


@pytest.fixture
def compiled_package() -> CompiledPackage:
    """Minimal compiled coin package payload."""
    return CompiledPackage(
        modules=["oRzrCwYAAAAKAQAMAgweAyonBFEIBVlM"],
        dependencies=[
            "0x0000000000000000000000000000000000000000000000000000000000000001",
            "0x0000000000000000000000000000000000000000000000000000000000000002",
        ],
    )


@pytest.fixture
def keypair() -> Ed25519Keypair:
    """Deterministic keypair from an all-ones seed."""
    return Ed25519Keypair.from_seed(bytes([1]) * 32)


@pytest.fixture
def account() -> str:
    """Primary account address used by unit tests."""
    return "0x" + "a1" * 32


@pytest.fixture
def recipient() -> str:
    """Second account address used by unit tests."""
    return "0x" + "b2" * 32


@pytest.fixture
def sui_snapshot() -> BalanceSnapshot:
    """Snapshot of an account holding five faucet coins."""
    return BalanceSnapshot(
        coin_type="0x2::sui::SUI",
        coin_object_count=5,
        total_balance=5_000_000_000_000,
    )
