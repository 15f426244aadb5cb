"""Tests for Ed25519 key handling and transaction signing."""

import base64
import hashlib

import pytest

from cluster_test.helpers.wallet import ED25519_FLAG, Ed25519Keypair, decode_seed
from tests.factories import verify_signature


TX_BYTES = base64.b64encode(b"\x00\x01transaction-data").decode()


class TestDecodeSeed:
    """Tests for decode_seed function."""

    def test_hex(self) -> None:
        """Test hex seeds with and without prefix."""
        assert decode_seed("01" * 32) == bytes([1]) * 32
        assert decode_seed("0x" + "01" * 32) == bytes([1]) * 32

    def test_base64_with_flag(self) -> None:
        """Test keystore entries drop their leading scheme flag."""
        encoded = base64.b64encode(bytes([ED25519_FLAG]) + bytes([7]) * 32).decode()

        assert decode_seed(encoded) == bytes([7]) * 32

    def test_wrong_length(self) -> None:
        """Test seeds must be 32 bytes."""
        with pytest.raises(ValueError, match="32 bytes, got 16"):
            decode_seed("01" * 16)

    def test_garbage(self) -> None:
        """Test undecodable input."""
        with pytest.raises(ValueError, match="hex or base64"):
            decode_seed("not a key!")


class TestEd25519Keypair:
    """Tests for Ed25519Keypair."""

    def test_address_derivation(self, keypair: Ed25519Keypair) -> None:
        """Test address is blake2b-256 of flag and public key."""
        expected = hashlib.blake2b(
            bytes([ED25519_FLAG]) + keypair.public_key_bytes, digest_size=32
        ).hexdigest()

        assert keypair.address == "0x" + expected
        assert len(keypair.public_key_bytes) == 32

    def test_from_seed_is_deterministic(self, keypair: Ed25519Keypair) -> None:
        """Test the same seed in any encoding yields the same account."""
        assert Ed25519Keypair.from_seed("01" * 32).address == keypair.address

    def test_generate_is_random(self) -> None:
        """Test generated keypairs differ."""
        assert Ed25519Keypair.generate().address != Ed25519Keypair.generate().address

    def test_signature_layout(self, keypair: Ed25519Keypair) -> None:
        """Test serialized signature is flag, 64-byte signature, public key."""
        raw = base64.b64decode(keypair.sign_transaction(TX_BYTES))

        assert len(raw) == 1 + 64 + 32
        assert raw[0] == ED25519_FLAG
        assert raw[65:] == keypair.public_key_bytes

    def test_signature_verifies(self, keypair: Ed25519Keypair) -> None:
        """Test signatures verify over the intent-prefixed digest."""
        signature = keypair.sign_transaction(TX_BYTES)

        assert verify_signature(TX_BYTES, signature)

    def test_signature_bound_to_transaction(self, keypair: Ed25519Keypair) -> None:
        """Test a signature does not verify for other bytes."""
        signature = keypair.sign_transaction(TX_BYTES)
        other = base64.b64encode(b"other").decode()

        assert not verify_signature(other, signature)
