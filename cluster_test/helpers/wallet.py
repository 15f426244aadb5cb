"""Ed25519 keypair for signing Sui transactions."""

import base64
import binascii
import hashlib

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey


ED25519_FLAG = 0x00
"""Signature scheme flag prefixed to public keys and signatures"""

TRANSACTION_INTENT = bytes([0, 0, 0])
"""Intent scope, version and app ID for a transaction signed by a user"""

SEED_LENGTH = 32


def _blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def decode_seed(encoded: str) -> bytes:
    """Decode a 32-byte private key seed given as hex or base64.

    Args:
        encoded: Hex (optionally 0x-prefixed) or base64 seed

    Returns:
        Raw 32-byte seed

    Raises:
        ValueError: If the value decodes to anything other than 32 bytes
    """
    raw = encoded.strip()
    try:
        seed = bytes.fromhex(raw.removeprefix("0x"))
    except ValueError:
        try:
            seed = base64.b64decode(raw, validate=True)
        except binascii.Error:
            msg = "Private key must be hex or base64"
            raise ValueError(msg) from None
    # A base64 keystore entry carries the scheme flag in front of the seed
    if len(seed) == SEED_LENGTH + 1 and seed[0] == ED25519_FLAG:
        seed = seed[1:]
    if len(seed) != SEED_LENGTH:
        msg = f"Private key must be {SEED_LENGTH} bytes, got {len(seed)}"
        raise ValueError(msg)
    return seed


class Ed25519Keypair:
    """Account key used to sign every transaction of a scenario."""

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key = private_key
        self.public_key_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self.address = "0x" + _blake2b_256(
            bytes([ED25519_FLAG]) + self.public_key_bytes
        ).hex()

    @classmethod
    def generate(cls) -> "Ed25519Keypair":
        """Create a fresh random keypair."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes | str) -> "Ed25519Keypair":
        """Load a keypair from a raw, hex or base64 seed."""
        raw = decode_seed(seed) if isinstance(seed, str) else seed
        return cls(Ed25519PrivateKey.from_private_bytes(raw))

    def sign_transaction(self, tx_bytes: str) -> str:
        """Sign base64 transaction bytes.

        The signed message is the Blake2b-256 digest of the transaction intent
        followed by the BCS transaction data.

        Args:
            tx_bytes: Base64 BCS transaction data as returned by a builder

        Returns:
            Base64 of ``flag || signature || public_key``
        """
        digest = _blake2b_256(TRANSACTION_INTENT + base64.b64decode(tx_bytes))
        signature = self._private_key.sign(digest)
        return base64.b64encode(
            bytes([ED25519_FLAG]) + signature + self.public_key_bytes
        ).decode()


__all__ = [
    "ED25519_FLAG",
    "TRANSACTION_INTENT",
    "Ed25519Keypair",
    "decode_seed",
]
