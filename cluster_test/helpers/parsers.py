"""Parsing utilities for addresses and amounts."""

import secrets

from decimal import Decimal

from cluster_test.helpers.constants import MIST_PER_SUI


SUI_ADDRESS_LENGTH = 32


def normalize_sui_address(address: str) -> str:
    """Normalise an address or object ID to lowercase, 0x-prefixed, 64 hex chars.

    Args:
        address: Address with or without ``0x`` prefix, possibly short form

    Returns:
        str: Canonical address string

    Raises:
        ValueError: If the value is not hex or longer than 32 bytes

    Example:
        >>> normalize_sui_address("0x2")
        '0x0000000000000000000000000000000000000000000000000000000000000002'
    """
    raw = address.lower().removeprefix("0x")
    if not raw or len(raw) > SUI_ADDRESS_LENGTH * 2:
        msg = f"Invalid Sui address length: {address!r}"
        raise ValueError(msg)
    try:
        int(raw, 16)
    except ValueError:
        msg = f"Invalid Sui address: {address!r}"
        raise ValueError(msg) from None
    return "0x" + raw.rjust(SUI_ADDRESS_LENGTH * 2, "0")


def random_sui_address() -> str:
    """Generate a fresh, almost certainly unused address.

    Returns:
        str: Random canonical address
    """
    return "0x" + secrets.token_hex(SUI_ADDRESS_LENGTH)


def mist_to_sui(mist: int | None) -> Decimal | None:
    """Convert MIST to SUI (divide by 1e9) without losing precision.

    Args:
        mist: Amount in MIST, or None

    Returns:
        Decimal | None: Amount in SUI, or None if input was None

    Example:
        >>> mist_to_sui(1_500_000_000)
        Decimal('1.5')
    """
    if mist is None:
        return None
    return Decimal(mist) / Decimal(MIST_PER_SUI)


def parse_big_int(value: str | int | None, default: int = 0) -> int:
    """Parse a JSON-RPC big integer, which the node encodes as a decimal string.

    Args:
        value: Decimal string, int, or None
        default: Value returned for None

    Returns:
        int: Parsed integer
    """
    if value is None:
        return default
    return int(value)


__all__ = [
    "SUI_ADDRESS_LENGTH",
    "mist_to_sui",
    "normalize_sui_address",
    "parse_big_int",
    "random_sui_address",
]
