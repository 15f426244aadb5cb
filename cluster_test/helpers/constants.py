"""Common configuration constants used across the cluster tests."""

# Coin Types
SUI_COIN_TYPE = "0x2::sui::SUI"
"""Fully qualified type of the native gas coin"""

TREASURY_CAP_TYPE_PREFIX = "0x2::coin::TreasuryCap<"
"""Type prefix of the mint capability created by a coin-defining package"""

MIST_PER_SUI = 1_000_000_000
"""Number of MIST in one SUI"""

# Integer Domains
U128_MAX = 2**128 - 1
"""Largest value an index balance can report"""

I128_MIN = -(2**127)
"""Smallest balance change a transaction can report"""

I128_MAX = 2**127 - 1
"""Largest balance change a transaction can report"""

# Scenario Amounts
DEFAULT_TRANSFER_AMOUNT = 1
"""MIST sent from the primary account to a fresh recipient"""

DEFAULT_MINT_AMOUNT = 10_000
"""Units of the managed coin minted to the primary account"""

MINT_MODULE = "managed"
"""Module of the published package exposing the mint entry function"""

MINT_FUNCTION = "mint"
"""Entry function minting the managed coin"""

# Gas Budgets
TRANSFER_GAS_UNITS = 10_000
"""Gas units for a split-and-transfer, scaled by the reference gas price"""

STAKE_GAS_UNITS = 50_000
"""Gas units for a staking delegation, scaled by the reference gas price"""

MINT_GAS_UNITS = 20_000
"""Gas units for the mint call, scaled by the reference gas price"""

PUBLISH_GAS_BUDGET = 50_000_000
"""Absolute publish budget; most of the cost is storage so it is not scaled"""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

EXECUTION_TIMEOUT = 60.0
"""Timeout for transaction submission waiting on local execution"""

COIN_PAGE_LIMIT = 50
"""Page size for coin listings"""

# Retry Configuration
MAX_RETRIES = 5
"""Default maximum number of retry attempts"""

RETRY_BASE_DELAY = 1.0
"""Base delay for exponential backoff in seconds"""

RETRY_MAX_DELAY = 60.0
"""Maximum delay between retries in seconds"""

FAUCET_POLL_RETRIES = 10
"""Attempts made while waiting for faucet coins to become visible"""

FAUCET_POLL_DELAY = 0.5
"""Base delay between faucet visibility polls in seconds"""


__all__ = [
    "COIN_PAGE_LIMIT",
    "DEFAULT_MINT_AMOUNT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_TRANSFER_AMOUNT",
    "EXECUTION_TIMEOUT",
    "FAUCET_POLL_DELAY",
    "FAUCET_POLL_RETRIES",
    "I128_MAX",
    "I128_MIN",
    "MAX_RETRIES",
    "MINT_FUNCTION",
    "MINT_GAS_UNITS",
    "MINT_MODULE",
    "MIST_PER_SUI",
    "PUBLISH_GAS_BUDGET",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
    "STAKE_GAS_UNITS",
    "SUI_COIN_TYPE",
    "TRANSFER_GAS_UNITS",
    "TREASURY_CAP_TYPE_PREFIX",
    "U128_MAX",
]
