"""Configuration management and environment variable utilities."""

import os
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()


def get_required_env(key: str) -> str:
    """Get a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        Environment variable value

    Raises:
        ValueError: If the environment variable is not set

    Example:
        ```python
        from cluster_test.helpers.config import get_required_env

        rpc_url = get_required_env("SUI_RPC_URL")
        ```
    """
    value = os.getenv(key)
    if not value:
        msg = f"{key} environment variable is not set"
        raise ValueError(msg)
    return value


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_int_env(key: str, default: int) -> int:
    """Get an integer environment variable.

    Args:
        key: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        Parsed integer

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        msg = f"{key} must be an integer, got {value!r}"
        raise ValueError(msg) from None


def get_sui_rpc_url(rpc_url: str | None = None) -> str:
    """Get the full node JSON-RPC URL from parameter or environment.

    Args:
        rpc_url: Optional RPC URL to use directly

    Returns:
        Full node RPC URL

    Raises:
        ValueError: If RPC URL is not provided and SUI_RPC_URL env var is not set

    Example:
        ```python
        from cluster_test.helpers.config import get_sui_rpc_url

        # Get from environment
        rpc_url = get_sui_rpc_url()

        # Or provide explicitly
        rpc_url = get_sui_rpc_url("http://127.0.0.1:9000")
        ```
    """
    if rpc_url:
        return rpc_url
    return get_required_env("SUI_RPC_URL")


def get_sui_faucet_url(faucet_url: str | None = None) -> str:
    """Get the faucet URL from parameter or environment.

    Args:
        faucet_url: Optional faucet URL to use directly

    Returns:
        Faucet base URL

    Raises:
        ValueError: If faucet URL is not provided and SUI_FAUCET_URL env var is not set
    """
    if faucet_url:
        return faucet_url
    return get_required_env("SUI_FAUCET_URL")


def get_ft_package_path(package_path: str | Path | None = None) -> Path:
    """Get the path to the compiled coin package payload.

    The file is the JSON written by ``sui move build --dump-bytecode-as-base64``.

    Args:
        package_path: Optional path to use directly

    Returns:
        Path to the compiled package JSON

    Raises:
        ValueError: If no path is provided and FT_PACKAGE_PATH env var is not set
    """
    if package_path:
        return Path(package_path)
    return Path(get_required_env("FT_PACKAGE_PATH"))


__all__ = [
    "get_ft_package_path",
    "get_int_env",
    "get_optional_env",
    "get_required_env",
    "get_sui_faucet_url",
    "get_sui_rpc_url",
]
