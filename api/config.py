"""
Configuration management for the Catalog Query Service.

This module centralizes environment variable loading from the .env file at
project root. It is imported first by api/main.py so that .env is loaded
before any other code reads the environment.

In production .env usually does not exist; load_dotenv() then no-ops and the
platform environment is used.

Environment Variables:
- PRODUCT_COUNT: Optional, synthetic products seeded into an empty catalog (default 1000)
- CATALOG_SEED: Optional, random seed for the synthetic catalog
- CACHE_TTL_SECONDS: Optional, response cache TTL (default 30)
- CACHE_MAX_ENTRIES: Optional, response cache size bound (default 1000)
- BACKEND_URL: Optional, prefix for pagination links (default "", relative links)
- LOG_LEVEL: Optional, root log level (default INFO)
- JWT_SECRET: Required for authenticated routes (cart, product mutations)
- JWT_ALGORITHM: Optional, defaults to "HS256"
- RATE_LIMIT_WINDOW_SECONDS / RATE_LIMIT_MAX: Optional, 120 requests per 60 s by default
- CART_TTL_SECONDS / CART_SWEEP_INTERVAL_SECONDS: Optional, 24 h by default
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    Safe to call multiple times. Existing environment variables take
    precedence over values in .env.
    """
    # api/config.py -> api/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


load_env_file()


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}") from e


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}") from e


class CatalogConfig:
    """Configuration for the catalog and its response cache."""

    @staticmethod
    def get_product_count() -> int:
        """Number of synthetic products seeded into an empty catalog (default: 1000)."""
        return _get_int("PRODUCT_COUNT", 1000)

    @staticmethod
    def get_seed() -> Optional[int]:
        """Random seed for the synthetic catalog, or None for a fresh random catalog."""
        raw = os.getenv("CATALOG_SEED")
        return _get_int("CATALOG_SEED", 0) if raw else None

    @staticmethod
    def get_cache_ttl_seconds() -> float:
        return _get_float("CACHE_TTL_SECONDS", 30.0)

    @staticmethod
    def get_cache_max_entries() -> int:
        return _get_int("CACHE_MAX_ENTRIES", 1000)

    @staticmethod
    def get_backend_url() -> str:
        """
        Get backend URL used to build pagination links.

        Returns:
            URL string without trailing slash (default: "", i.e. relative links)
        """
        return os.getenv("BACKEND_URL", "").rstrip("/")

    @staticmethod
    def get_log_level() -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()


class AuthConfig:
    """Configuration for bearer token authentication."""

    @staticmethod
    def get_jwt_secret() -> Optional[str]:
        """
        Get the JWT signing secret.

        Returns:
            Secret string or None if not set

        Note:
            This does not raise an error - the auth dependencies report a
            missing secret as a server configuration error per request.
        """
        return os.getenv("JWT_SECRET") or None

    @staticmethod
    def get_jwt_algorithm() -> str:
        return os.getenv("JWT_ALGORITHM", "HS256")


class RateLimitConfig:
    """Configuration for the per-client rate limiter."""

    @staticmethod
    def get_window_seconds() -> float:
        return _get_float("RATE_LIMIT_WINDOW_SECONDS", 60.0)

    @staticmethod
    def get_max_requests() -> int:
        return _get_int("RATE_LIMIT_MAX", 120)


class CartConfig:
    """Configuration for cart expiry."""

    @staticmethod
    def get_ttl_seconds() -> float:
        return _get_float("CART_TTL_SECONDS", 24 * 60 * 60.0)

    @staticmethod
    def get_sweep_interval_seconds() -> float:
        """Interval of the background cart sweep (default: the cart TTL)."""
        return _get_float("CART_SWEEP_INTERVAL_SECONDS", CartConfig.get_ttl_seconds())


def get_config_status() -> dict:
    """
    Get a dictionary of required settings and whether they are present.

    Returns:
        Dictionary with keys:
        - jwt_secret: bool (True if set)
    """
    return {
        "jwt_secret": AuthConfig.get_jwt_secret() is not None,
    }


def validate_required_config() -> None:
    """
    Validate that all required environment variables are set.

    Raises:
        RuntimeError: If any required configuration is missing
    """
    missing = []

    if not AuthConfig.get_jwt_secret():
        missing.append("JWT_SECRET (required for cart and product mutation routes)")

    if missing:
        raise RuntimeError(
            "Missing required environment variables:\n" +
            "\n".join(f"  - {var}" for var in missing) +
            "\n\nPlease create a .env file at the project root with these variables."
        )
