"""
Environment-driven configuration for building a :class:`JWTHelper`.

The helper itself never reads the environment.  This module is the optional
outer layer that deployments use to assemble one: a shared ``Config`` base
class holds defaults, environment-specific subclasses
(``DevelopmentConfig``, ``TestingConfig``, ``ProductionConfig``) override
only what differs, and ``get_config`` resolves the right class by name or
from the ``JWT_HELPER_ENV`` variable.

Key sources follow a simple precedence: a raw PEM variable (``JWT_PUBLIC_KEY``)
wins over its file-path counterpart (``JWT_PUBLIC_KEY_PATH``).  Sources that
are not configured at all are allowed, so a verifier-only process only has
to provide the public key.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import ConfigError
from .helper import JWTHelper
from .keys import load_public_key

logger = logging.getLogger(__name__)


def _load_key(raw_env_var: str, path_env_var: str) -> str | None:
    """
    Load a PEM key from a raw environment variable or a file-path variable.

    Returns ``None`` when neither variable is set.
    """
    raw_key = os.environ.get(raw_env_var, "").strip()
    if raw_key:
        return raw_key

    key_path = os.environ.get(path_env_var, "").strip()
    if key_path:
        try:
            return Path(key_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                f"Unable to read key file at '{key_path}' from {path_env_var}."
            ) from exc

    return None


def _has_key_source(raw_env_var: str, path_env_var: str) -> bool:
    """Return True when at least one key source variable is configured."""
    return bool(
        os.environ.get(raw_env_var, "").strip()
        or os.environ.get(path_env_var, "").strip()
    )


def _env_seconds(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer number of seconds") from exc


def load_key_material(*, testing: bool) -> tuple[str | None, str | None, str | None]:
    """
    Resolve (encrypted private key PEM, passphrase, public key PEM).

    In testing mode, TEST_* variables are used when any of them is
    configured; otherwise the standard JWT_* variables apply.
    """
    prefix = ""
    if testing and (
        _has_key_source("TEST_JWT_PRIVATE_KEY", "TEST_JWT_PRIVATE_KEY_PATH")
        or _has_key_source("TEST_JWT_PUBLIC_KEY", "TEST_JWT_PUBLIC_KEY_PATH")
    ):
        prefix = "TEST_"

    private_pem = _load_key(f"{prefix}JWT_PRIVATE_KEY", f"{prefix}JWT_PRIVATE_KEY_PATH")
    public_pem = _load_key(f"{prefix}JWT_PUBLIC_KEY", f"{prefix}JWT_PUBLIC_KEY_PATH")
    passphrase = os.environ.get(f"{prefix}JWT_PRIVATE_KEY_PASSPHRASE") or None
    return private_pem, passphrase, public_pem


class Config:
    """
    Base configuration shared by all environments.

    Values are read from the environment when this module is imported.
    """

    TESTING: bool = False
    # How long a newly issued token remains valid
    JWT_EXPIRY_SECONDS: int = _env_seconds("JWT_EXPIRY_SECONDS", "3600")
    # Tolerance for clock differences between issuer and verifier
    JWT_LEEWAY_SECONDS: int = _env_seconds("JWT_LEEWAY_SECONDS", "30")


class DevelopmentConfig(Config):
    """Local development defaults."""


class TestingConfig(Config):
    """
    Configuration for automated test runs.

    Short-lived tokens by default so expiry paths are cheap to reach.
    """

    TESTING: bool = True
    JWT_EXPIRY_SECONDS: int = _env_seconds("TEST_JWT_EXPIRY_SECONDS", "60")


class ProductionConfig(Config):
    """Production deployments; all key material must come from the environment."""


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"``, or ``"production"``.
            When ``None``, ``JWT_HELPER_ENV`` is consulted, falling back to
            ``"development"``.

    Returns:
        The configuration class (not an instance).  Unrecognised names
        resolve to ``DevelopmentConfig``.
    """
    if env is None:
        env = os.environ.get("JWT_HELPER_ENV", "development")
    return config.get(env, config["default"])


def helper_from_env(env: str | None = None) -> JWTHelper:
    """
    Build a :class:`JWTHelper` from the environment.

    Only the key material that is configured is loaded, so the result may
    be issue-only, verify-only, or both.
    """
    config_class = get_config(env)
    private_pem, passphrase, public_pem = load_key_material(
        testing=config_class.TESTING
    )

    builder = (
        JWTHelper.builder()
        .expiry_seconds(config_class.JWT_EXPIRY_SECONDS)
        .leeway_seconds(config_class.JWT_LEEWAY_SECONDS)
    )
    if private_pem is not None:
        builder.encrypted_private_key_pem(private_pem)
    if passphrase is not None:
        builder.private_key_passphrase(passphrase)
    if public_pem is not None:
        builder.public_key_pem(public_pem)

    helper = builder.build()
    logger.info(
        "Built JWT helper with config %s (issue=%s, verify=%s)",
        config_class.__name__,
        helper.can_issue,
        helper.can_verify,
    )
    return helper
