"""
Shared pytest fixtures for the JWT helper test suite.

Key material is generated once per process in ``shared.test_helpers`` (a
4096-bit key takes noticeable time to generate), while helpers and clocks
are rebuilt for every test so configuration never leaks between tests.

Key Concepts Demonstrated:
- Session-stable key material, function-scoped helpers
- Injected clock for deterministic expiry and leeway tests
- Factory fixture for partial (issuer-only / verifier-only) helpers
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from faker import Faker

from jwt_helper import JWTHelper
from shared.test_helpers import (
    TEST_ENCRYPTED_PRIVATE_KEY,
    TEST_PASSPHRASE,
    TEST_PUBLIC_KEY,
    FrozenClock,
)

# Initialize Faker for generating test subjects
fake = Faker()


@pytest.fixture
def clock() -> FrozenClock:
    """Provide a fresh controllable clock for each test."""
    return FrozenClock()


@pytest.fixture
def helper_factory(clock) -> Callable[..., JWTHelper]:
    """
    Provide a factory that builds helpers wired to the test key pair.

    Keyword arguments override the defaults; pass ``None`` to leave a
    field unset, e.g. ``helper_factory(public_key_pem=None)`` for an
    issuer-only helper.
    """

    def _build(
        *,
        passphrase: str | None = TEST_PASSPHRASE,
        encrypted_private_key_pem: str | None = TEST_ENCRYPTED_PRIVATE_KEY,
        public_key_pem: str | None = TEST_PUBLIC_KEY,
        expiry_seconds: int | None = 60,
        leeway_seconds: int | None = 0,
        clock_override: Callable[[], float] | None = None,
        cache_private_key: bool = False,
    ) -> JWTHelper:
        builder = (
            JWTHelper.builder()
            .clock(clock_override or clock)
            .cache_private_key(cache_private_key)
        )
        if passphrase is not None:
            builder.private_key_passphrase(passphrase)
        if encrypted_private_key_pem is not None:
            builder.encrypted_private_key_pem(encrypted_private_key_pem)
        if public_key_pem is not None:
            builder.public_key_pem(public_key_pem)
        if expiry_seconds is not None:
            builder.expiry_seconds(expiry_seconds)
        if leeway_seconds is not None:
            builder.leeway_seconds(leeway_seconds)
        return builder.build()

    return _build


@pytest.fixture
def helper(helper_factory) -> JWTHelper:
    """Provide a fully configured issuer+verifier helper."""
    return helper_factory()


@pytest.fixture
def subject() -> str:
    """Provide a random subject identifier."""
    return fake.uuid4()
