"""
Unit tests for the error taxonomy.
"""

from __future__ import annotations

import pytest

from jwt_helper import (
    AlgorithmMismatchError,
    ConfigError,
    ErrorKind,
    ExpiredError,
    JWTHelperError,
    KeyMaterialError,
    MalformedTokenError,
    SignatureError,
    SigningError,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("error_class", "kind"),
    [
        (ConfigError, ErrorKind.CONFIG),
        (KeyMaterialError, ErrorKind.KEY_MATERIAL),
        (SigningError, ErrorKind.SIGNING),
        (MalformedTokenError, ErrorKind.MALFORMED_TOKEN),
        (AlgorithmMismatchError, ErrorKind.ALGORITHM_MISMATCH),
        (SignatureError, ErrorKind.SIGNATURE),
        (ExpiredError, ErrorKind.EXPIRED),
    ],
)
def test_each_error_carries_its_kind(error_class, kind):
    """Test that every error can be discriminated by type or by kind."""
    # Act
    error = error_class()

    # Assert
    assert isinstance(error, JWTHelperError)
    assert error.kind is kind
    assert str(error) == error_class.default_description


def test_custom_description_overrides_default():
    """Test that a specific description replaces the default message."""
    error = ConfigError("`public_key` is required for verifying tokens")

    assert error.description == "`public_key` is required for verifying tokens"
    assert str(error) == error.description


def test_error_kind_values_are_strings():
    """Test that kinds serialize as plain strings."""
    assert ErrorKind.EXPIRED == "expired"
    assert ErrorKind("signature") is ErrorKind.SIGNATURE
