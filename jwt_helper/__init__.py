"""
Issue and verify RS256 bearer tokens signed with a passphrase-encrypted RSA key.

Typical use::

    from jwt_helper import JWTHelper

    issuer = (
        JWTHelper.builder()
        .private_key_passphrase(passphrase)
        .encrypted_private_key_pem(encrypted_pem)
        .expiry_seconds(3600)
        .build()
    )
    token = issuer.issue("user_123")

    verifier = JWTHelper.builder().public_key_pem(public_pem).leeway_seconds(30).build()
    subject = verifier.verify(token)
"""

from __future__ import annotations

from .errors import (
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
from .helper import ALGORITHM, JWTHelper, JWTHelperBuilder, utc_now_seconds
from .keys import load_encrypted_private_key, load_public_key

__all__ = [
    "ALGORITHM",
    "AlgorithmMismatchError",
    "ConfigError",
    "ErrorKind",
    "ExpiredError",
    "JWTHelper",
    "JWTHelperBuilder",
    "JWTHelperError",
    "KeyMaterialError",
    "MalformedTokenError",
    "SignatureError",
    "SigningError",
    "load_encrypted_private_key",
    "load_public_key",
    "utc_now_seconds",
]
