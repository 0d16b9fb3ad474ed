"""
Error taxonomy for token issuance and verification.

Every failure raised by :class:`~jwt_helper.helper.JWTHelper` is a subclass
of :class:`JWTHelperError` carrying an :class:`ErrorKind`, so callers can
either catch a specific exception type or discriminate on ``exc.kind``.

Messages are intentionally short and generic.  They never include key
material, passphrases, or any part of the token being processed; the
underlying library exception (if any) is chained via ``__cause__``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """
    Machine-readable failure categories.

    - config             -- a field required by the operation was not set
    - key_material       -- a PEM key could not be decoded, decrypted or parsed
    - signing            -- the signer failed while issuing a token
    - malformed_token    -- bad structure, encoding, JSON, or missing claims
    - algorithm_mismatch -- the token header does not declare RS256
    - signature          -- the signature does not match the public key
    - expired            -- ``exp`` is in the past, after applying leeway
    """

    CONFIG = "config"
    KEY_MATERIAL = "key_material"
    SIGNING = "signing"
    MALFORMED_TOKEN = "malformed_token"
    ALGORITHM_MISMATCH = "algorithm_mismatch"
    SIGNATURE = "signature"
    EXPIRED = "expired"


class JWTHelperError(Exception):
    """
    Base exception for every helper failure.

    Attributes:
        kind: The :class:`ErrorKind` for this failure.
        description: Human-readable message (safe to log).
    """

    kind: ErrorKind
    default_description: str = "JWT helper error"

    def __init__(self, description: str | None = None):
        self.description = description or self.default_description
        super().__init__(self.description)


class ConfigError(JWTHelperError):
    kind = ErrorKind.CONFIG
    default_description = "Helper is missing required configuration"


class KeyMaterialError(JWTHelperError):
    kind = ErrorKind.KEY_MATERIAL
    default_description = "Key material could not be loaded"


class SigningError(JWTHelperError):
    kind = ErrorKind.SIGNING
    default_description = "Token could not be signed"


class MalformedTokenError(JWTHelperError):
    kind = ErrorKind.MALFORMED_TOKEN
    default_description = "Token is malformed"


class AlgorithmMismatchError(JWTHelperError):
    kind = ErrorKind.ALGORITHM_MISMATCH
    default_description = "Token algorithm is not RS256"


class SignatureError(JWTHelperError):
    kind = ErrorKind.SIGNATURE
    default_description = "Token signature verification failed"


class ExpiredError(JWTHelperError):
    kind = ErrorKind.EXPIRED
    default_description = "Token has expired"
