"""
RS256 token issuance and verification.

:class:`JWTHelper` is configured once (directly or through
:class:`JWTHelperBuilder`) and then used for any number of ``issue`` and
``verify`` calls.  A single class serves both ends of the token flow:

- an *issuer* needs the encrypted private key PEM, its passphrase, and
  ``expiry_seconds``;
- a *verifier* needs the RSA public key and ``leeway_seconds``.

Missing fields are not an error when the helper is built.  They surface as
:class:`~jwt_helper.errors.ConfigError` when an operation that needs them is
called, so a verifier never has to hold credentials it does not use.

Tokens carry exactly three claims:

    - ``sub`` -- the subject passed to :meth:`JWTHelper.issue`
    - ``iat`` -- issue time, integer seconds since the Unix epoch
    - ``exp`` -- ``iat + expiry_seconds``

A token is accepted while ``now <= exp + leeway_seconds``.
"""

from __future__ import annotations

import json
import logging
import math
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import jwt
from jwt.utils import base64url_decode, base64url_encode
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import (
    AlgorithmMismatchError,
    ConfigError,
    ExpiredError,
    JWTHelperError,
    MalformedTokenError,
    SignatureError,
    SigningError,
)
from .keys import load_encrypted_private_key, load_public_key

logger = logging.getLogger(__name__)

ALGORITHM = "RS256"

PASSPHRASE_ABSENT = "`private_key_passphrase` is required for issuing tokens"
PRIVATE_KEY_ABSENT = "`encrypted_private_key_pem` is required for issuing tokens"
EXPIRY_ABSENT = "`expiry_seconds` is required for issuing tokens"
PUBLIC_KEY_ABSENT = "`public_key` is required for verifying tokens"
LEEWAY_ABSENT = "`leeway_seconds` is required for verifying tokens"

Clock = Callable[[], float]


def utc_now_seconds() -> int:
    """Return the current UTC wall-clock time as integer epoch seconds."""
    return int(datetime.now(timezone.utc).timestamp())


def _check_seconds(name: str, value: int | None) -> int | None:
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"`{name}` must be an integer number of seconds")
    if value < 0:
        raise ConfigError(f"`{name}` must not be negative")
    return value


def _check_passphrase(passphrase: str | bytes | None) -> bytes | None:
    if passphrase is None or isinstance(passphrase, bytes):
        return passphrase
    if isinstance(passphrase, str):
        return passphrase.encode("utf-8")
    raise ConfigError("`private_key_passphrase` must be str or bytes")


def _check_public_key(public_key: Any) -> rsa.RSAPublicKey | None:
    if public_key is not None and not isinstance(public_key, rsa.RSAPublicKey):
        raise ConfigError("`public_key` must be an RSA public key")
    return public_key


def _check_canonical_segments(token: str | bytes) -> None:
    """
    Reject segments whose base64url text is not the canonical encoding.

    Lenient decoders ignore the unused trailing bits of the last character,
    so several spellings of a segment decode to the same bytes.  Only the
    exact encoding of the decoded bytes is accepted.
    """
    raw = token.encode("utf-8") if isinstance(token, str) else token
    signing_input, signature_segment = raw.rsplit(b".", 1)
    header_segment, payload_segment = signing_input.split(b".", 1)
    for segment in (header_segment, payload_segment, signature_segment):
        try:
            canonical = base64url_encode(base64url_decode(segment))
        except (TypeError, ValueError) as exc:
            raise MalformedTokenError() from exc
        if canonical != segment:
            raise MalformedTokenError("Token segment is not canonical base64url")


class JWTHelper:
    """
    Issues and verifies RS256 bearer tokens.

    Instances are read-only after construction and safe to share between
    threads.  By default the private key is decrypted on every ``issue``
    call so no plaintext key outlives the call; pass
    ``cache_private_key=True`` to decrypt it once instead.

    Args:
        private_key_passphrase: Passphrase the private key is encrypted with.
        expiry_seconds: Token lifetime measured from issuance.
        leeway_seconds: Clock-skew tolerance applied when checking ``exp``.
        encrypted_private_key_pem: Passphrase-encrypted RSA private key PEM.
        public_key: RSA public key used to verify signatures.
        clock: Zero-argument callable returning Unix epoch seconds.
            Defaults to :func:`utc_now_seconds`.
        cache_private_key: Decrypt the private key once and reuse it.
    """

    def __init__(
        self,
        *,
        private_key_passphrase: str | bytes | None = None,
        expiry_seconds: int | None = None,
        leeway_seconds: int | None = None,
        encrypted_private_key_pem: str | None = None,
        public_key: rsa.RSAPublicKey | None = None,
        clock: Clock | None = None,
        cache_private_key: bool = False,
    ):
        self._private_key_passphrase = _check_passphrase(private_key_passphrase)
        self._expiry_seconds = _check_seconds("expiry_seconds", expiry_seconds)
        self._leeway_seconds = _check_seconds("leeway_seconds", leeway_seconds)
        self._encrypted_private_key_pem = encrypted_private_key_pem
        self._public_key = _check_public_key(public_key)
        self._clock = clock or utc_now_seconds
        self._cache_private_key = cache_private_key
        self._cached_private_key: rsa.RSAPrivateKey | None = None
        self._cache_lock = threading.Lock()
        self._jws = jwt.PyJWS()

    @staticmethod
    def builder() -> JWTHelperBuilder:
        """Start a field-by-field configuration."""
        return JWTHelperBuilder()

    @property
    def expiry_seconds(self) -> int | None:
        return self._expiry_seconds

    @property
    def leeway_seconds(self) -> int | None:
        return self._leeway_seconds

    @property
    def public_key(self) -> rsa.RSAPublicKey | None:
        return self._public_key

    @property
    def can_issue(self) -> bool:
        """True when every field needed by :meth:`issue` is set."""
        return (
            self._private_key_passphrase is not None
            and self._encrypted_private_key_pem is not None
            and self._expiry_seconds is not None
        )

    @property
    def can_verify(self) -> bool:
        """True when every field needed by :meth:`verify` is set."""
        return self._public_key is not None and self._leeway_seconds is not None

    def __repr__(self) -> str:
        # Never render passphrase or key material.
        return (
            f"{type(self).__name__}(can_issue={self.can_issue}, "
            f"can_verify={self.can_verify}, expiry_seconds={self._expiry_seconds}, "
            f"leeway_seconds={self._leeway_seconds})"
        )

    def _now(self) -> int:
        return int(self._clock())

    def _signing_key(self) -> rsa.RSAPrivateKey:
        if not self._cache_private_key:
            return load_encrypted_private_key(
                self._encrypted_private_key_pem, self._private_key_passphrase
            )
        with self._cache_lock:
            if self._cached_private_key is None:
                self._cached_private_key = load_encrypted_private_key(
                    self._encrypted_private_key_pem, self._private_key_passphrase
                )
            return self._cached_private_key

    def issue(self, subject: str) -> str:
        """
        Issue a signed token for ``subject``.

        Pass in the subject to identify who the token is issued to, e.g. a
        user id.  ``iat`` and ``exp`` are derived from a single clock
        reading so ``exp - iat == expiry_seconds`` exactly.

        Args:
            subject: Identifier of the principal.  An empty string is
                accepted and round-trips unchanged.

        Returns:
            The compact JWS string ``header.payload.signature``.

        Raises:
            ConfigError: If the passphrase, encrypted key, or expiry is unset.
            KeyMaterialError: If the private key cannot be decrypted.
            SigningError: If PyJWT fails to sign the claims.
        """
        if not isinstance(subject, str):
            raise TypeError("subject must be a string")
        if self._private_key_passphrase is None:
            raise ConfigError(PASSPHRASE_ABSENT)
        if self._encrypted_private_key_pem is None:
            raise ConfigError(PRIVATE_KEY_ABSENT)
        if self._expiry_seconds is None:
            raise ConfigError(EXPIRY_ABSENT)

        private_key = self._signing_key()

        now = self._now()
        claims = {
            "sub": subject,
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        try:
            token = jwt.encode(claims, private_key, algorithm=ALGORITHM)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise SigningError() from exc

        logger.debug("Issued %s token valid for %ss", ALGORITHM, self._expiry_seconds)
        return token

    def verify(self, token: str) -> str:
        """
        Verify ``token`` and return its subject.

        Checks run in a fixed order: segment structure, ``alg`` header,
        signature, ``exp`` claim, expiry against leeway, ``sub`` claim.

        Raises:
            ConfigError: If the public key or leeway is unset.
            MalformedTokenError: On bad structure, encoding, JSON, or when
                ``exp`` or ``sub`` is missing or of the wrong type.
            AlgorithmMismatchError: If the header ``alg`` is not RS256.
            SignatureError: If the signature does not match the public key.
            ExpiredError: If ``now > exp + leeway_seconds``.
        """
        try:
            subject = self._verify(token)
        except JWTHelperError as exc:
            logger.info("Token rejected: %s", exc.kind.value)
            raise
        logger.debug("Token verified")
        return subject

    def _verify(self, token: str) -> str:
        if self._public_key is None:
            raise ConfigError(PUBLIC_KEY_ABSENT)
        if self._leeway_seconds is None:
            raise ConfigError(LEEWAY_ABSENT)

        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError() from exc
        _check_canonical_segments(token)

        # Reject before touching the key so "none"/HS256 tokens never reach
        # signature verification.
        if header.get("alg") != ALGORITHM:
            raise AlgorithmMismatchError()

        try:
            payload_bytes = self._jws.decode(
                token, self._public_key, algorithms=[ALGORITHM]
            )
        except jwt.InvalidSignatureError as exc:
            raise SignatureError() from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError() from exc

        try:
            claims = json.loads(payload_bytes)
        except ValueError as exc:
            raise MalformedTokenError("Token payload is not valid JSON") from exc
        if not isinstance(claims, dict):
            raise MalformedTokenError("Token payload must be a JSON object")

        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise MalformedTokenError("Token is missing a numeric `exp` claim")
        # NaN and Infinity would never compare as expired.
        if not math.isfinite(exp):
            raise MalformedTokenError("Token `exp` claim must be finite")

        if self._now() > exp + self._leeway_seconds:
            raise ExpiredError()

        subject = claims.get("sub")
        if not isinstance(subject, str):
            raise MalformedTokenError("Token is missing a string `sub` claim")
        return subject


class JWTHelperBuilder:
    """
    Chainable, field-by-field construction of a :class:`JWTHelper`.

    Example::

        helper = (
            JWTHelper.builder()
            .private_key_passphrase("testpassword")
            .expiry_seconds(2)
            .leeway_seconds(0)
            .encrypted_private_key_pem(encrypted_pem)
            .public_key_pem(public_pem)
            .build()
        )
    """

    def __init__(self):
        self._fields: dict[str, Any] = {}

    def private_key_passphrase(self, passphrase: str | bytes) -> JWTHelperBuilder:
        self._fields["private_key_passphrase"] = _check_passphrase(passphrase)
        return self

    def expiry_seconds(self, seconds: int) -> JWTHelperBuilder:
        self._fields["expiry_seconds"] = _check_seconds("expiry_seconds", seconds)
        return self

    def leeway_seconds(self, seconds: int) -> JWTHelperBuilder:
        self._fields["leeway_seconds"] = _check_seconds("leeway_seconds", seconds)
        return self

    def encrypted_private_key_pem(self, pem: str) -> JWTHelperBuilder:
        self._fields["encrypted_private_key_pem"] = pem
        return self

    def public_key(self, public_key: rsa.RSAPublicKey) -> JWTHelperBuilder:
        self._fields["public_key"] = _check_public_key(public_key)
        return self

    def public_key_pem(self, pem: str | bytes) -> JWTHelperBuilder:
        """Parse an SPKI PEM and use it as the verification key."""
        return self.public_key(load_public_key(pem))

    def clock(self, clock: Clock) -> JWTHelperBuilder:
        self._fields["clock"] = clock
        return self

    def cache_private_key(self, enabled: bool = True) -> JWTHelperBuilder:
        self._fields["cache_private_key"] = enabled
        return self

    def build(self) -> JWTHelper:
        return JWTHelper(**self._fields)
