"""Generate a local development RSA key pair with a passphrase-encrypted private key."""

from __future__ import annotations

import os
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


KEYS_DIR = Path(__file__).resolve().parent
PRIVATE_KEY_NAME = "dev.private.pem"
PUBLIC_KEY_NAME = "dev.public.pem"
KEY_SIZE = 4096


def main(keys_dir: Path = KEYS_DIR, passphrase: str | None = None) -> int:
    """Generate keys once and skip when both files already exist.

    The passphrase defaults to ``JWT_PRIVATE_KEY_PASSPHRASE``.
    """
    private_key_path = keys_dir / PRIVATE_KEY_NAME
    public_key_path = keys_dir / PUBLIC_KEY_NAME
    private_exists = private_key_path.exists()
    public_exists = public_key_path.exists()

    if private_exists and public_exists:
        print(f"Keys already exist, skipping: {private_key_path} / {public_key_path}")
        return 0

    if private_exists != public_exists:
        raise SystemExit(
            "Only one key file exists. Remove both key files and run this script again."
        )

    if passphrase is None:
        passphrase = os.environ.get("JWT_PRIVATE_KEY_PASSPHRASE", "")
    if not passphrase:
        raise SystemExit("Set JWT_PRIVATE_KEY_PASSPHRASE to encrypt the private key.")

    keys_dir.mkdir(parents=True, exist_ok=True)

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=KEY_SIZE)
    public_key = private_key.public_key()

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.BestAvailableEncryption(
            passphrase.encode("utf-8")
        ),
    )
    public_pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )

    private_key_path.write_bytes(private_pem)
    public_key_path.write_bytes(public_pem)
    print(f"Generated: {private_key_path}")
    print(f"Generated: {public_key_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
