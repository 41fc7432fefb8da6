"""Ed25519 key material and Sui transaction signatures."""

from __future__ import annotations

import base64
import binascii
import hashlib

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from keepsake_cli.config import ConfigurationError

ED25519_FLAG = 0x00
# IntentScope::TransactionData, IntentVersion::V0, AppId::Sui
TRANSACTION_INTENT = bytes([0, 0, 0])


class KeyMaterialError(ConfigurationError):
    """Raised when a secret key cannot be decoded."""


def _blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


class Keypair:
    """Ed25519 keypair able to sign Sui transaction bytes."""

    def __init__(self, private_key: Ed25519PrivateKey):
        self._private_key = private_key

    @classmethod
    def generate(cls) -> "Keypair":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_secret_hex(cls, secret_hex: str) -> "Keypair":
        """Load a keypair from a hex secret.

        Accepts a 32-byte seed or the 64-byte seed+public key layout some
        wallets export. Only the seed is used in the latter case.
        """
        value = secret_hex.strip()
        if value.startswith("0x"):
            value = value[2:]
        try:
            raw = bytes.fromhex(value)
        except (ValueError, binascii.Error) as exc:
            raise KeyMaterialError("Secret key is not valid hex") from exc

        if len(raw) not in (32, 64):
            raise KeyMaterialError(f"Secret key must be 32 or 64 bytes, got {len(raw)}")
        return cls(Ed25519PrivateKey.from_private_bytes(raw[:32]))

    @property
    def seed(self) -> bytes:
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    @property
    def public_key_bytes(self) -> bytes:
        return self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @property
    def secret_hex(self) -> str:
        """Hex of seed followed by public key, the format ``from_secret_hex`` reads back."""
        return (self.seed + self.public_key_bytes).hex()

    @property
    def address(self) -> str:
        digest = _blake2b_256(bytes([ED25519_FLAG]) + self.public_key_bytes)
        return "0x" + digest.hex()

    def sign_transaction(self, tx_bytes_b64: str) -> str:
        """Sign base64 transaction bytes and return the serialized signature."""
        try:
            tx_bytes = base64.b64decode(tx_bytes_b64, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ValueError("Transaction bytes are not valid base64") from exc

        digest = _blake2b_256(TRANSACTION_INTENT + tx_bytes)
        signature = self._private_key.sign(digest)
        serialized = bytes([ED25519_FLAG]) + signature + self.public_key_bytes
        return base64.b64encode(serialized).decode("ascii")
