# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Key material derived from a caller's credential.

One credential string feeds three independent values:

* ``partition_hash`` – SHA-256 hex digest.  Scopes every row in the database
  to its credential.  One-way, so reading the table does not reveal the key.
* ``cipher_key``     – AES key for the stored envelopes (see ``derivation``).
* ``index_key``      – HMAC key for the blind index that makes encrypted
  targets/tags searchable by exact match.

All functions here are pure; nothing is cached.
"""

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from typing import Union

from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

DERIVATION_RAW = "raw"
DERIVATION_HKDF = "hkdf"
DERIVATIONS = (DERIVATION_RAW, DERIVATION_HKDF)

_CIPHER_INFO = b"tagvault cipher"
_INDEX_INFO = b"tagvault index"

NEW_KEY_BYTES = 32


@dataclass(frozen=True)
class KeyMaterial:
    partition_hash: str
    cipher_key: bytes
    index_key: bytes

    def __repr__(self) -> str:
        # Keys stay out of tracebacks and debug logs
        return f"KeyMaterial(partition_hash={self.partition_hash[:12]}…)"


def _secret_bytes(secret: Union[str, bytes]) -> bytes:
    # Request handlers pass the header's wire bytes; str is taken as UTF-8
    return secret if isinstance(secret, bytes) else secret.encode("utf-8")


def partition_hash(secret: Union[str, bytes]) -> str:
    """Hex SHA-256 of the credential – 64 lowercase characters."""
    return hashlib.sha256(_secret_bytes(secret)).hexdigest()


def _hkdf(secret: Union[str, bytes], info: bytes) -> bytes:
    # Salt is None: the credential is the only input we have and it is
    # expected to be high-entropy (see new_key()).
    return HKDF(algorithm=SHA256(), length=32, salt=None, info=info).derive(
        _secret_bytes(secret)
    )


def cipher_key(secret: Union[str, bytes], derivation: str = DERIVATION_HKDF) -> bytes:
    """
    AES key bytes for *secret*.

    ``raw``  – the bytes of the credential, unvalidated.  A credential that is
               not 16, 24 or 32 bytes long is rejected later by the cipher
               with ``CipherInitError``; it is never padded or cut.
    ``hkdf`` – HKDF-SHA256 output, always 32 bytes (AES-256).
    """
    if derivation == DERIVATION_RAW:
        return _secret_bytes(secret)
    if derivation == DERIVATION_HKDF:
        return _hkdf(secret, _CIPHER_INFO)
    raise ValueError(
        f"Unknown key derivation: {derivation!r} (expected one of {', '.join(DERIVATIONS)})"
    )


def index_key(secret: Union[str, bytes]) -> bytes:
    return _hkdf(secret, _INDEX_INFO)


def blind_index(value: bytes, key: bytes) -> str:
    """Deterministic HMAC-SHA256 hex token of *value* under *key*."""
    return hmac.new(key, value, hashlib.sha256).hexdigest()


def derive_key_material(secret: Union[str, bytes], derivation: str = DERIVATION_HKDF) -> KeyMaterial:
    return KeyMaterial(
        partition_hash=partition_hash(secret),
        cipher_key=cipher_key(secret, derivation),
        index_key=index_key(secret),
    )


def new_key() -> str:
    """A fresh credential: 32 CSPRNG bytes, base64url encoded (with padding)."""
    return base64.urlsafe_b64encode(secrets.token_bytes(NEW_KEY_BYTES)).decode("ascii")
