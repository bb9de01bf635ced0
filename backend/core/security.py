# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Credential handling for the request layer.  Routers never call the cipher or
key-derivation code directly; they go through :class:`Credential`.

Responsibilities
----------------
1. Extract the credential from the request header   (get_credential)
2. Derive partition hash / cipher key / index key     (core.keys)
3. Seal plaintext fields for storage                  (Credential.seal)
4. Open stored envelopes, failing closed              (Credential.open)
"""

from typing import Union

from fastapi import Request

from core import cipher
from core.errors import (
    DecryptionError,
    IntegrityError,
    MalformedEnvelopeError,
    MissingCredentialError,
)
from core.keys import KeyMaterial, blind_index, derive_key_material
from core.logger import partition_label
from store import SealedValue


class Credential:
    """
    Everything derived from one caller's credential, for one request.

    The raw credential string is not kept; only the derived material is.
    """

    def __init__(self, material: KeyMaterial, mode: str):
        self._material = material
        self._mode = mode

    @classmethod
    def from_secret(cls, secret: Union[str, bytes], derivation: str, mode: str) -> "Credential":
        return cls(derive_key_material(secret, derivation), mode)

    @property
    def partition_hash(self) -> str:
        return self._material.partition_hash

    def index(self, value: str) -> str:
        """Blind index of *value* – equal plaintexts give equal tokens."""
        return blind_index(value.encode("utf-8"), self._material.index_key)

    def seal(self, value: str) -> SealedValue:
        """
        Encrypt *value* with a fresh nonce and pair it with its blind index.
        ``CipherInitError`` propagates unchanged (misconfigured credential).
        """
        envelope = cipher.encrypt(value.encode("utf-8"), self._material.cipher_key, self._mode)
        return SealedValue(index=self.index(value), envelope=envelope)

    def open(self, envelope: str) -> str:
        """
        Decrypt a stored envelope back to text.

        Any malformed envelope, failed integrity check or non-UTF-8 result is
        reported as ``DecryptionError`` so the whole request fails.
        """
        try:
            plaintext = cipher.decrypt(envelope, self._material.cipher_key, self._mode)
            return plaintext.decode("utf-8")
        except (MalformedEnvelopeError, IntegrityError) as exc:
            raise DecryptionError(f"Failed to decrypt stored value: {exc.detail}") from exc
        except UnicodeDecodeError as exc:
            raise DecryptionError("Failed to decrypt stored value: not valid UTF-8") from exc

    def __repr__(self) -> str:
        return f"Credential({partition_label(self.partition_hash)}…)"


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------


def get_credential(request: Request) -> Credential:
    """
    Dependency: read the credential header and derive the key material.

    Raises 401 (``MissingCredentialError``) when the header is absent or empty.
    """
    settings = request.app.state.settings
    secret = request.headers.get(settings.credential_header)
    if not secret:
        raise MissingCredentialError(f"Missing {settings.credential_header} header")
    # Starlette decodes header values as latin-1; undo that to key off the
    # exact bytes the client sent (a UTF-8 credential stays UTF-8).
    raw = secret.encode("latin-1")
    return Credential.from_secret(raw, settings.key_derivation, settings.cipher_mode)


# -- IP Address extraction ----------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
