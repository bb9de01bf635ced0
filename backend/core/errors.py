# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Error taxonomy.

Every failure the service can report derives from :class:`TagVaultError`,
which carries the HTTP status and the client-facing message.  The crypto and
storage layers raise these directly; ``main.py`` renders them as JSON.
"""

from fastapi import status


class TagVaultError(Exception):
    """Base class.  ``detail`` is safe to show to the client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


# -- Request-level ---------------------------------------------------------


class MissingCredentialError(TagVaultError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Missing Authorization header"


class InvalidInputError(TagVaultError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid input"


class UnsupportedMethodError(TagVaultError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    detail = "Invalid method"


# -- Crypto ----------------------------------------------------------------


class CipherInitError(TagVaultError):
    """Key length does not match AES-128/192/256."""

    detail = "Failed to initialise cipher"


class MalformedEnvelopeError(TagVaultError):
    """Envelope is not valid base64url or is shorter than the nonce."""

    detail = "Malformed ciphertext envelope"


class IntegrityError(TagVaultError):
    """Authentication tag mismatch: tampered envelope or wrong key."""

    detail = "Ciphertext failed integrity check"


class DecryptionError(TagVaultError):
    """Raised by the handlers when any stored field cannot be decrypted."""

    detail = "Failed to decrypt stored value"


# -- Storage ---------------------------------------------------------------


class ConflictError(TagVaultError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Record already exists"


class StorageError(TagVaultError):
    detail = "Database error"
