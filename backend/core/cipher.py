# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Field encryption.  Every stored target and tag passes through here.

Envelope format
---------------
    base64url( nonce || ciphertext )            mode "cfb"
    base64url( nonce || ciphertext || tag )     mode "gcm"

The base64url alphabet keeps its "=" padding so that individual envelopes in the
legacy format (mode "cfb") decode unchanged.

Modes
-----
gcm  AES-GCM, 12-byte nonce, 16-byte tag.  Tampering or decrypting with the
     wrong key raises ``IntegrityError``.
cfb  AES-CFB128, 16-byte IV, no tag.  Output length equals input length.
     There is NO integrity check: the wrong key yields garbage bytes, not an
     error.  Kept for the legacy envelope format only.

A fresh random nonce is drawn on every ``encrypt`` call, so the same
plaintext never produces the same envelope twice.  Lookups must therefore go
through the blind index (core.keys.blind_index), never through envelopes.
"""

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.decrepit.ciphers.modes import CFB
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.errors import CipherInitError, IntegrityError, MalformedEnvelopeError

MODE_GCM = "gcm"
MODE_CFB = "cfb"
MODES = (MODE_GCM, MODE_CFB)

AES_BLOCK_SIZE = 16
VALID_KEY_SIZES = (16, 24, 32)   # AES-128 / 192 / 256

GCM_NONCE_SIZE = 12              # 96-bit nonce per NIST SP 800-38D
GCM_TAG_SIZE = 16
CFB_IV_SIZE = AES_BLOCK_SIZE


def _check_key(key: bytes) -> None:
    # The AES primitive would also accept a 512-bit (XTS) key, so check here.
    if len(key) not in VALID_KEY_SIZES:
        raise CipherInitError(
            f"Invalid key length {len(key)} bytes; AES requires 16, 24 or 32"
        )


def _check_mode(mode: str) -> None:
    if mode not in MODES:
        raise ValueError(f"Unknown cipher mode: {mode!r}")


# ---------------------------------------------------------------------------
# Envelope encoding
# ---------------------------------------------------------------------------


def _encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _decode(envelope: str) -> bytes:
    # b64decode(validate=True) rejects stray characters; "+" and "/" are
    # valid after the altchars translation, so refuse them up front.
    if "+" in envelope or "/" in envelope:
        raise MalformedEnvelopeError("Envelope is not base64url encoded")
    try:
        return base64.b64decode(envelope, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEnvelopeError("Envelope is not base64url encoded") from exc


# ---------------------------------------------------------------------------
# AES-CFB128
# ---------------------------------------------------------------------------
# cryptography keeps CFB under hazmat.decrepit.


def _cfb(key: bytes, iv: bytes):
    return Cipher(algorithms.AES(key), CFB(iv))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def encrypt(plaintext: bytes, key: bytes, mode: str = MODE_GCM) -> str:
    """
    Encrypt *plaintext* under *key* and return a text-safe envelope.

    Raises ``CipherInitError`` if *key* is not 16, 24 or 32 bytes long.
    """
    _check_mode(mode)
    _check_key(key)

    if mode == MODE_GCM:
        nonce = secrets.token_bytes(GCM_NONCE_SIZE)
        return _encode(nonce + AESGCM(key).encrypt(nonce, plaintext, None))

    iv = secrets.token_bytes(CFB_IV_SIZE)
    encryptor = _cfb(key, iv).encryptor()
    return _encode(iv + encryptor.update(plaintext) + encryptor.finalize())


def decrypt(envelope: str, key: bytes, mode: str = MODE_GCM) -> bytes:
    """
    Reverse :func:`encrypt`.

    Raises
    ------
    CipherInitError         key is not 16, 24 or 32 bytes long
    MalformedEnvelopeError  bad base64url, or shorter than nonce (+ tag)
    IntegrityError          gcm only – tag mismatch (tampered / wrong key)
    """
    _check_mode(mode)
    _check_key(key)
    raw = _decode(envelope)

    if mode == MODE_GCM:
        if len(raw) < GCM_NONCE_SIZE + GCM_TAG_SIZE:
            raise MalformedEnvelopeError("Ciphertext too short")
        nonce, ct_and_tag = raw[:GCM_NONCE_SIZE], raw[GCM_NONCE_SIZE:]
        try:
            return AESGCM(key).decrypt(nonce, ct_and_tag, None)
        except InvalidTag as exc:
            raise IntegrityError() from exc

    if len(raw) < CFB_IV_SIZE:
        raise MalformedEnvelopeError("Ciphertext too short")
    iv, ciphertext = raw[:CFB_IV_SIZE], raw[CFB_IV_SIZE:]
    decryptor = _cfb(key, iv).decryptor()
    return decryptor.update(ciphertext) + decryptor.finalize()
