"""Authenticated encryption of storage keys into opaque URL-safe tokens.

Token layout (before encoding)::

    salt (16B) | iv (12B) | tag (16B) | ciphertext (variable)

The per-token AES-256-GCM key is derived from the master secret and the
salt with scrypt, so every token is encrypted under a different key. Tokens
are encoded with URL-safe base64 and the ``=`` padding removed.
"""

import base64
import binascii
import os
import re

from aws_lambda_powertools import Logger
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from core.models.errors import DecryptionError
from core.utils.constants import (
    KEY_CODEC_IV_LENGTH,
    KEY_CODEC_KEY_LENGTH,
    KEY_CODEC_SALT_LENGTH,
    KEY_CODEC_SCRYPT_N,
    KEY_CODEC_SCRYPT_P,
    KEY_CODEC_SCRYPT_R,
    KEY_CODEC_TAG_LENGTH,
)

logger = Logger(UTC=True)

HEADER_LENGTH = KEY_CODEC_SALT_LENGTH + KEY_CODEC_IV_LENGTH + KEY_CODEC_TAG_LENGTH

_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]+")


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(token: str) -> bytes:
    if not _TOKEN_RE.fullmatch(token):
        raise ValueError("token contains characters outside the URL-safe alphabet")

    padding = "=" * (-len(token) % 4)
    raw = base64.b64decode(token + padding, altchars=b"-_", validate=True)

    # One token per byte string: reject non-zero trailing bits
    if _b64encode(raw) != token:
        raise ValueError("token is not canonically encoded")

    return raw


class KeyCodec:
    """Encrypts storage keys for clients and decrypts them back.

    One instance is built at startup from the master secret and shared by
    all requests; it holds no mutable state.
    """

    def __init__(self, master_secret: str) -> None:
        if not master_secret:
            raise RuntimeError("Key codec master secret is not set")

        self._secret = master_secret.encode("utf-8")

    def _derive_key(self, salt: bytes) -> bytes:
        # Scrypt instances are single use
        kdf = Scrypt(
            salt=salt,
            length=KEY_CODEC_KEY_LENGTH,
            n=KEY_CODEC_SCRYPT_N,
            r=KEY_CODEC_SCRYPT_R,
            p=KEY_CODEC_SCRYPT_P,
        )
        return kdf.derive(self._secret)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a storage key into a URL-safe token.

        A fresh salt and IV are drawn on every call, so encrypting the same
        key twice yields two different tokens.
        """
        salt = os.urandom(KEY_CODEC_SALT_LENGTH)
        iv = os.urandom(KEY_CODEC_IV_LENGTH)

        aesgcm = AESGCM(self._derive_key(salt))
        # AESGCM appends the tag to the ciphertext
        sealed = aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-KEY_CODEC_TAG_LENGTH], sealed[-KEY_CODEC_TAG_LENGTH:]

        return _b64encode(salt + iv + tag + ciphertext)

    def decrypt(self, token: str) -> str:
        """Decrypt a token produced by :meth:`encrypt`.

        Raises:
            DecryptionError: For any malformed, truncated or tampered token.
                The cause is logged but never returned to the caller.
        """
        try:
            raw = _b64decode(token.strip())
            if len(raw) < HEADER_LENGTH:
                raise ValueError("token shorter than header")

            salt = raw[:KEY_CODEC_SALT_LENGTH]
            iv = raw[KEY_CODEC_SALT_LENGTH : KEY_CODEC_SALT_LENGTH + KEY_CODEC_IV_LENGTH]
            tag = raw[KEY_CODEC_SALT_LENGTH + KEY_CODEC_IV_LENGTH : HEADER_LENGTH]
            ciphertext = raw[HEADER_LENGTH:]

            aesgcm = AESGCM(self._derive_key(salt))
            plaintext = aesgcm.decrypt(iv, ciphertext + tag, None)
            return plaintext.decode("utf-8")

        except (InvalidTag, ValueError, binascii.Error, UnicodeError) as exc:
            logger.warning(
                "Encrypted reference rejected",
                extra={"error_type": type(exc).__name__},
            )
            raise DecryptionError() from None
