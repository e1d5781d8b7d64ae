"""
At-rest encryption for user supplied secrets (GitHub tokens, OpenAI API keys).

Values are sealed with AES-256-GCM and stored as three base64 fields joined by
dots: ``iv.ciphertext.tag``. The 12 byte IV is random per value and the tag is
the 16 byte GCM authentication tag.
"""

import base64
import binascii
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.core.config import settings

logger = logging.getLogger(__name__)

IV_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32


class SecretError(ValueError):
    """Raised when a secret cannot be sealed or opened."""


def _get_key() -> bytes:
    raw = settings.ENCRYPTION_KEY
    if not raw:
        raise SecretError("ENCRYPTION_KEY is not set.")
    try:
        key = base64.b64decode(raw)
    except (binascii.Error, ValueError):
        raise SecretError("ENCRYPTION_KEY must be 32 bytes (base64 encoded).")
    if len(key) != KEY_LENGTH:
        raise SecretError("ENCRYPTION_KEY must be 32 bytes (base64 encoded).")
    return key


def encrypt_secret(value: str) -> str:
    """Encrypt a plaintext secret into the ``iv.data.tag`` storage format."""
    key = _get_key()
    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(key).encrypt(iv, value.encode("utf-8"), None)
    # AESGCM appends the tag to the ciphertext
    data, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return ".".join(
        base64.b64encode(part).decode("ascii") for part in (iv, data, tag)
    )


def decrypt_secret(value: str) -> str:
    """Decrypt a value produced by :func:`encrypt_secret`."""
    parts = (value or "").split(".")
    if len(parts) != 3 or not all(parts):
        raise SecretError("Invalid encrypted value.")

    try:
        iv, data, tag = (base64.b64decode(part) for part in parts)
    except (binascii.Error, ValueError):
        raise SecretError("Invalid encrypted value.")
    if len(iv) != IV_LENGTH or len(tag) != TAG_LENGTH:
        raise SecretError("Invalid encrypted value.")

    key = _get_key()
    try:
        plain = AESGCM(key).decrypt(iv, data + tag, None)
    except InvalidTag:
        logger.error("Secret failed authentication; wrong ENCRYPTION_KEY or tampered value")
        raise SecretError("Unable to decrypt secret.")
    return plain.decode("utf-8")
