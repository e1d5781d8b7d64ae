"""Secret encryption, password hashing and session tokens."""

import base64

import jwt
import pytest

from app.core import crypto
from app.core.config import settings
from app.core.crypto import SecretError, decrypt_secret, encrypt_secret
from app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    is_valid_password,
    verify_password,
)


class TestSecrets:
    def test_storage_format(self):
        sealed = encrypt_secret("ghp_token")

        iv, data, tag = sealed.split(".")
        assert len(base64.b64decode(iv)) == crypto.IV_LENGTH
        assert len(base64.b64decode(tag)) == crypto.TAG_LENGTH
        assert len(base64.b64decode(data)) == len("ghp_token")
        assert decrypt_secret(sealed) == "ghp_token"

    def test_random_iv(self):
        assert encrypt_secret("same") != encrypt_secret("same")

    @pytest.mark.parametrize("value", ["", "abc", "a.b", "a..c", "a.b.c.d"])
    def test_malformed_values(self, value):
        with pytest.raises(SecretError, match="Invalid encrypted value."):
            decrypt_secret(value)

    def test_short_iv(self):
        _, data, tag = encrypt_secret("secret").split(".")
        short_iv = base64.b64encode(b"abc").decode("ascii")

        with pytest.raises(SecretError, match="Invalid encrypted value."):
            decrypt_secret(".".join([short_iv, data, tag]))

    def test_short_tag(self):
        iv, data, _ = encrypt_secret("secret").split(".")
        short_tag = base64.b64encode(b"tag").decode("ascii")

        with pytest.raises(SecretError, match="Invalid encrypted value."):
            decrypt_secret(".".join([iv, data, short_tag]))

    def test_tampered_value(self):
        iv, data, tag = encrypt_secret("secret").split(".")
        forged_tag = base64.b64encode(bytes(16)).decode("ascii")

        with pytest.raises(SecretError, match="Unable to decrypt secret."):
            decrypt_secret(".".join([iv, data, forged_tag]))

    def test_wrong_key(self, monkeypatch):
        sealed = encrypt_secret("secret")
        monkeypatch.setattr(settings, "ENCRYPTION_KEY", base64.b64encode(b"z" * 32).decode("ascii"))

        with pytest.raises(SecretError, match="Unable to decrypt secret."):
            decrypt_secret(sealed)

    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(settings, "ENCRYPTION_KEY", "")

        with pytest.raises(SecretError, match="ENCRYPTION_KEY is not set."):
            encrypt_secret("secret")

    def test_short_key(self, monkeypatch):
        monkeypatch.setattr(settings, "ENCRYPTION_KEY", base64.b64encode(b"short").decode("ascii"))

        with pytest.raises(SecretError, match="must be 32 bytes"):
            encrypt_secret("secret")


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = get_password_hash("Secret#123")

        assert hashed != "Secret#123"
        assert verify_password("Secret#123", hashed)
        assert not verify_password("Secret#124", hashed)

    def test_malformed_hash(self):
        assert verify_password("Secret#123", "not-a-bcrypt-hash") is False

    @pytest.mark.parametrize("password,valid", [
        ("Secret#123", True),
        ("abcdefg1!", True),
        ("Sh0rt!", False),
        ("NoDigits!!", False),
        ("NoSpecial123", False),
    ])
    def test_password_rule(self, password, valid):
        assert is_valid_password(password) is valid


class TestSessionTokens:
    def test_round_trip(self):
        payload = decode_access_token(create_access_token("user-1"))

        assert payload["sub"] == "user-1"
        assert payload["type"] == "session"

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "user-1"}, "another-secret-key-with-enough-length-for-hs256", algorithm="HS256")

        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token(token)
