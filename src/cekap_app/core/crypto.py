"""AES-256 helpers for encrypting identity-card numbers at rest."""

from __future__ import annotations

import base64
import hashlib
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives.ciphers.aead import AESGCM


NONCE_SIZE = 12
KEY_SIZE = 32


@dataclass
class CryptoService:
    """Encrypts and decrypts text using AES-256-GCM."""

    key: bytes

    @classmethod
    def from_base64_key(cls, key_b64: str) -> "CryptoService":
        key = base64.urlsafe_b64decode(key_b64.encode("utf-8"))
        if len(key) != KEY_SIZE:
            raise RuntimeError("Encryption key must decode to 32 bytes for AES-256.")
        return cls(key=key)

    @staticmethod
    def generate_base64_key() -> str:
        """Generate a base64-encoded 32-byte key."""
        return base64.urlsafe_b64encode(os.urandom(KEY_SIZE)).decode("utf-8")

    def encrypt_text(self, plain_text: str) -> bytes:
        """Encrypt UTF-8 text and return nonce+ciphertext bytes."""
        nonce = os.urandom(NONCE_SIZE)
        cipher_text = AESGCM(self.key).encrypt(nonce, plain_text.encode("utf-8"), None)
        return nonce + cipher_text

    def decrypt_text(self, encrypted: bytes) -> str:
        """Decrypt nonce+ciphertext bytes into UTF-8 text."""
        nonce = encrypted[:NONCE_SIZE]
        plain = AESGCM(self.key).decrypt(nonce, encrypted[NONCE_SIZE:], None)
        return plain.decode("utf-8")

    def lookup_hash(self, value: str) -> str:
        """Keyed digest used for exact-match lookups on encrypted columns."""
        return hashlib.sha256(self.key + value.encode("utf-8")).hexdigest()


def mask_ic(ic: str) -> str:
    """Mask an IC number like 900101-10-1234 => 900101-**-**34."""
    if len(ic) <= 4:
        return "*" * len(ic)
    head, sep, _ = ic.partition("-")
    if not sep:
        return "*" * (len(ic) - 4) + ic[-4:]
    return f"{head}-**-**{ic[-2:]}"


def mask_phone(phone: str) -> str:
    """Mask a phone number except the last 4 digits."""
    if len(phone) <= 4:
        return "*" * len(phone)
    return "*" * (len(phone) - 4) + phone[-4:]
