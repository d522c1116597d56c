"""Credential models — wallet and the account identity derived from it."""

from __future__ import annotations

import hashlib
import unicodedata

from pydantic import BaseModel, ConfigDict, SecretStr

# BIP-39 seed stretching parameters.
SEED_ITERATIONS = 2048
SEED_SALT_PREFIX = "mnemonic"


class Wallet(BaseModel):
    """Mnemonic-backed key material.

    The mnemonic is held as a secret so it never shows up in reprs, logs or
    ``model_dump`` output.
    """

    model_config = ConfigDict(frozen=True)

    mnemonic: SecretStr
    passphrase: SecretStr = SecretStr("")

    @property
    def words(self) -> list[str]:
        return self.mnemonic.get_secret_value().split()

    def seed(self) -> bytes:
        """Stretch the mnemonic into a 64-byte seed (BIP-39)."""
        phrase = unicodedata.normalize("NFKD", " ".join(self.words))
        salt = unicodedata.normalize(
            "NFKD", SEED_SALT_PREFIX + self.passphrase.get_secret_value()
        )
        return hashlib.pbkdf2_hmac(
            "sha512", phrase.encode("utf-8"), salt.encode("utf-8"), SEED_ITERATIONS
        )


class Credentials(BaseModel):
    """Authentication key, account address and wallet for one operator."""

    model_config = ConfigDict(frozen=True)

    auth_key: str  # 64 hex chars
    account: str  # 32 hex chars, the trailing half of auth_key
    wallet: Wallet
