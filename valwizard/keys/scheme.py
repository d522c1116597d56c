"""Key scheme — the six validator keys derived from one wallet.

Index layout (hardened children of the wallet seed):

    0 owner            — the account key; signs autopay transactions
    1 operator         — operator account, namespace of the key store
    2 validator_network
    3 fullnode_network
    4 consensus
    5 executor
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, SecretStr

from valwizard.bridge.crypto_bridge import (
    account_for,
    auth_key_for,
    derive_child_seed,
    keypair_from_seed,
)
from valwizard.models.credentials import Wallet

KEY_INDICES: dict[str, int] = {
    "owner": 0,
    "operator": 1,
    "validator_network": 2,
    "fullnode_network": 3,
    "consensus": 4,
    "executor": 5,
}


class DerivedKey(BaseModel):
    """One Ed25519 key pair; the private half stays a secret."""

    model_config = ConfigDict(frozen=True)

    index: int
    private_key: SecretStr
    public_key: str

    @property
    def auth_key(self) -> str:
        return auth_key_for(self.public_key)

    @property
    def account(self) -> str:
        return account_for(self.auth_key)


def derive_key(wallet: Wallet, index: int) -> DerivedKey:
    """Derive the key at *index* from the wallet seed."""
    private_hex, public_hex = keypair_from_seed(derive_child_seed(wallet.seed(), index))
    return DerivedKey(index=index, private_key=SecretStr(private_hex), public_key=public_hex)


class KeyScheme(BaseModel):
    """Deterministic key bundle for a validator."""

    model_config = ConfigDict(frozen=True)

    owner: DerivedKey
    operator: DerivedKey
    validator_network: DerivedKey
    fullnode_network: DerivedKey
    consensus: DerivedKey
    executor: DerivedKey

    @classmethod
    def from_wallet(cls, wallet: Wallet) -> KeyScheme:
        return cls(**{name: derive_key(wallet, index) for name, index in KEY_INDICES.items()})
