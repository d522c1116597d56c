"""Crypto bridge — Ed25519 signing and deterministic key derivation.

All signing goes through PyNaCl (libsodium). Keys are handled as hex strings
at this boundary so models can carry them without importing nacl types.

Derivation follows SLIP-10 for ed25519: the wallet seed is turned into a
master key and chain code, and every child is a hardened derivation at a
fixed index. The same mnemonic therefore always yields the same key scheme.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

import nacl.signing
from nacl.exceptions import BadSignatureError

logger = logging.getLogger(__name__)

SLIP10_CURVE_KEY = b"ed25519 seed"
HARDENED_OFFSET = 0x80000000

# Ed25519 single-signature scheme byte appended before hashing an auth key.
ED25519_SCHEME = b"\x00"


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def master_key(seed: bytes) -> tuple[bytes, bytes]:
    """Return ``(key, chain_code)`` for a wallet seed."""
    digest = hmac.new(SLIP10_CURVE_KEY, seed, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def derive_child_seed(seed: bytes, index: int) -> bytes:
    """Derive the 32-byte Ed25519 seed of hardened child *index*."""
    if index < 0 or index >= HARDENED_OFFSET:
        raise ValueError(f"Child index out of range: {index}")
    key, chain_code = master_key(seed)
    data = b"\x00" + key + (HARDENED_OFFSET + index).to_bytes(4, "big")
    return hmac.new(chain_code, data, hashlib.sha512).digest()[:32]


def keypair_from_seed(child_seed: bytes) -> tuple[str, str]:
    """Return ``(private_key_hex, public_key_hex)`` for a 32-byte seed."""
    sk = nacl.signing.SigningKey(child_seed)
    return sk.encode().hex(), sk.verify_key.encode().hex()


def auth_key_for(public_key: str) -> str:
    """SHA3-256 authentication key of an Ed25519 public key (hex)."""
    return hashlib.sha3_256(bytes.fromhex(public_key) + ED25519_SCHEME).hexdigest()


def account_for(auth_key: str) -> str:
    """Account address: the trailing 16 bytes of the authentication key."""
    return auth_key[32:]


# ---------------------------------------------------------------------------
# Signing
# ---------------------------------------------------------------------------


def sign_data(data: bytes, private_key: str) -> str:
    """Sign *data* with *private_key* and return the hex-encoded signature.

    Parameters
    ----------
    data:
        Raw bytes to sign (typically the signing bytes of a raw transaction).
    private_key:
        Hex-encoded 32-byte Ed25519 seed.

    Returns
    -------
    str
        Hex-encoded signature (128 hex chars = 64 bytes).
    """
    sk = nacl.signing.SigningKey(bytes.fromhex(private_key))
    return sk.sign(data).signature.hex()


def verify_data(data: bytes, signature: str, public_key: str) -> bool:
    """Verify that *signature* is valid for *data* under *public_key*.

    Returns ``False`` for an empty or malformed signature or key as well as
    for a cryptographic mismatch.
    """
    if not signature:
        return False
    try:
        vk = nacl.signing.VerifyKey(bytes.fromhex(public_key))
        vk.verify(data, bytes.fromhex(signature))
    except (BadSignatureError, ValueError, TypeError):
        return False
    return True


def key_fingerprint(public_key: str) -> str:
    """First 16 hex characters of SHA-256(public_key), for log lines."""
    if not public_key:
        return ""
    return hashlib.sha256(public_key.encode("utf-8")).hexdigest()[:16]
