"""Credential capture — turn an operator's mnemonic into credentials."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

import typer
from pydantic import SecretStr

from valwizard.core.errors import CredentialError
from valwizard.keys.scheme import KEY_INDICES, derive_key
from valwizard.models.credentials import Credentials, Wallet

logger = logging.getLogger(__name__)

VALID_WORD_COUNTS: frozenset[int] = frozenset({12, 15, 18, 21, 24})

_WORD_RE = re.compile(r"^[a-z]+$")


def wallet_from_mnemonic(mnemonic: str) -> Wallet:
    """Validate the shape of a mnemonic and wrap it in a ``Wallet``.

    Raises ``CredentialError`` for a wrong word count or a word that is not
    plain lowercase letters.
    """
    words = mnemonic.strip().lower().split()
    if len(words) not in VALID_WORD_COUNTS:
        raise CredentialError(
            f"Mnemonic must have {sorted(VALID_WORD_COUNTS)} words, got {len(words)}"
        )
    bad = [i for i, word in enumerate(words, start=1) if not _WORD_RE.match(word)]
    if bad:
        raise CredentialError(f"Mnemonic words at positions {bad} are not valid words")
    return Wallet(mnemonic=SecretStr(" ".join(words)))


def credentials_from_wallet(wallet: Wallet) -> Credentials:
    """Derive the account identity from the wallet's owner key."""
    owner = derive_key(wallet, KEY_INDICES["owner"])
    return Credentials(auth_key=owner.auth_key, account=owner.account, wallet=wallet)


def prompt_for_account(
    prompt: Callable[..., str] | None = None,
    *,
    mnemonic: str | None = None,
) -> Credentials:
    """Collect the mnemonic and return ``Credentials``.

    Parameters
    ----------
    prompt:
        Prompt function, ``typer.prompt`` by default. Called once with
        ``hide_input=True``.
    mnemonic:
        Pre-supplied mnemonic (CI). Skips the prompt when given.
    """
    if mnemonic is None:
        ask = prompt or typer.prompt
        mnemonic = ask("Enter your mnemonic", hide_input=True)
    credentials = credentials_from_wallet(wallet_from_mnemonic(mnemonic))
    logger.info("Account derived from mnemonic: %s", credentials.account)
    return credentials
