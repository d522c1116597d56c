"""Stage 1 — Credentials.

Collects the operator's mnemonic (prompt, or ``VALWIZARD_MNEMONIC`` in CI)
and derives the account identity from the owner key.

Outputs:
    account   — the 16-byte account address (hex).
    auth_key  — the full 32-byte authentication key (hex).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class CredentialsStage(BaseStage):
    """Stage 1: obtain the wallet and account identity."""

    completion_marker: ClassVar[str] = "Account credentials loaded"

    @property
    def stage_id(self) -> str:
        return "s1_credentials"

    @property
    def display_name(self) -> str:
        return "Credentials"

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        secret = context.settings.mnemonic
        credentials = context.collaborators.prompt_for_account(
            mnemonic=secret.get_secret_value() if secret is not None else None
        )
        context.credentials = credentials
        return {"account": credentials.account, "auth_key": credentials.auth_key}
