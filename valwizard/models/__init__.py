"""valwizard data models — all Pydantic v2, all frozen (immutable)."""

from valwizard.models.autopay import (
    InstructionType,
    PayInstruction,
    RawTransaction,
    SignedPayoutBatch,
    SignedTransaction,
    TransactionScript,
    TxParams,
    TxType,
)
from valwizard.models.credentials import Credentials, Wallet
from valwizard.models.manifest import AccountManifest, Block
from valwizard.models.node_config import ChainInfo, NodeConfig, Profile, Workspace
from valwizard.models.request import GenesisSource, GenesisSourceKind, OnboardingRequest
from valwizard.models.stages import VALID_TRANSITIONS, StageState, StageTransition

__all__ = [
    # request
    "OnboardingRequest",
    "GenesisSource",
    "GenesisSourceKind",
    # credentials
    "Wallet",
    "Credentials",
    # node config
    "Workspace",
    "ChainInfo",
    "Profile",
    "NodeConfig",
    # autopay
    "InstructionType",
    "PayInstruction",
    "TransactionScript",
    "TxType",
    "TxParams",
    "RawTransaction",
    "SignedTransaction",
    "SignedPayoutBatch",
    # manifest
    "Block",
    "AccountManifest",
    # stages
    "StageState",
    "StageTransition",
    "VALID_TRANSITIONS",
]
