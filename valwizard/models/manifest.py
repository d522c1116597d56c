"""Block zero proof and account manifest models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from valwizard.models.autopay import PayInstruction, SignedTransaction

ACCOUNT_MANIFEST_FILE_NAME = "account.json"
BLOCK_ZERO_FILE_NAME = "block_0.json"


class Block(BaseModel):
    """A mined proof. Height 0 is the block zero every validator needs."""

    model_config = ConfigDict(frozen=True)

    height: int = Field(ge=0)
    elapsed_secs: float = 0.0
    preimage: str  # hex
    proof: str  # hex
    difficulty: int = Field(gt=0)


class AccountManifest(BaseModel):
    """The terminal artifact handed to the network's bootstrap process.

    Holds public material only: key scheme public keys, identities, the node
    address, the mined proof and the autopay batch.
    """

    model_config = ConfigDict(frozen=True)

    block_zero: Block | None = None
    ow_human_name: str  # owner account
    op_address: str  # operator account
    op_auth_key_prefix: str
    op_consensus_pubkey: str
    op_validator_network_addresses: str
    op_fullnode_network_addresses: str
    op_human_name: str
    node_ip: str
    chain_id: int
    autopay_instructions: list[PayInstruction] | None = None
    autopay_signed: list[SignedTransaction] | None = None
