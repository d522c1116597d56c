"""Autopay models — pay instructions, transaction scripts and signed batches."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

from valwizard.bridge.crypto_bridge import verify_data
from valwizard.core.hasher import canonical_json_bytes

# Domain separator prepended to every raw transaction before signing.
RAW_TRANSACTION_SALT = b"VALWIZARD::RawTransaction"


class InstructionType(str, Enum):
    """Autopay instruction kinds, as named in instruction files."""

    PERCENT_OF_BALANCE = "PercentOfBalance"
    PERCENT_OF_CHANGE = "PercentOfChange"
    FIXED_RECURRING = "FixedRecurring"
    FIXED_ONCE = "FixedOnce"

    @property
    def type_code(self) -> int:
        """On-chain numeric code of the instruction type."""
        return _TYPE_CODES[self]

    @property
    def is_percent(self) -> bool:
        return self in (InstructionType.PERCENT_OF_BALANCE, InstructionType.PERCENT_OF_CHANGE)


_TYPE_CODES: dict[InstructionType, int] = {
    InstructionType.PERCENT_OF_BALANCE: 0,
    InstructionType.PERCENT_OF_CHANGE: 1,
    InstructionType.FIXED_RECURRING: 2,
    InstructionType.FIXED_ONCE: 3,
}


class PayInstruction(BaseModel):
    """A single parsed autopay directive, scoped to an epoch range."""

    model_config = ConfigDict(frozen=True)

    uid: int = Field(ge=0)
    destination: str
    type_of: InstructionType
    value: float = Field(gt=0)
    value_move: int  # basis points for percent types, micro-units for fixed
    start_epoch: int = Field(ge=0)
    end_epoch: int
    duration_epochs: int | None = None
    note: str | None = None


class TransactionScript(BaseModel):
    """An executable call into the on-chain autopay module."""

    model_config = ConfigDict(frozen=True)

    module: str = "AutoPay"
    function: str
    args: list[int | str]


class TxType(str, Enum):
    """Gas profile of a transaction."""

    CRITICAL = "critical"
    MGMT = "mgmt"
    MINER = "miner"
    CHEAP = "cheap"


class TxParams(BaseModel):
    """Everything needed to sign and submit transactions for one sender."""

    model_config = ConfigDict(frozen=True)

    sender: str
    auth_key: str
    public_key: str
    signing_key: SecretStr
    url: str
    chain_id: int
    max_gas_unit_for_tx: int
    coin_price_per_unit: int
    user_tx_timeout: int  # seconds until expiration
    waypoint: str | None = None
    is_swarm: bool = False


class RawTransaction(BaseModel):
    """The signed-over body of a transaction."""

    model_config = ConfigDict(frozen=True)

    sender: str
    sequence_number: int = Field(ge=0)
    script: TransactionScript
    max_gas_amount: int
    gas_unit_price: int
    expiration_timestamp_secs: int
    chain_id: int

    def signing_bytes(self) -> bytes:
        return RAW_TRANSACTION_SALT + canonical_json_bytes(self.model_dump(mode="json"))


class SignedTransaction(BaseModel):
    """A raw transaction plus its Ed25519 signature."""

    model_config = ConfigDict(frozen=True)

    raw_txn: RawTransaction
    public_key: str
    signature: str

    def verify(self) -> bool:
        return verify_data(self.raw_txn.signing_bytes(), self.signature, self.public_key)


class SignedPayoutBatch(BaseModel):
    """Parsed instructions with their signed transactions, index-aligned.

    ``signed`` is ``None`` in ceremony mode, where only the instruction list
    is needed for inclusion in genesis.
    """

    model_config = ConfigDict(frozen=True)

    instructions: list[PayInstruction] = []
    signed: list[SignedTransaction] | None = None

    @model_validator(mode="after")
    def _check_alignment(self) -> SignedPayoutBatch:
        if self.signed is None:
            return self
        if len(self.signed) != len(self.instructions):
            raise ValueError(
                f"{len(self.signed)} signed transactions for "
                f"{len(self.instructions)} instructions"
            )
        for index, (inst, txn) in enumerate(zip(self.instructions, self.signed)):
            args = txn.raw_txn.script.args
            if not args or args[0] != inst.uid:
                raise ValueError(
                    f"Signed transaction {index} does not carry instruction uid {inst.uid}"
                )
        return self

    @property
    def is_signed(self) -> bool:
        return self.signed is not None
