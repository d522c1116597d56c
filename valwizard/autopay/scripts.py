"""Instruction -> transaction script conversion."""

from __future__ import annotations

from collections.abc import Iterable

from valwizard.models.autopay import PayInstruction, TransactionScript

CREATE_INSTRUCTION_FUNCTION = "autopay_create_instruction"


def instruction_to_script(instruction: PayInstruction) -> TransactionScript:
    """Build the on-chain call that registers *instruction*.

    The uid is always the first argument; batch alignment checks rely on it.
    """
    return TransactionScript(
        function=CREATE_INSTRUCTION_FUNCTION,
        args=[
            instruction.uid,
            instruction.type_of.type_code,
            instruction.destination,
            instruction.end_epoch,
            instruction.value_move,
        ],
    )


def process_instructions(instructions: Iterable[PayInstruction]) -> list[TransactionScript]:
    """One script per instruction, in the same order."""
    return [instruction_to_script(inst) for inst in instructions]
