"""Instruction parser — read autopay directives from a JSON file.

Two layouts are accepted:

- a batch file: ``{"autopay": {"instructions": [...]}}``
- an account template (a manifest fetched from an upstream node):
  ``{"autopay_instructions": [...]}``

Each entry names ``uid``, ``destination``, ``type_of`` and ``value``, and an
epoch range given either as ``duration_epochs`` (relative to the starting
epoch) or as an absolute ``end_epoch``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from valwizard.core.errors import AutopayParseError
from valwizard.models.autopay import InstructionType, PayInstruction

logger = logging.getLogger(__name__)

PERCENT_SCALE = 100  # percent -> basis points
COIN_SCALE = 1_000_000  # coins -> micro-units

_ACCOUNT_RE = re.compile(r"^[0-9a-f]{32}$")


def _extract_entries(document: Any, path: Path) -> list[Any]:
    if isinstance(document, dict):
        if isinstance(document.get("autopay"), dict) and "instructions" in document["autopay"]:
            entries = document["autopay"]["instructions"]
        elif "autopay_instructions" in document:
            entries = document["autopay_instructions"]
        else:
            entries = None
        if isinstance(entries, list):
            return entries
    raise AutopayParseError(
        f"{path}: expected 'autopay.instructions' or 'autopay_instructions' to be a list"
    )


def _normalize_account(value: Any, where: str) -> str:
    account = str(value).lower().removeprefix("0x")
    if not _ACCOUNT_RE.match(account):
        raise AutopayParseError(f"{where}: destination {value!r} is not a 16-byte hex account")
    return account


def _epoch_field(entry: dict[str, Any], field: str, where: str) -> int | None:
    value = entry.get(field)
    if value is None:
        return None
    if isinstance(value, bool):
        raise AutopayParseError(f"{where}: {field} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise AutopayParseError(
            f"{where}: {field} must be an integer, got {value!r}"
        ) from exc


def _scaled_value(type_of: InstructionType, value: float, where: str) -> int:
    if not math.isfinite(value):
        raise AutopayParseError(f"{where}: value {value} is not a finite number")
    if type_of.is_percent:
        if value > 100:
            raise AutopayParseError(f"{where}: percentage {value} is above 100")
        return int(round(value * PERCENT_SCALE))
    return int(round(value * COIN_SCALE))


def _parse_entry(
    entry: Any,
    where: str,
    starting_epoch: int,
    ending_epoch: int | None,
) -> PayInstruction:
    if not isinstance(entry, dict):
        raise AutopayParseError(f"{where}: expected an object, got {type(entry).__name__}")
    for field in ("uid", "destination", "type_of", "value"):
        if field not in entry:
            raise AutopayParseError(f"{where}: missing field '{field}'")

    try:
        type_of = InstructionType(entry["type_of"])
    except ValueError:
        allowed = ", ".join(t.value for t in InstructionType)
        raise AutopayParseError(
            f"{where}: unknown type_of {entry['type_of']!r} (expected one of {allowed})"
        ) from None

    duration = _epoch_field(entry, "duration_epochs", where)
    explicit_end = _epoch_field(entry, "end_epoch", where)
    if duration is not None:
        end_epoch = starting_epoch + duration
    elif explicit_end is not None:
        end_epoch = explicit_end
    elif ending_epoch is not None:
        end_epoch = ending_epoch
    else:
        raise AutopayParseError(f"{where}: needs 'duration_epochs' or 'end_epoch'")
    if end_epoch <= starting_epoch:
        raise AutopayParseError(
            f"{where}: end epoch {end_epoch} is not after starting epoch {starting_epoch}"
        )

    try:
        value = float(entry["value"])
        return PayInstruction(
            uid=entry["uid"],
            destination=_normalize_account(entry["destination"], where),
            type_of=type_of,
            value=value,
            value_move=_scaled_value(type_of, value, where),
            start_epoch=starting_epoch,
            end_epoch=end_epoch,
            duration_epochs=duration,
            note=entry.get("note"),
        )
    except (TypeError, ValueError, ValidationError) as exc:
        raise AutopayParseError(f"{where}: {exc}") from exc


def parse_pay_instructions(
    path: Path,
    starting_epoch: int | None = None,
    ending_epoch: int | None = None,
) -> list[PayInstruction]:
    """Parse *path* into an ordered list of ``PayInstruction``.

    Instructions are anchored to *starting_epoch* (0 when unset). Every
    problem with the file raises ``AutopayParseError``; an absent, empty or
    malformed file never yields an empty list. A well-formed file with an
    empty instruction list does.
    """
    path = Path(path)
    start = starting_epoch or 0
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise AutopayParseError(f"cannot read autopay file {path}: {exc}") from exc
    if not raw.strip():
        raise AutopayParseError(f"autopay file {path} is empty")
    try:
        document = json.loads(raw)
    except ValueError as exc:
        raise AutopayParseError(f"autopay file {path} is not valid JSON: {exc}") from exc

    instructions: list[PayInstruction] = []
    seen: set[int] = set()
    for position, entry in enumerate(_extract_entries(document, path)):
        inst = _parse_entry(entry, f"{path.name}[{position}]", start, ending_epoch)
        if inst.uid in seen:
            raise AutopayParseError(f"{path.name}[{position}]: duplicate uid {inst.uid}")
        seen.add(inst.uid)
        instructions.append(inst)

    logger.info("Parsed %d autopay instructions from %s", len(instructions), path)
    return instructions
