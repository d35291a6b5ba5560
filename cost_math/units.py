"""Unit conversion between the mass and volume aliases used in recipes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Tuple

logger = logging.getLogger(__name__)

ONE = Decimal("1")

# unit -> (family, size in the family's smallest unit)
_UNIT_TABLE: Mapping[str, Tuple[str, Decimal]] = {
    "kg": ("mass", Decimal("1000")),
    "kg.": ("mass", Decimal("1000")),
    "g": ("mass", ONE),
    "gr": ("mass", ONE),
    "grammi": ("mass", ONE),
    "lit": ("volume", Decimal("1000")),
    "l": ("volume", Decimal("1000")),
    "litro": ("volume", Decimal("1000")),
    "ml": ("volume", ONE),
}


@dataclass(frozen=True)
class ConversionAmbiguity:
    """No defined conversion exists; factor 1 was applied."""

    from_unit: str
    to_unit: str
    ingredient: str | None = None

    def describe(self) -> str:
        subject = f" for {self.ingredient}" if self.ingredient else ""
        return f"No conversion from {self.from_unit!r} to {self.to_unit!r}{subject}; assumed 1:1"


@dataclass(frozen=True)
class Conversion:
    factor: Decimal
    defined: bool


def normalize_unit(unit: str | None) -> str:
    return (unit or "").strip().lower()


def convert(from_unit: str | None, to_unit: str | None) -> Conversion:
    """Resolve the multiplier taking a quantity in ``from_unit`` into ``to_unit``."""

    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)
    if source == target:
        return Conversion(factor=ONE, defined=True)
    source_entry = _UNIT_TABLE.get(source)
    target_entry = _UNIT_TABLE.get(target)
    if source_entry and target_entry and source_entry[0] == target_entry[0]:
        return Conversion(factor=source_entry[1] / target_entry[1], defined=True)
    logger.debug("Undefined unit conversion %r -> %r, falling back to factor 1", from_unit, to_unit)
    return Conversion(factor=ONE, defined=False)


def factor(from_unit: str | None, to_unit: str | None) -> Decimal:
    return convert(from_unit, to_unit).factor


def is_known_unit(unit: str | None) -> bool:
    return normalize_unit(unit) in _UNIT_TABLE
