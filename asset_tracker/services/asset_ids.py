"""Human-readable asset identifiers: ``<PFX>-<NNN>[-<disambiguator>]``.

The sequence number is the live record count of the category plus one, read
at call time. Reading the count and inserting the record are separate
steps, so two concurrent creations in one category can compose the same
candidate. The unique index on ``equipment.asset_id`` rejects the second
insert, which then surfaces as ``DuplicateKeyError`` for the caller to retry.
"""

from __future__ import annotations

import time
from typing import Callable

from sqlalchemy.orm import Session

from ..crud.equipment import asset_id_exists, count_by_category

FALLBACK_PREFIX = "OTH"
PREFIX_LENGTH = 3
SEQUENCE_WIDTH = 3
DISAMBIGUATOR_DIGITS = 5


def category_prefix(category: str | None) -> str:
    cleaned = (category or "").strip()
    if not cleaned:
        return FALLBACK_PREFIX
    return cleaned[:PREFIX_LENGTH].upper()


def compose_asset_id(category: str | None, existing_count: int) -> str:
    return f"{category_prefix(category)}-{existing_count + 1:0{SEQUENCE_WIDTH}d}"


def disambiguator(clock: Callable[[], float] = time.time) -> str:
    """Last digits of the current time in milliseconds."""

    return str(int(clock() * 1000))[-DISAMBIGUATOR_DIGITS:].zfill(DISAMBIGUATOR_DIGITS)


def generate_asset_id(db: Session, category: str | None, *, clock: Callable[[], float] = time.time) -> str:
    """Next asset id for ``category``.

    Soft deletes lower the live count, so the composed id can already belong
    to another record. In that case a clock-based suffix is appended.
    """

    cleaned = (category or "").strip()
    candidate = compose_asset_id(cleaned, count_by_category(db, cleaned))
    if asset_id_exists(db, candidate):
        candidate = f"{candidate}-{disambiguator(clock)}"
    return candidate


__all__ = [
    "FALLBACK_PREFIX",
    "category_prefix",
    "compose_asset_id",
    "disambiguator",
    "generate_asset_id",
]
