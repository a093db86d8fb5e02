"""Domain models for NAV document extraction.

These dataclasses capture the snapshot of figures read from one fund document.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

ZERO = Decimal("0")


@dataclass(frozen=True)
class BreakdownItem:
    """One named monetary line under the assets or liabilities section."""

    description: str
    amount: Decimal


@dataclass(frozen=True)
class FinancialRecord:
    """Extracted NAV figures for a single document.

    Zero is the unknown/unset sentinel for every numeric field and an empty
    string for the textual ones.
    """

    fund_name: str = ""
    date: str = ""
    total_assets: Decimal = ZERO
    total_liabilities: Decimal = ZERO
    net_assets: Decimal = ZERO
    units_outstanding: Decimal = ZERO
    nav_per_unit: Decimal = ZERO
    official_nav: Decimal = ZERO
    asset_breakdown: Sequence[BreakdownItem] = field(default_factory=tuple)
    liability_breakdown: Sequence[BreakdownItem] = field(default_factory=tuple)
    raw_text: str = ""
