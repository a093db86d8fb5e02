"""Text extractor producing a FinancialRecord from NAV document text.

Figures are picked by magnitude: the largest amount is read as total assets,
then liabilities, units outstanding and the stated NAV. This only holds for
documents that print exactly those four figures; any extra number (page
numbers, years, percentages, line items) shifts the assignment.
"""
from __future__ import annotations

import re
from decimal import Context, Decimal, InvalidOperation
from typing import Iterable, Sequence

from nav_sentinel.domain.models import ZERO, BreakdownItem, FinancialRecord

MIN_MONETARY_VALUES = 4

_CAPITALIZED_RUN = r"(?:[A-Z][\w&'.-]*[ \t]+)+"

FUND_NAME_PATTERNS = (
    re.compile(r"fund[ \t]+name[:\s]+([^\n\r]+)", re.IGNORECASE),
    re.compile(rf"\b({_CAPITALIZED_RUN}(?:Fund|FUND))\b"),
    re.compile(rf"\b({_CAPITALIZED_RUN}(?:Trust|TRUST))\b"),
)

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
    r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

DATE_PATTERNS = (
    re.compile(r"(\d{1,2}/\d{1,2}/\d{4})"),
    re.compile(r"(\d{4}-\d{2}-\d{2})"),
    re.compile(rf"\b({_MONTHS}\.?[ \t]+\d{{1,2}},?[ \t]+\d{{4}})", re.IGNORECASE),
)

MONEY_PATTERN = re.compile(r"[$£€]?\s*(\d[\d,]*\.?\d*)")

ASSET_KEYWORDS = ("assets", "investments", "holdings")
LIABILITY_KEYWORDS = ("liabilities", "expenses", "fees")
SECTION_END_KEYWORDS = ("total", "summary")

_CONTEXT = Context(prec=28)


def _first_match(patterns: Iterable[re.Pattern[str]], text: str) -> str:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return ""


def extract_fund_name(text: str) -> str:
    return _first_match(FUND_NAME_PATTERNS, text)


def extract_date(text: str) -> str:
    return _first_match(DATE_PATTERNS, text)


def parse_amount(token: str) -> Decimal | None:
    try:
        value = Decimal(token.replace(",", ""))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def harvest_amounts(text: str) -> list[Decimal]:
    """Every positive monetary token in document order."""
    amounts: list[Decimal] = []
    for match in MONEY_PATTERN.finditer(text):
        value = parse_amount(match.group(1))
        if value is not None and value > 0:
            amounts.append(value)
    return amounts


def extract_breakdown(text: str, keywords: Sequence[str]) -> tuple[BreakdownItem, ...]:
    items: list[BreakdownItem] = []
    in_section = False
    for line in text.splitlines():
        lower_line = line.lower()
        if any(keyword in lower_line for keyword in keywords):
            in_section = True
            continue
        if not in_section:
            continue

        match = MONEY_PATTERN.search(line)
        if match:
            description = (line[: match.start()] + line[match.end() :]).strip()
            amount = parse_amount(match.group(1))
            if description and amount is not None:
                items.append(BreakdownItem(description=description, amount=amount))

        # the scan ends at the first total/summary line, trailing items included
        if any(keyword in lower_line for keyword in SECTION_END_KEYWORDS):
            break
    return tuple(items)


def extract(raw_text: str, min_values: int = MIN_MONETARY_VALUES) -> FinancialRecord:
    """Build a best-effort record from document text; never raises on content."""
    amounts = sorted(harvest_amounts(raw_text), reverse=True)

    figures: dict[str, Decimal] = {}
    if amounts and len(amounts) >= min_values:
        total_assets = amounts[0]
        total_liabilities = amounts[1] if len(amounts) > 1 else ZERO
        net_assets = total_assets - total_liabilities
        units_outstanding = amounts[2] if len(amounts) > 2 else Decimal("1")
        nav_per_unit = _CONTEXT.divide(net_assets, units_outstanding)
        official_nav = amounts[3] if len(amounts) > 3 else nav_per_unit
        figures = {
            "total_assets": total_assets,
            "total_liabilities": total_liabilities,
            "net_assets": net_assets,
            "units_outstanding": units_outstanding,
            "nav_per_unit": nav_per_unit,
            "official_nav": official_nav,
        }

    return FinancialRecord(
        fund_name=extract_fund_name(raw_text),
        date=extract_date(raw_text),
        asset_breakdown=extract_breakdown(raw_text, ASSET_KEYWORDS),
        liability_breakdown=extract_breakdown(raw_text, LIABILITY_KEYWORDS),
        raw_text=raw_text,
        **figures,
    )
