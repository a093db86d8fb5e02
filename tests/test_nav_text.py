from decimal import Decimal

import pytest

from nav_sentinel.domain.models import BreakdownItem
from nav_sentinel.domain.services import validate
from nav_sentinel.infrastructure.parsing.nav_text import (
    ASSET_KEYWORDS,
    LIABILITY_KEYWORDS,
    extract,
    extract_breakdown,
    extract_date,
    extract_fund_name,
    harvest_amounts,
)

CANONICAL_TEXT = """Fund Name: Acme Growth Fund
Total Assets: $1,250,000.00
Total Liabilities: $50,000.00
Units Outstanding: 10,000
Official NAV: $120.00
"""


def test_canonical_figures_are_assigned_by_magnitude():
    record = extract(CANONICAL_TEXT)

    assert record.fund_name == "Acme Growth Fund"
    assert record.total_assets == Decimal("1250000")
    assert record.total_liabilities == Decimal("50000")
    assert record.net_assets == Decimal("1200000")
    assert record.units_outstanding == Decimal("10000")
    assert record.nav_per_unit == Decimal("120")
    assert record.official_nav == Decimal("120")
    assert record.raw_text == CANONICAL_TEXT


def test_canonical_figures_validate_without_warnings():
    record = extract(CANONICAL_TEXT)

    result = validate(record)

    assert result.warnings == ()
    # the text carries no date, so only that field is reported
    assert result.errors == ("Date not found",)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "No figures at all",
        "Total Assets: $1,000\nLiabilities: $200\nUnits: 10",
        "$0.00 and $0 and 0,000",
    ],
)
def test_fewer_than_four_amounts_leave_figures_unset(text):
    record = extract(text)

    assert record.total_assets == 0
    assert record.total_liabilities == 0
    assert record.net_assets == 0
    assert record.units_outstanding == 0
    assert record.nav_per_unit == 0
    assert record.official_nav == 0


def test_lower_threshold_uses_defaults_for_missing_figures():
    record = extract("Total assets $500", min_values=1)

    assert record.total_assets == Decimal("500")
    assert record.total_liabilities == 0
    assert record.units_outstanding == Decimal("1")
    assert record.nav_per_unit == Decimal("500")
    assert record.official_nav == Decimal("500")


def test_extra_numbers_shift_the_assignment():
    text = CANONICAL_TEXT + "Page 2 of 3\nReport year 2024\n"

    record = extract(text)

    # 2024 outranks the official NAV of 120 and takes its slot
    assert record.official_nav == Decimal("2024")


def test_label_outranks_capitalized_fund_heuristic():
    text = "Quarterly Report\nFund Name: Acme Growth Fund\nManaged alongside the Zenith Income Fund\n"

    assert extract_fund_name(text) == "Acme Growth Fund"


def test_heuristic_fund_and_trust_names():
    assert extract_fund_name("Statement for the Blue Harbor Fund, period end") == "Blue Harbor Fund"
    assert extract_fund_name("Issued by Northern Property Trust today") == "Northern Property Trust"
    assert extract_fund_name("nothing recognisable here") == ""


def test_fund_beats_trust_even_later_in_text():
    text = "Custodian: Safe Harbour Trust\nHeld for Evergreen Value Fund\n"

    assert extract_fund_name(text) == "Evergreen Value Fund"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Valuation date 01/15/2024", "01/15/2024"),
        ("As of 2024-01-15 close", "2024-01-15"),
        ("Report dated January 15, 2024.", "January 15, 2024"),
        ("As at Mar 3 2024", "Mar 3 2024"),
        ("No date here", ""),
    ],
)
def test_date_patterns(text, expected):
    assert extract_date(text) == expected


def test_slash_date_wins_over_iso_date():
    assert extract_date("Priced 2024-01-15, published 1/16/2024") == "1/16/2024"


def test_harvest_parses_symbols_and_separators():
    text = "Cash $1,234.50, bonds £2,000 and equities € 3000; ratio 0"

    assert harvest_amounts(text) == [Decimal("1234.50"), Decimal("2000"), Decimal("3000")]


def test_breakdown_collects_lines_after_section_keyword():
    text = """Statement of Net Assets
- Cash and Equivalents: $200,000.00
- Fixed Income Securities: $500,000.00
- Equity Securities: $550,000.00
Total: $1,250,000.00
- Ignored: $1.00
"""

    items = extract_breakdown(text, ASSET_KEYWORDS)

    assert items == (
        BreakdownItem("- Cash and Equivalents:", Decimal("200000.00")),
        BreakdownItem("- Fixed Income Securities:", Decimal("500000.00")),
        BreakdownItem("- Equity Securities:", Decimal("550000.00")),
        BreakdownItem("Total:", Decimal("1250000.00")),
    )


def test_breakdown_without_total_runs_to_end_of_text():
    text = "Liabilities\nAudit charges 12,000\nCustody charges 3,500\nNo amount on this line\n$900"

    items = extract_breakdown(text, LIABILITY_KEYWORDS)

    assert items == (
        BreakdownItem("Audit charges", Decimal("12000")),
        BreakdownItem("Custody charges", Decimal("3500")),
    )


def test_breakdown_keyword_lines_are_consumed_not_emitted():
    text = "Liabilities\nManagement Fees: $30,000\nAdministrative charges: $20,000\n"

    items = extract_breakdown(text, LIABILITY_KEYWORDS)

    assert items == (BreakdownItem("Administrative charges:", Decimal("20000")),)


def test_breakdown_without_section_is_empty():
    assert extract_breakdown("Cash: $100\nBonds: $200", ASSET_KEYWORDS) == ()


def test_extract_is_deterministic():
    assert extract(CANONICAL_TEXT) == extract(CANONICAL_TEXT)


@pytest.mark.parametrize("text", ["\x00\x01\x02", "$$$ ,,, ...", "1" * 500, "Fund Name:\n\n"])
def test_malformed_text_never_raises(text):
    record = extract(text)

    assert record.raw_text == text
