from dataclasses import replace
from decimal import Decimal

import pytest

from nav_sentinel.domain.models import FinancialRecord
from nav_sentinel.domain.services import NavRecordValidator, validate


def make_record(official_nav: str = "120", **overrides) -> FinancialRecord:
    record = FinancialRecord(
        fund_name="Acme Growth Fund",
        date="2024-01-15",
        total_assets=Decimal("1250000"),
        total_liabilities=Decimal("50000"),
        net_assets=Decimal("1200000"),
        units_outstanding=Decimal("10000"),
        nav_per_unit=Decimal("120"),
        official_nav=Decimal(official_nav),
    )
    return replace(record, **overrides)


def test_consistent_record_is_fully_confident():
    result = validate(make_record())

    assert result.is_valid
    assert result.errors == ()
    assert result.warnings == ()
    assert result.confidence == 100
    assert not result.has_issues()


def test_official_nav_discrepancy_warns():
    result = validate(make_record(official_nav="120.5"))

    assert result.is_valid
    assert result.warnings == ("NAV calculation discrepancy: 0.4149%",)
    assert result.confidence == 95


def test_discrepancy_within_tolerance_is_ignored():
    # 0.01% of 120 is 0.012
    result = validate(make_record(official_nav="120.01"))

    assert result.warnings == ()
    assert result.confidence == 100


def test_empty_record_reports_every_required_field():
    result = validate(FinancialRecord())

    assert not result.is_valid
    assert result.errors == (
        "Fund name not found",
        "Date not found",
        "Total assets must be greater than 0",
        "Units outstanding must be greater than 0",
    )
    assert result.warnings == ()
    assert result.confidence == 20


def test_errors_and_warnings_both_reduce_confidence():
    record = make_record(official_nav="150", fund_name="", date="")

    result = validate(record)

    assert not result.is_valid
    assert len(result.errors) == 2
    assert len(result.warnings) == 1
    assert result.confidence == 100 - 2 * 20 - 5


def test_confidence_never_drops_below_zero():
    validator = NavRecordValidator(error_penalty=40, warning_penalty=30)

    result = validator.validate(make_record(official_nav="999", fund_name="", date="", total_assets=Decimal("0")))

    assert result.confidence == 0
    assert list(result.iter_issues())[0] == ("error", "Fund name not found")


def test_missing_official_nav_skips_consistency_check():
    validator = NavRecordValidator()
    record = make_record(official_nav="0")

    assert validator.discrepancy_pct(record) is None
    assert validator.validate(record).warnings == ()


@pytest.mark.parametrize("units", ["0", "-5"])
def test_non_positive_units_is_an_error_not_a_crash(units):
    result = validate(make_record(units_outstanding=Decimal(units)))

    assert "Units outstanding must be greater than 0" in result.errors
    assert result.warnings == ()
    assert result.confidence == 80


def test_validity_ignores_warnings():
    result = NavRecordValidator(tolerance_pct=Decimal("0")).validate(make_record(official_nav="120.0001"))

    assert result.is_valid
    assert len(result.warnings) == 1
