"""Domain services implementing record validation rules."""
from __future__ import annotations

from decimal import Context, Decimal

from .models import FinancialRecord
from .results import ValidationResult

DEFAULT_TOLERANCE_PCT = Decimal("0.01")
DEFAULT_ERROR_PENALTY = 20
DEFAULT_WARNING_PENALTY = 5


class NavRecordValidator:
    """Checks required fields and NAV consistency of an extracted record."""

    def __init__(
        self,
        tolerance_pct: Decimal | None = None,
        error_penalty: int = DEFAULT_ERROR_PENALTY,
        warning_penalty: int = DEFAULT_WARNING_PENALTY,
        decimal_context: Context | None = None,
    ) -> None:
        if tolerance_pct is None:
            tolerance_pct = DEFAULT_TOLERANCE_PCT
        self._tolerance_pct = tolerance_pct
        self._error_penalty = error_penalty
        self._warning_penalty = warning_penalty
        self._context = decimal_context or Context(prec=28)

    @property
    def tolerance_pct(self) -> Decimal:
        return self._tolerance_pct

    def validate(self, record: FinancialRecord) -> ValidationResult:
        errors = self._required_field_errors(record)
        warnings: list[str] = []

        discrepancy = self.discrepancy_pct(record)
        if discrepancy is not None and discrepancy > self._tolerance_pct:
            warnings.append(f"NAV calculation discrepancy: {discrepancy:.4f}%")

        confidence = 100 - self._error_penalty * len(errors) - self._warning_penalty * len(warnings)
        return ValidationResult(
            is_valid=not errors,
            confidence=max(0, confidence),
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    def calculated_nav(self, record: FinancialRecord) -> Decimal | None:
        if record.units_outstanding <= 0:
            return None
        return self._context.divide(record.net_assets, record.units_outstanding)

    def discrepancy_pct(self, record: FinancialRecord) -> Decimal | None:
        """Absolute percentage gap between the computed and the official NAV.

        None when either side is undefined (no units, or no official figure).
        """
        calculated = self.calculated_nav(record)
        if calculated is None or record.official_nav <= 0:
            return None
        difference = abs(calculated - record.official_nav)
        return self._context.multiply(self._context.divide(difference, record.official_nav), Decimal(100))

    @staticmethod
    def _required_field_errors(record: FinancialRecord) -> list[str]:
        errors: list[str] = []
        if not record.fund_name:
            errors.append("Fund name not found")
        if not record.date:
            errors.append("Date not found")
        if record.total_assets <= 0:
            errors.append("Total assets must be greater than 0")
        if record.units_outstanding <= 0:
            errors.append("Units outstanding must be greater than 0")
        return errors


_DEFAULT_VALIDATOR = NavRecordValidator()


def validate(record: FinancialRecord) -> ValidationResult:
    return _DEFAULT_VALIDATOR.validate(record)
