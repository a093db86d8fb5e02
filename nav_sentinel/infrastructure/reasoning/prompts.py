"""Prompt templates for NAV reconstruction, comparison and explanation."""
from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from nav_sentinel.domain.analysis.entities import Reconstruction
from nav_sentinel.domain.models import BreakdownItem, FinancialRecord

NAV_ANALYST_SYSTEM_PROMPT = """You are a forensic financial analyst skilled in reconstructing NAV logic and identifying subtle discrepancies in Net Asset Value calculations.

Your expertise includes:
- Analyzing fund financial statements and NAV reports
- Reconstructing NAV calculations from component data
- Identifying mathematical inconsistencies and anomalies
- Explaining financial discrepancies in clear, professional language
- Understanding various fund structures and fee arrangements

Always:
- Cross-reference extracted numbers with stated totals
- Highlight any discrepancies above {tolerance}% tolerance
- Cite exact values from the document
- Flag potential errors or missing data

Respond in JSON format when requested for structured data."""


def money(value: Decimal) -> str:
    return f"${value:,.2f}"


def quantity(value: Decimal) -> str:
    return f"{value:,}"


def per_unit(value: Decimal) -> str:
    return f"${value:.4f}"


def _breakdown_lines(items: Sequence[BreakdownItem]) -> str:
    if not items:
        return "- (none found)"
    return "\n".join(f"- {item.description}: {money(item.amount)}" for item in items)


def system_prompt(tolerance_pct: Decimal) -> str:
    return NAV_ANALYST_SYSTEM_PROMPT.format(tolerance=tolerance_pct)


def reconstruction_prompt(record: FinancialRecord, text_limit: int) -> str:
    excerpt = record.raw_text[:text_limit]
    if len(record.raw_text) > text_limit:
        excerpt += "..."
    return f"""Please reconstruct the NAV calculation from the following data:

Raw Document Text:
{excerpt}

Extracted Data:
- Total Assets: {money(record.total_assets)}
- Total Liabilities: {money(record.total_liabilities)}
- Units Outstanding: {quantity(record.units_outstanding)}

Please provide a JSON response with:
{{
  "reconstructedNav": number,
  "calculationSteps": [string],
  "confidence": number (0-100),
  "notes": string,
  "potentialIssues": [string]
}}

Focus on mathematical accuracy and identify any missing components."""


def comparison_prompt(
    record: FinancialRecord,
    reconstruction: Reconstruction,
    difference: Decimal,
    difference_pct: Decimal | None,
) -> str:
    pct_text = "n/a (no official NAV stated)" if difference_pct is None else f"{difference_pct:.4f}%"
    return f"""Please compare the official NAV calculation with our reconstructed NAV:

OFFICIAL NAV DATA:
- NAV per Unit: {per_unit(record.official_nav)}
- Total Assets: {money(record.total_assets)}
- Total Liabilities: {money(record.total_liabilities)}
- Units Outstanding: {quantity(record.units_outstanding)}

RECONSTRUCTED NAV DATA:
- NAV per Unit: {per_unit(reconstruction.reconstructed_nav)}
- Confidence: {reconstruction.confidence}%

Difference: {per_unit(difference)}
Percentage Difference: {pct_text}

Please provide a JSON response with:
{{
  "anomalies": [string],
  "severity": "low|medium|high|critical",
  "explanation": string,
  "recommendations": [string],
  "requiresInvestigation": boolean
}}

Focus on identifying potential errors, missing data, or suspicious patterns."""


def explanation_prompt(record: FinancialRecord) -> str:
    return f"""Please provide a clear, educational explanation of this NAV calculation:

Fund: {record.fund_name or "(unknown)"}
Date: {record.date or "(unknown)"}

Key Components:
- Total Assets: {money(record.total_assets)}
- Total Liabilities: {money(record.total_liabilities)}
- Net Assets: {money(record.net_assets)}
- Units Outstanding: {quantity(record.units_outstanding)}
- NAV per Unit: {per_unit(record.nav_per_unit)}

Asset Breakdown:
{_breakdown_lines(record.asset_breakdown)}

Liability Breakdown:
{_breakdown_lines(record.liability_breakdown)}

Explain:
1. What NAV represents and why it's important
2. How the calculation works
3. What each component means
4. Any notable aspects of this fund's structure

Write in clear, accessible language suitable for investors and regulators."""
