"""Report renderers for extracted records, validation issues and analysis."""
from __future__ import annotations

import csv
import html
import io
from decimal import Decimal
from typing import Any, Sequence

import pandas as pd

from nav_sentinel.application.dto import DocumentAnalysis
from nav_sentinel.domain.analysis.entities import FullAnalysis
from nav_sentinel.domain.models import BreakdownItem, FinancialRecord
from nav_sentinel.domain.results import ValidationResult

ISSUE_FIELDS = ["kind", "message"]
BREAKDOWN_FIELDS = ["description", "amount"]


def _number(value: Decimal) -> float:
    """JSON number for an amount.

    The dict views are for display and API payloads, so figures are rounded to
    the nearest double. Exact values stay on the `FinancialRecord` and are
    printed as text on the workbook summary sheet.
    """
    return float(value)


def breakdown_to_rows(items: Sequence[BreakdownItem]) -> list[dict[str, Any]]:
    return [{"description": item.description, "amount": _number(item.amount)} for item in items]


def record_to_dict(record: FinancialRecord, include_text: bool = True) -> dict[str, Any]:
    data: dict[str, Any] = {
        "fundName": record.fund_name,
        "date": record.date,
        "totalAssets": _number(record.total_assets),
        "totalLiabilities": _number(record.total_liabilities),
        "netAssets": _number(record.net_assets),
        "unitsOutstanding": _number(record.units_outstanding),
        "navPerUnit": _number(record.nav_per_unit),
        "officialNav": _number(record.official_nav),
        "assetBreakdown": breakdown_to_rows(record.asset_breakdown),
        "liabilityBreakdown": breakdown_to_rows(record.liability_breakdown),
    }
    if include_text:
        data["rawText"] = record.raw_text
    return data


def validation_to_dict(validation: ValidationResult) -> dict[str, Any]:
    return {
        "isValid": validation.is_valid,
        "errors": list(validation.errors),
        "warnings": list(validation.warnings),
        "confidence": validation.confidence,
    }


def analysis_to_dict(analysis: FullAnalysis) -> dict[str, Any]:
    reconstruction = analysis.reconstruction
    comparison = analysis.comparison
    explanation = analysis.explanation
    summary = analysis.summary()
    return {
        "reconstruction": {
            "reconstructedNav": _number(reconstruction.reconstructed_nav),
            "calculationSteps": list(reconstruction.calculation_steps),
            "confidence": reconstruction.confidence,
            "notes": reconstruction.notes,
            "potentialIssues": list(reconstruction.potential_issues),
            "model": reconstruction.model,
            "source": reconstruction.source,
            "timestamp": reconstruction.generated_at.isoformat(),
        },
        "comparison": {
            "anomalies": list(comparison.anomalies),
            "severity": comparison.severity,
            "explanation": comparison.explanation,
            "recommendations": list(comparison.recommendations),
            "requiresInvestigation": comparison.requires_investigation,
            "model": comparison.model,
            "source": comparison.source,
            "timestamp": comparison.generated_at.isoformat(),
        },
        "explanation": {
            "explanation": explanation.text,
            "model": explanation.model,
            "source": explanation.source,
            "timestamp": explanation.generated_at.isoformat(),
        },
        "summary": {
            "fundName": summary["fund_name"],
            "date": summary["date"],
            "officialNav": _number(analysis.official_nav),
            "reconstructedNav": _number(reconstruction.reconstructed_nav),
            "confidence": summary["confidence"],
            "severity": summary["severity"],
            "requiresInvestigation": summary["requires_investigation"],
        },
    }


def result_to_dict(result: DocumentAnalysis, include_text: bool = False) -> dict[str, Any]:
    record = record_to_dict(result.record, include_text=include_text)
    record["confidence"] = result.validation.confidence
    data: dict[str, Any] = {
        "documentId": result.document_id,
        "filename": result.filename,
        "navData": record,
        "validation": validation_to_dict(result.validation),
        "timestamp": result.received_at.isoformat(),
    }
    if result.analysis is not None:
        data["analysis"] = analysis_to_dict(result.analysis)
    return data


def issues_to_rows(validation: ValidationResult) -> list[dict[str, str]]:
    return [{"kind": kind, "message": message} for kind, message in validation.iter_issues()]


def summary_rows(record: FinancialRecord, validation: ValidationResult) -> list[dict[str, str]]:
    return [
        {"field": "Fund name", "value": record.fund_name},
        {"field": "Date", "value": record.date},
        {"field": "Total assets", "value": str(record.total_assets)},
        {"field": "Total liabilities", "value": str(record.total_liabilities)},
        {"field": "Net assets", "value": str(record.net_assets)},
        {"field": "Units outstanding", "value": str(record.units_outstanding)},
        {"field": "NAV per unit", "value": f"{record.nav_per_unit:.4f}"},
        {"field": "Official NAV", "value": f"{record.official_nav:.4f}"},
        {"field": "Valid", "value": "yes" if validation.is_valid else "no"},
        {"field": "Confidence", "value": str(validation.confidence)},
    ]


def render_csv(result: DocumentAnalysis) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=ISSUE_FIELDS)
    writer.writeheader()
    writer.writerows(issues_to_rows(result.validation))
    return buffer.getvalue().encode("utf-8")


def _html_table(rows: Sequence[dict[str, Any]], empty: str) -> str:
    if not rows:
        return f"<p>{html.escape(empty)}</p>"
    header = "".join(f"<th>{html.escape(str(col))}</th>" for col in rows[0].keys())
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{html.escape(str(value))}</td>" for value in row.values()) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"


def render_html(result: DocumentAnalysis) -> str:
    record = result.record
    sections = [
        f"<h1>{html.escape(record.fund_name or result.filename)}</h1>",
        _html_table(summary_rows(record, result.validation), "No figures extracted."),
        "<h2>Issues</h2>",
        _html_table(issues_to_rows(result.validation), "No issues detected."),
        "<h2>Asset breakdown</h2>",
        _html_table(breakdown_to_rows(record.asset_breakdown), "No asset breakdown found."),
        "<h2>Liability breakdown</h2>",
        _html_table(breakdown_to_rows(record.liability_breakdown), "No liability breakdown found."),
    ]
    if result.analysis is not None:
        comparison = result.analysis.comparison
        sections.append("<h2>Analysis</h2>")
        sections.append(
            f"<p>Severity: {html.escape(comparison.severity)} "
            f"({'investigation required' if comparison.requires_investigation else 'no investigation required'})</p>"
        )
        sections.append(_html_table([{"anomaly": item} for item in comparison.anomalies], "No anomalies reported."))
        sections.append(f"<pre>{html.escape(result.analysis.explanation.text)}</pre>")
    return "".join(sections)


def render_workbook(result: DocumentAnalysis) -> bytes:
    record = result.record
    sheets = {
        "summary": pd.DataFrame(summary_rows(record, result.validation), columns=["field", "value"]),
        "assets": pd.DataFrame(breakdown_to_rows(record.asset_breakdown), columns=BREAKDOWN_FIELDS),
        "liabilities": pd.DataFrame(breakdown_to_rows(record.liability_breakdown), columns=BREAKDOWN_FIELDS),
        "issues": pd.DataFrame(issues_to_rows(result.validation), columns=ISSUE_FIELDS),
    }
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        for sheet_name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()
