"""Command-line entrypoint for NAV document checks."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from nav_sentinel.application.analysis.use_cases import AnalyzeNavUseCase
from nav_sentinel.application.dto import DocumentAnalysis
from nav_sentinel.application.use_cases import (
    IngestDocumentUseCase,
    IngestionContext,
    attach_analysis,
    validator_from_settings,
)
from nav_sentinel.config import SETTINGS, Settings
from nav_sentinel.infrastructure.parsing.pdf import DocumentReadError
from nav_sentinel.infrastructure.reasoning.client import build_reasoning_service
from nav_sentinel.infrastructure.repositories.document_repositories import open_document
from nav_sentinel.logging_setup import configure_logging
from nav_sentinel.presentation.report import result_to_dict

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_UNREADABLE = 2


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract and validate NAV figures from a fund document")
    parser.add_argument("document", type=str, help="Path to a PDF or plain-text NAV document")
    parser.add_argument("--analyze", action="store_true", help="Run reconstruction, comparison and explanation")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser.parse_args(argv)


def print_summary(result: DocumentAnalysis) -> None:
    record = result.record
    validation = result.validation
    print("NAV Document Summary")
    print("====================")
    print(f"Document: {result.filename} ({result.document_id})")
    print(f"Fund name: {record.fund_name or '-'}")
    print(f"Date: {record.date or '-'}")
    print(f"Total assets: {record.total_assets:,}")
    print(f"Total liabilities: {record.total_liabilities:,}")
    print(f"Net assets: {record.net_assets:,}")
    print(f"Units outstanding: {record.units_outstanding:,}")
    print(f"NAV per unit: {record.nav_per_unit:.4f}")
    print(f"Official NAV: {record.official_nav:.4f}")
    print(f"Confidence: {validation.confidence}")

    if validation.has_issues():
        print("\nIssues detected:")
        for kind, message in validation.iter_issues():
            print(f"- {kind}: {message}")
    else:
        print("\nNo issues detected.")

    if result.analysis is not None:
        comparison = result.analysis.comparison
        print("\nAnalysis")
        print("--------")
        print(f"Reconstructed NAV: {result.analysis.reconstruction.reconstructed_nav:.4f}")
        print(f"Severity: {comparison.severity}")
        print(f"Requires investigation: {'yes' if comparison.requires_investigation else 'no'}")
        for anomaly in comparison.anomalies:
            print(f"- {anomaly}")
        if result.analysis.used_fallback():
            print("(reasoning service unavailable or unparseable; fallback results shown)")


def main(argv: list[str] | None = None, settings: Settings = SETTINGS) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])

    try:
        document = open_document(Path(args.document), max_bytes=settings.max_upload_bytes)
        context = IngestionContext(
            document=document,
            validator=validator_from_settings(settings),
            min_monetary_values=settings.min_monetary_values,
        )
        result = IngestDocumentUseCase(context).execute()
    except (OSError, DocumentReadError) as exc:
        print(f"Could not read {args.document}: {exc}", file=sys.stderr)
        return EXIT_UNREADABLE

    if args.analyze:
        analyzer = AnalyzeNavUseCase.from_settings(settings, build_reasoning_service(settings))
        result = attach_analysis(result, analyzer.run(result.record))

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2, ensure_ascii=False))
    else:
        print_summary(result)

    return EXIT_VALID if result.validation.is_valid else EXIT_INVALID


def run() -> int:
    configure_logging(SETTINGS, to_files=False)
    return main()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
