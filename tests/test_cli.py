import json
from dataclasses import replace
from pathlib import Path

from nav_sentinel.cli import EXIT_INVALID, EXIT_UNREADABLE, EXIT_VALID, main
from nav_sentinel.config import load_settings

SETTINGS = load_settings(environ={})

DOCUMENT = """Fund Name: Acme Growth Fund
Valuation as of 01/15/2024
Total Assets: $1,250,000.00
Total Liabilities: $50,000.00
Units Outstanding: 10,000
Official NAV: $120.00
"""


def test_cli_prints_summary_for_valid_document(tmp_path: Path, capsys):
    path = tmp_path / "nav.txt"
    path.write_text(DOCUMENT, encoding="utf-8")

    code = main([str(path)], settings=SETTINGS)

    out = capsys.readouterr().out
    assert code == EXIT_VALID
    assert "Fund name: Acme Growth Fund" in out
    assert "Date: 01/15/2024" in out
    assert "Issues detected" in out


def test_cli_json_output_with_fallback_analysis(tmp_path: Path, capsys):
    path = tmp_path / "nav.txt"
    path.write_text("Nothing useful here", encoding="utf-8")

    code = main([str(path), "--json", "--analyze"], settings=SETTINGS)

    payload = json.loads(capsys.readouterr().out)
    assert code == EXIT_INVALID
    assert payload["validation"]["isValid"] is False
    assert payload["validation"]["confidence"] == 20
    assert payload["analysis"]["reconstruction"]["source"] == "fallback"


def test_cli_reports_unreadable_documents(tmp_path: Path, capsys):
    code = main([str(tmp_path / "missing.pdf")], settings=SETTINGS)

    assert code == EXIT_UNREADABLE
    assert "Could not read" in capsys.readouterr().err


def test_cli_enforces_upload_limit(tmp_path: Path, capsys):
    path = tmp_path / "nav.txt"
    path.write_text(DOCUMENT, encoding="utf-8")

    code = main([str(path)], settings=replace(SETTINGS, max_upload_bytes=10))

    assert code == EXIT_UNREADABLE
    assert "upload limit" in capsys.readouterr().err
