"""Streamlit front-end for the NAV document pipeline."""
from __future__ import annotations

from typing import Sequence

import pandas as pd
import streamlit as st

from nav_sentinel import AnalyzeNavUseCase, IngestDocumentUseCase, IngestionContext, open_document
from nav_sentinel.application.archive.use_cases import ArchiveDocumentUseCase, DeleteDocumentUseCase
from nav_sentinel.application.dto import DocumentAnalysis
from nav_sentinel.application.use_cases import attach_analysis, validator_from_settings
from nav_sentinel.config import SETTINGS
from nav_sentinel.domain.archive.entities import ArchiveFile
from nav_sentinel.domain.models import BreakdownItem
from nav_sentinel.infrastructure.archive.file_repository import FileSystemArchiveRepository
from nav_sentinel.infrastructure.parsing.pdf import DocumentReadError
from nav_sentinel.infrastructure.reasoning.client import build_reasoning_service
from nav_sentinel.logging_setup import configure_logging
from nav_sentinel.presentation.report import (
    breakdown_to_rows,
    issues_to_rows,
    render_csv,
    render_html,
    render_workbook,
)

configure_logging(SETTINGS)

st.set_page_config(page_title="NAV Sentinel", layout="wide")
st.title("NAV Document Checker")


@st.cache_resource
def get_analyzer() -> AnalyzeNavUseCase:
    return AnalyzeNavUseCase.from_settings(SETTINGS, build_reasoning_service(SETTINGS))


def get_archive() -> FileSystemArchiveRepository:
    return FileSystemArchiveRepository(SETTINGS.history_dir)


def breakdown_dataframe(items: Sequence[BreakdownItem]) -> pd.DataFrame:
    return pd.DataFrame(breakdown_to_rows(items), columns=["description", "amount"])


def run_ingestion(data: bytes, filename: str) -> DocumentAnalysis:
    document = open_document(data, name=filename, max_bytes=SETTINGS.max_upload_bytes)
    context = IngestionContext(
        document=document,
        validator=validator_from_settings(SETTINGS),
        min_monetary_values=SETTINGS.min_monetary_values,
    )
    return IngestDocumentUseCase(context).execute()


if "view" not in st.session_state:
    st.session_state["view"] = "upload"
if "result" not in st.session_state:
    st.session_state["result"] = None


if st.session_state["view"] == "upload":
    uploaded = st.file_uploader("Upload NAV document", type=["pdf", "txt"])
    pasted = st.text_area("...or paste document text", height=200)

    if not get_analyzer().reasoning_available:
        st.info("ANTHROPIC_API_KEY is not set; AI analysis will show fallback results derived from the extracted figures.")

    run_btn = st.button("Extract and Validate", disabled=not (uploaded or pasted.strip()))
    if run_btn:
        if uploaded is not None:
            data, filename = uploaded.read(), uploaded.name
        else:
            data, filename = pasted.encode("utf-8"), "pasted.txt"
        try:
            with st.spinner("Parsing document..."):
                result = run_ingestion(data, filename)
        except DocumentReadError as exc:
            st.error(str(exc))
        else:
            st.session_state["result"] = {"analysis": result, "document": ArchiveFile(name=filename, content=data)}
            st.session_state["view"] = "results"
            st.rerun()

    if SETTINGS.enable_history:
        with st.expander("History"):
            archive = get_archive()
            runs = archive.list_runs()
            st.caption(f"{len(runs)} archived document(s)")
            for run_id in runs:
                manifest = archive.load_manifest(run_id) or {}
                metadata = manifest.get("metadata", {})
                col1, col2 = st.columns([4, 1])
                with col1:
                    st.write(f"{run_id}: {metadata.get('fund_name') or metadata.get('filename', '')}")
                with col2:
                    if st.button("Delete", key=f"delete_{run_id}"):
                        DeleteDocumentUseCase(repository=archive).execute(run_id)
                        st.rerun()
else:
    if st.button("← Back", key="back_to_upload"):
        st.session_state["view"] = "upload"
        st.session_state["result"] = None
        st.rerun()

    state = st.session_state.get("result")
    if not state:
        st.info("No results available. Upload a document first.")
    else:
        result: DocumentAnalysis = state["analysis"]
        record = result.record
        validation = result.validation

        st.subheader(record.fund_name or result.filename)
        st.caption(f"Document {result.document_id} · {record.date or 'date not found'}")

        cols = st.columns(4)
        cols[0].metric("Total assets", f"{record.total_assets:,.2f}")
        cols[1].metric("Total liabilities", f"{record.total_liabilities:,.2f}")
        cols[2].metric("NAV per unit", f"{record.nav_per_unit:.4f}")
        cols[3].metric("Official NAV", f"{record.official_nav:.4f}")
        st.metric("Confidence", validation.confidence)

        for message in validation.errors:
            st.error(message)
        for message in validation.warnings:
            st.warning(message)
        if not validation.has_issues():
            st.success("No issues detected.")

        if st.button("Run AI Analysis"):
            with st.spinner("Analysing..."):
                result = attach_analysis(result, get_analyzer().run(record))
            state["analysis"] = result

        tabs = st.tabs(["Assets", "Liabilities", "Issues", "Analysis", "Raw text"])
        with tabs[0]:
            st.dataframe(breakdown_dataframe(record.asset_breakdown))
        with tabs[1]:
            st.dataframe(breakdown_dataframe(record.liability_breakdown))
        with tabs[2]:
            st.dataframe(pd.DataFrame(issues_to_rows(validation), columns=["kind", "message"]))
        with tabs[3]:
            analysis = result.analysis
            if analysis is None:
                st.info("Run the AI analysis to reconstruct and compare the NAV.")
            else:
                if analysis.used_fallback():
                    st.warning("Some steps used fallback results; the reasoning service was unavailable or its reply could not be parsed.")
                st.metric("Reconstructed NAV", f"{analysis.reconstruction.reconstructed_nav:.4f}")
                st.write(f"Severity: **{analysis.comparison.severity}**")
                for anomaly in analysis.comparison.anomalies:
                    st.write(f"- {anomaly}")
                for step in analysis.reconstruction.calculation_steps:
                    st.write(f"1. {step}")
                st.markdown(analysis.explanation.text)
        with tabs[4]:
            st.text(record.raw_text)

        st.download_button("Download issues CSV", data=render_csv(result), file_name="nav_issues.csv", mime="text/csv")
        st.download_button(
            "Download report HTML",
            data=render_html(result).encode("utf-8"),
            file_name="nav_report.html",
            mime="text/html",
        )
        st.download_button(
            "Download workbook",
            data=render_workbook(result),
            file_name="nav_report.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

        if SETTINGS.enable_history and st.button("Save to history"):
            receipt = ArchiveDocumentUseCase(repository=get_archive()).execute(result, state["document"])
            st.success(f"Saved to {receipt.location}")
