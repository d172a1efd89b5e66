"""Emissions Dashboard - Streamlit UI.

Run locally:
    streamlit run streamlit_app.py --server.port 8501

Access: http://localhost:8501
"""

import html
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is importable
sys.path.insert(0, str(Path(__file__).resolve().parent))

import streamlit as st

from emissions_dashboard.domain.approval import ApprovalLevel
from emissions_dashboard.domain.data_points import PREFERRED_COLUMN_ORDER
from emissions_dashboard.engines.data_reconciler import order_columns
from emissions_dashboard.engines.question_deriver import derive_question
from emissions_dashboard.errors import DashboardError
from emissions_dashboard.facade import DashboardFacade
from emissions_dashboard.schemas.emission import EmissionRecord

# ── Setup ────────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Emissions Dashboard",
    page_icon="🌍",
    layout="wide",
)

st.markdown("""
<style>
    .block-container {
        padding-top: 2rem;
        max-width: 1400px;
    }

    /* Approval dot next to each value */
    .approval-dot {
        display: inline-block;
        width: 10px;
        height: 10px;
        border-radius: 50%;
        margin-left: 6px;
    }
    .approval-high { background: #10b981; }
    .approval-medium { background: #f59e0b; }
    .approval-low { background: #ef4444; }
    .approval-no_votes { background: #94a3b8; }

    h1 { color: #0f172a; font-weight: 700; }
    h3 { color: #334155; font-weight: 600; }
</style>
""", unsafe_allow_html=True)

APPROVAL_LABELS = {
    ApprovalLevel.HIGH: "High approval",
    ApprovalLevel.MEDIUM: "Mixed approval",
    ApprovalLevel.LOW: "Low approval",
    ApprovalLevel.NO_VOTES: "No feedback yet",
}


@st.cache_resource
def get_facade() -> DashboardFacade:
    """Cache the facade (engine, session factory, analysis client), not a session.

    Each facade call opens and closes its own session, so every user and
    script run gets a session of its own.
    """
    return DashboardFacade()


def approval_dot_html(record: EmissionRecord) -> str:
    level = record.approval_level
    if record.approval_rating is None:
        tooltip = APPROVAL_LABELS[level]
    else:
        votes = record.thumbs_up_count + record.thumbs_down_count
        tooltip = f"{record.approval_rating}% approval ({votes} votes)"
    return (
        f'<span class="approval-dot approval-{level.value}" '
        f'title="{html.escape(tooltip, quote=True)}"></span>'
    )


def page_link(document_name: Optional[str], page_number: Optional[int]) -> Optional[str]:
    """Link that opens a PDF at the cited page."""
    if not document_name:
        return None
    if page_number:
        return f"{document_name}#page={page_number}"
    return document_name


def show_error(exc: DashboardError) -> None:
    if exc.http_status >= 500:
        st.error(exc.message)
    else:
        st.warning(exc.message)


# ── Details Dialog ───────────────────────────────────────────────────────


@st.dialog("Data Point Details", width="large")
def show_details(record_id: int):
    """Value, explanation, discrepancy, sources and evidence of one cell."""
    try:
        record = get_facade().get_record(record_id)
    except DashboardError as exc:
        show_error(exc)
        return

    st.markdown(f"## {record.company_name} · {record.year}")
    st.caption(record.data_point_type)
    st.metric("Value", record.final_answer or "N/A")

    if record.approval_rating is None:
        st.caption("No feedback yet")
    else:
        st.progress(
            record.approval_rating / 100,
            text=f"{record.approval_rating}% approval "
            f"({record.thumbs_up_count} 👍 · {record.thumbs_down_count} 👎)",
        )

    if record.explanation:
        st.markdown("### Explanation")
        st.write(record.explanation)

    if record.has_discrepancy:
        st.markdown("### Discrepancy")
        st.warning(record.discrepancy)

    if record.source_documents:
        st.markdown("### Source Documents")
        for url in record.source_documents:
            st.markdown(f"- [{url}]({url})")

    if record.evidence:
        st.markdown("### Evidence")
        for ev in record.evidence:
            header = ev.document_name or "Document"
            if ev.page_number:
                header += f" · page {ev.page_number}"
            with st.expander(header):
                if ev.answer:
                    st.markdown(f"**Answer:** {ev.answer}")
                if ev.explanation:
                    st.write(ev.explanation)
                if ev.quotes:
                    st.markdown("\n".join(f"> {line}" for line in ev.quotes.splitlines()))
                link = page_link(ev.document_name, ev.page_number)
                if link and link.startswith(("http://", "https://")):
                    st.link_button("Open document at page", link)

    st.markdown("---")
    st.markdown("### Was this value correct?")
    with st.form(f"feedback_{record.id}"):
        vote = st.radio("Your vote", ["👍 Correct", "👎 Incorrect"], horizontal=True)
        email = st.text_input("Your Email (Optional)", placeholder="you@example.com")
        comment = st.text_area(
            "Comment", placeholder="e.g., This value seems incorrect because..."
        )
        if st.form_submit_button("Submit Feedback", use_container_width=True):
            try:
                result = get_facade().submit_feedback({
                    "dataId": record.id,
                    "isThumbUp": vote.startswith("👍"),
                    "email": email or None,
                    "comment": comment or None,
                })
                st.success(result["message"])
            except DashboardError as exc:
                show_error(exc)


# ── Re-run Dialog ────────────────────────────────────────────────────────


@st.dialog("Re-run Data Points", width="large")
def show_rerun(company: str, year: int, columns: List[str]):
    """Replace the selected values of a company/year with fresh answers."""
    st.markdown(f"## {company} · {year}")
    st.caption(
        "The selected values are deleted first, then extracted again from "
        "the documents below. This can take several minutes."
    )

    st.markdown("**Data Points to Re-run**")
    targets = []
    for column in columns:
        key = f"rerun_{company}_{year}_{column}"
        if not st.checkbox(column, key=key):
            continue
        # Blank falls back to the derived question
        question = st.text_area(
            f"Question for {column}",
            value=derive_question(column, company, year),
            key=f"{key}_question",
            height=80,
        )
        targets.append({"label": column, "question": question})

    links_text = st.text_area("PDF URLs (one per line)")
    secret = st.text_input("Secret Key", type="password")

    if st.button("Re-run Analysis", type="primary", use_container_width=True):
        with st.spinner("Analysing documents…"):
            try:
                outcome = get_facade().rerun_with_links({
                    "companyName": company,
                    "year": year,
                    "secretKey": secret,
                    "customLinks": links_text.splitlines(),
                    "targets": targets,
                })
            except DashboardError as exc:
                show_error(exc)
                return
        st.success(outcome["message"])
        if outcome["failed"]:
            st.error(f"Could not save: {', '.join(outcome['failed'])}")


# ── Add Company Dialog ───────────────────────────────────────────────────


@st.dialog("Add Missing Company")
def show_add_company():
    company = st.text_input("Company Name")
    year = st.number_input("Year", min_value=1900, max_value=2100, value=2024, step=1)
    secret = st.text_input("Secret Key", type="password")

    if st.button("Add Company", type="primary", use_container_width=True):
        try:
            result = get_facade().add_company({
                "companyName": company,
                "year": int(year),
                "secretKey": secret,
            })
        except DashboardError as exc:
            show_error(exc)
            return
        st.success(result["message"])


# ── Sidebar ──────────────────────────────────────────────────────────────

st.sidebar.title("Emissions Dashboard")
st.sidebar.caption("Revenue and greenhouse-gas emissions disclosed by companies")
st.sidebar.markdown("---")

order = st.sidebar.radio(
    "Sort companies",
    ["company", "recent"],
    format_func=lambda o: "Alphabetical" if o == "company" else "Recently updated",
)
if st.sidebar.button("Add Missing Company", use_container_width=True):
    show_add_company()

# ══════════════════════════════════════════════════════════════════════════
# DASHBOARD VIEW
# ══════════════════════════════════════════════════════════════════════════

st.title("Dashboard")
st.caption(
    "Each value was extracted from the company's published reports. "
    "Click a value to see the supporting evidence and rate it."
)

view = get_facade().get_dashboard(order)

if not view.companies:
    st.info("No data yet. Add a company to get started.")
    st.stop()

header = st.columns([3, 1] + [2] * len(view.columns) + [1])
header[0].markdown("**Company**")
header[1].markdown("**Year**")
for i, column in enumerate(view.columns):
    header[i + 2].markdown(f"**{column}**")

# Standard data points are always offered, even before the first re-run
rerun_columns = order_columns(dict.fromkeys([*PREFERRED_COLUMN_ORDER, *view.columns]))

for company in view.companies:
    for year in sorted(view.data[company], reverse=True):
        cells = view.data[company][year]
        row = st.columns([3, 1] + [2] * len(view.columns) + [1])
        row[0].markdown(company)
        row[1].markdown(str(year))

        for i, column in enumerate(view.columns):
            record = cells.get(column)
            with row[i + 2]:
                if record is None or not record.final_answer:
                    st.caption("N/A")
                    continue
                if st.button(record.final_answer, key=f"cell_{record.id}"):
                    show_details(record.id)
                st.markdown(approval_dot_html(record), unsafe_allow_html=True)

        if row[-1].button("↻", key=f"rerun_{company}_{year}", help="Re-run data points"):
            show_rerun(company, year, rerun_columns)
