"""MCP (Model Context Protocol) server: exposes the emissions dashboard as
tools that AI agents can call.

Run:
    python mcp_server.py                     # stdio transport (default)

Configure in your agent's MCP settings::

    {
      "mcpServers": {
        "emissions-dashboard": {
          "command": "python",
          "args": ["<path>/emissions-dashboard/mcp_server.py"],
          "env": {
            "ANALYSIS_URL": "https://analysis.example.com/analyze",
            "RERUN_SECRET_KEY": "your-secret"
          }
        }
      }
    }

This file imports ONLY the DashboardFacade. It never touches repos,
services, or ORM models directly.
"""

import sys
from pathlib import Path

# Ensure project root is importable
sys.path.insert(0, str(Path(__file__).resolve().parent))

from mcp.server.fastmcp import FastMCP

from emissions_dashboard.errors import DashboardError
from emissions_dashboard.facade import DashboardFacade

# ── Server setup ──────────────────────────────────────────────────────────

mcp = FastMCP(
    "emissions-dashboard",
    instructions=(
        "Emissions Dashboard: revenue and Scope 1/2/3 emissions disclosed "
        "by companies, each value backed by quotes from the source "
        "documents and rated by reviewers.\n\n"
        "Start with list_companies() to see available data, then use "
        "get_company_data() and get_evidence() to dive deeper. "
        "rerun_data_points() re-extracts values and needs the shared secret."
    ),
)

# Lazy-initialise facade so the server starts fast;
# created on first tool call.
_facade: DashboardFacade | None = None


def _get_facade() -> DashboardFacade:
    global _facade
    if _facade is None:
        _facade = DashboardFacade()
    return _facade


# ══════════════════════════════════════════════════════════════════════════
# TOOLS - actions an AI agent can invoke
# ══════════════════════════════════════════════════════════════════════════


@mcp.tool()
def list_companies() -> list[dict]:
    """List all companies on the dashboard.

    Use this first to see what data is available before diving deeper.
    Returns a list of dicts, each with: company_name, years (newest first)
    and data_points (e.g. "Revenue", "Scope 1").
    """
    return _get_facade().list_companies()


@mcp.tool()
def get_company_data(company_name: str) -> dict:
    """All data points of a company, grouped by year.

    Args:
        company_name: Exact company name as returned by list_companies()

    Returns:
        Dict with columns (canonical order) and years -> data point ->
        record (id, final_answer, explanation, discrepancy,
        source_documents, approval_rating, approval_level, evidence).
        Returns {error: ...} if the company is not on the dashboard.
    """
    result = _get_facade().get_company_data(company_name)
    if result is None:
        return {"error": f"Company '{company_name}' not found."}
    return result


@mcp.tool()
def get_evidence(record_id: int) -> dict:
    """One data point with the quotes and pages that support it.

    Args:
        record_id: The ``id`` of a record from get_company_data()
    """
    try:
        return _get_facade().get_record(record_id).model_dump(mode="json")
    except DashboardError as exc:
        return exc.to_response()


@mcp.tool()
def rerun_data_points(
    company_name: str,
    year: int,
    data_points: list[str],
    links: list[str],
    secret_key: str,
) -> dict:
    """Delete and re-extract data points of a company/year from new documents.

    The existing values are deleted before the analysis runs, and the call
    blocks until the analysis service answers (this can take minutes).

    Args:
        company_name: Company name (e.g. "Acme Corp")
        year: Reporting year (e.g. 2023)
        data_points: Labels to refresh: "Revenue", "Scope 1",
                     "Scope 2 (Market-based)", "Scope 3"
        links: URLs of the PDF reports to read
        secret_key: Shared secret that authorizes re-runs

    Returns:
        message plus the refreshed, skipped and failed data points,
        or {error, code} if the request was rejected.
    """
    try:
        return _get_facade().rerun_with_links({
            "companyName": company_name,
            "year": year,
            "targets": data_points,
            "customLinks": links,
            "secretKey": secret_key,
        })
    except DashboardError as exc:
        return exc.to_response()


# ══════════════════════════════════════════════════════════════════════════
# RESOURCES - reference data the agent can read
# ══════════════════════════════════════════════════════════════════════════


@mcp.resource("emissions-dashboard://help")
def get_help() -> str:
    """How to use the Emissions Dashboard tools."""
    return """\
# Emissions Dashboard - Tool Guide

## Quick Start
1. `list_companies()` - See what's on the dashboard
2. `get_company_data("Acme Corp")` - Every value for a company, by year
3. `get_evidence(42)` - Quotes and pages behind one value

## Refreshing Values
`rerun_data_points("Acme Corp", 2023, ["Scope 1"], ["https://.../report.pdf"], secret_key)`
deletes the selected values and extracts them again from the given reports.

## Data Points
- **Revenue**: total company revenue
- **Scope 1**: direct emissions
- **Scope 2 (Market-based)**: purchased energy, market-based method
- **Scope 3**: value-chain emissions

## Approval Rating
Share of thumbs-up votes, 0-100. 75 and above is high, 50-74 medium,
below 50 low. No votes means no rating.
"""


# ── Entry point ───────────────────────────────────────────────────────────

if __name__ == "__main__":
    mcp.run()
