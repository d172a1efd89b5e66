#!/usr/bin/env python3
"""Re-run selected data points of a company/year against new documents.

Usage locally:
    python -m scripts.rerun_data_points "Acme Corp" 2023 \\
        --links https://example.com/acme-2023-report.pdf \\
        --data-points "Scope 1" "Scope 2 (Market-based)"

    python -m scripts.rerun_data_points "Acme Corp" 2023 --links ... --add
        # create the company/year first if it is not on the dashboard yet

The secret comes from RERUN_SECRET_KEY, like every other setting. The
selected data points are deleted before the analysis service is called.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from emissions_dashboard.container import AppContainer
from emissions_dashboard.domain.data_points import PREFERRED_COLUMN_ORDER
from emissions_dashboard.errors import Conflict, DashboardError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("rerun")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Re-run data points of one company/year.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("company_name", help="Company name as shown on the dashboard")
    parser.add_argument("year", type=int, help="Reporting year")
    parser.add_argument(
        "--links",
        nargs="+",
        required=True,
        help="URLs of the PDF reports to read",
    )
    parser.add_argument(
        "--data-points",
        nargs="+",
        default=list(PREFERRED_COLUMN_ORDER),
        help="Data points to refresh (default: all standard data points)",
    )
    parser.add_argument(
        "--add",
        action="store_true",
        help="Add the company/year first if it does not exist",
    )
    return parser.parse_args()


def main():
    args = parse_args()

    container = AppContainer()
    container.init_resources()
    settings = container.settings()

    payload = {
        "companyName": args.company_name,
        "year": args.year,
        "secretKey": settings.rerun_secret_key,
        "customLinks": args.links,
        "targets": args.data_points,
    }

    logger.info("=" * 60)
    logger.info("EMISSIONS DASHBOARD - Re-run")
    logger.info("  Company:     %s %d", args.company_name, args.year)
    logger.info("  Data points: %s", args.data_points)
    logger.info("  Links:       %d", len(args.links))
    logger.info("=" * 60)

    t0 = time.time()
    try:
        if args.add:
            try:
                container.company_service().add_company(payload)
            except Conflict:
                logger.info("%s %d already exists", args.company_name, args.year)
        outcome = container.rerun_service().rerun_with_links(payload)
    except DashboardError as exc:
        logger.error("Re-run failed [%s]: %s", exc.code, exc.message)
        sys.exit(1)
    finally:
        container.shutdown_resources()

    logger.info("=" * 60)
    logger.info("RE-RUN COMPLETE in %.1fs", time.time() - t0)
    logger.info("  %s", outcome.message)
    if outcome.skipped:
        logger.info("  Skipped:  %s", outcome.skipped)
    if outcome.failed:
        logger.info("  Failed:   %s", outcome.failed)
    logger.info("=" * 60)


if __name__ == "__main__":
    main()
