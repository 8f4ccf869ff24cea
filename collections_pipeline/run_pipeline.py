# =============================================================================
# RUN COLLECTIONS REPORT PIPELINE
# =============================================================================
# - Load raw account and activity feeds, enforce the raw data contract
# - Derive the clean account view and the four canonical contact views
# - Assemble the three operational reports and export them as CSV
# - Nothing is written unless every view and report passed its checks


import os
import sys
from typing import Dict, List
import pandas as pd

from collections_pipeline.apply_raw_data_contract import enforce_raw_data_contract
from collections_pipeline.assemble_reports import DEFAULT_COMPANY_LABEL, build_reports
from collections_pipeline.derive_canonical_views import build_canonical_views
from collections_pipeline.exceptions import CollectionsPipelineError
from collections_pipeline.validate_raw_data import (
    init_report,
    load_raw_tables,
    log_error,
    log_info,
)


# ------------------------------------------------------------
# CONFIGURATIONS
# ------------------------------------------------------------

RAW_DATA_BASE_PATH = os.getenv('RAW_DATA_BASE_PATH', 'data/raw')
REPORT_OUTPUT_PATH = os.getenv('REPORT_OUTPUT_PATH', 'data/reports')
REPORT_COMPANY_LABEL = os.getenv('REPORT_COMPANY_LABEL', DEFAULT_COMPANY_LABEL)


# ------------------------------------------------------------
# PIPELINE STAGES
# ------------------------------------------------------------

def run_pipeline(tables: Dict[str, pd.DataFrame],
                 report: Dict[str, List[str]],
                 company: str = DEFAULT_COMPANY_LABEL
                 ) -> Dict[str, pd.DataFrame]:
    """
    Raw feeds in, report row sets out.

    Raises SchemaContractError before any view is built when the feeds break
    their contract, and DuplicateAccountError when a view or report loses
    its one-row-per-account grain.
    """

    accounts, activities = enforce_raw_data_contract(tables, report)

    views = build_canonical_views(accounts, activities)
    for view_name, view in views.items():
        log_info(f'{view_name}: {len(view)} row(s)', report)

    reports = build_reports(views, company)
    for report_name, report_df in reports.items():
        log_info(f'{report_name}: {len(report_df)} row(s)', report)

    return reports


# ------------------------------------------------------------
# INPUT-OUTPUT HELPERS
# ------------------------------------------------------------

def write_report(df: pd.DataFrame, output_path: str) -> None:
    """
    Write one report row set. Column order is part of the report contract.
    """

    os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
    df.to_csv(output_path, index=False)


def write_reports(reports: Dict[str, pd.DataFrame],
                  output_dir: str,
                  report: Dict[str, List[str]]
                  ) -> Dict[str, str]:
    written = {}

    for report_name, report_df in reports.items():
        output_path = os.path.join(output_dir, f'{report_name}.csv')
        write_report(report_df, output_path)
        log_info(f'Wrote {report_name} to {output_path}', report)
        written[report_name] = output_path

    return written


# ------------------------------------------------------------
# MAIN EXECUTION
# ------------------------------------------------------------

def main() -> None:
    report = init_report()

    tables = load_raw_tables(RAW_DATA_BASE_PATH, report)

    try:
        reports = run_pipeline(tables, report, REPORT_COMPANY_LABEL)

    except CollectionsPipelineError as e:
        log_error(f'Pipeline aborted: {e}', report)
        sys.exit(1)

    write_reports(reports, REPORT_OUTPUT_PATH, report)

    sys.exit(0)


if __name__ == '__main__':
    main()


# =============================================================================
# END OF SCRIPT
# =============================================================================
