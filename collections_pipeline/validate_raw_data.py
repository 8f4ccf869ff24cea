# =============================================================================
# VALIDATE RAW COLLECTIONS DATA
# =============================================================================
# - Enforce structural integrity of the raw account and activity feeds
# - Block data that would corrupt canonical views or report joins
# - Designed for deterministic execution in CI/CD pipelines


import os
import sys
import glob
from typing import Dict, List, Optional
import pandas as pd

from collections_pipeline.standardize_dates import count_unparsable_dates


# ------------------------------------------------------------
# CONFIGURATIONS
# ------------------------------------------------------------

RAW_DATA_BASE_PATH = os.getenv('RAW_DATA_BASE_PATH', 'data/raw')

TABLE_CONFIG = {
    'stg_accounts': {
        'role': 'entity_reference',
        'allow_empty': False,
        'primary_key': ['account_id'],
        'required_columns': [
            'account_id',
            'account_checkdigit',
            'agent_type',
            'customer_name',
            'product_type',
            'risk_segment',
            'outstanding_balance',
            'agent_name',
            'operation_number',
            'containment_percentage',
            'business_division',
            'customer_city',
        ],
    },
    'stg_activities': {
        'role': 'event_fact',
        'allow_empty': True,
        'primary_key': ['account_id'],
        'required_columns': [
            'account_id',
            'activity_date',
            'activity_time',
            'next_activity_date',
            'collection_channel',
            'contact_type',
            'contact_outcome',
            'non_payment_reason',
            'contact_location',
            'next_action',
            'notes',
            'phone_number',
            'department',
            'agent_name',
        ],
    },
}

EVENT_DATE_COLUMNS = ['activity_date', 'next_activity_date']


# ------------------------------------------------------------
# VALIDATION REPORT & LOGS
# ------------------------------------------------------------

def init_report() -> Dict[str, List[str]]:

    return {
        'errors': [],
        'warnings': [],
        'info': []
    }


def log_info(message: str, report: Dict[str, List[str]]) -> None:
    print(f'[INFO] {message}')
    report['info'].append(message)


def log_warning(message: str, report: Dict[str, List[str]]) -> None:
    print(f'[WARNING] {message}')
    report['warnings'].append(message)


def log_error(message: str, report: Dict[str, List[str]]) -> None:
    print(f'[ERROR] {message}')
    report['errors'].append(message)


# ------------------------------------------------------------
# BASE VALIDATIONS (ALL TABLES)
# ------------------------------------------------------------

def run_base_validations(df: pd.DataFrame,
                         table_name: str,
                         required_columns: List[str],
                         report: Dict[str, List[str]],
                         allow_empty: bool = False
                         ) -> bool:
    """
    Base structural validations.

    Returns False if structure is broken and table-specific checks must not run.
    """

    if df.empty and not allow_empty:
        log_error(f'{table_name}: dataset is empty', report)

        return False

    if df.empty:
        log_warning(f'{table_name}: dataset is empty', report)

    duplicate_columns = df.columns[df.columns.duplicated()].tolist()
    if duplicate_columns:
        log_error(
            f'{table_name}: duplicate column names detected: {duplicate_columns}',
            report
            )

        return False

    missing_columns = [col for col in required_columns if col not in df.columns]
    if missing_columns:
        log_error(
            f'{table_name}: missing required column(s): {missing_columns}',
            report
            )

        return False

    return True


# ------------------------------------------------------------
# ENTITY REFERENCE VALIDATIONS
# ------------------------------------------------------------

def run_entity_reference_validations(df: pd.DataFrame,
                                     table_name: str,
                                     primary_key: List[str],
                                     report: Dict[str, List[str]]
                                     ) -> None:
    """
    Account feed validations.

    Repeated account ids are tolerated: report deduplication keeps one row.
    """

    pk_null_count = df[primary_key].isnull().any(axis=1).sum()
    if pk_null_count > 0:
        log_error(
            f'{table_name}: {pk_null_count} row(s) with null account_id',
            report
            )

    duplicate_pk_count = df.duplicated(subset=primary_key).sum()
    if duplicate_pk_count > 0:
        log_warning(
            f'{table_name}: {duplicate_pk_count} repeated account_id value(s), '
            f'resolved by report deduplication',
            report
            )


# ------------------------------------------------------------
# EVENT FACT VALIDATIONS
# ------------------------------------------------------------

def run_event_fact_validations(df: pd.DataFrame,
                               table_name: str,
                               report: Dict[str, List[str]]
                               ) -> None:
    """
    Activity feed validations.

    Unparsable dates are tolerated: they become unknown (null) dates.
    """

    orphan_key_count = df['account_id'].isnull().sum()
    if orphan_key_count > 0:
        log_warning(
            f'{table_name}: {orphan_key_count} event(s) with null account_id, dropped',
            report
            )

    for col in EVENT_DATE_COLUMNS:
        invalid_count = count_unparsable_dates(df[col])
        if invalid_count > 0:
            log_warning(
                f'{table_name}: {invalid_count} unparsable DD/MM/YYYY value(s) in `{col}`',
                report
                )


# ------------------------------------------------------------
# CROSS-TABLE VALIDATIONS
# ------------------------------------------------------------

def run_cross_table_validations(tables: Dict[str, pd.DataFrame],
                                report: Dict[str, List[str]]
                                ) -> None:
    """
    Cross-table validations.

    Orphan activities never reach a report, since every report starts from
    the account view.
    """

    missing_tables = [t for t in TABLE_CONFIG if t not in tables]
    if missing_tables:
        log_error(
            f'Cross-table validation failed: missing required table(s): {missing_tables}',
            report
            )

        return

    account_id_set = set(tables['stg_accounts']['account_id'].dropna().unique())

    activity_ids = tables['stg_activities']['account_id']
    orphan_activities = activity_ids.notna() & ~activity_ids.isin(account_id_set)
    if orphan_activities.any():
        log_warning(
            f'stg_activities: {orphan_activities.sum()} orphan record(s) referencing non-existent account_id',
            report
            )


# ------------------------------------------------------------
# TABLE VALIDATION
# ------------------------------------------------------------

def validate_tables(tables: Dict[str, pd.DataFrame],
                    report: Dict[str, List[str]]
                    ) -> None:
    """
    Run every validation over the loaded raw feeds, recording findings in report.
    """

    structurally_valid = True

    for table_name, config in TABLE_CONFIG.items():
        df = tables.get(table_name)
        if df is None:
            structurally_valid = False

            continue

        if not run_base_validations(df, table_name, config['required_columns'], report,
                                    allow_empty=config['allow_empty']):
            structurally_valid = False

            continue

        if config['role'] == 'entity_reference':
            run_entity_reference_validations(df, table_name, config['primary_key'], report)

        elif config['role'] == 'event_fact':
            run_event_fact_validations(df, table_name, report)

    if structurally_valid:
        run_cross_table_validations(tables, report)

    else:
        missing_tables = [t for t in TABLE_CONFIG if t not in tables]
        if missing_tables:
            log_error(f'Missing required table(s): {missing_tables}', report)


# ------------------------------------------------------------
# INPUT-OUTPUT HELPERS
# ------------------------------------------------------------

def load_csv_file(csv_path: str, table_name: str,
                  report: Dict[str, List[str]]
                  ) -> Optional[pd.DataFrame]:
    try:
        df = pd.read_csv(csv_path, dtype=str)
        log_info(f'Loaded {table_name} file: {os.path.basename(csv_path)} ({len(df)} rows)', report)

        return df

    except (OSError, ValueError, pd.errors.ParserError) as e:
        log_error(f'Failed to load {table_name} file {csv_path}: {e}', report)

        return None


def load_logical_table(base_path: str,
                       table_name: str,
                       report: Dict[str, List[str]]
                       ) -> Optional[pd.DataFrame]:
    """
    Load and concatenate all CSV files belonging to a logical table.
    Files are identified by filename prefix: <table_name>*.csv, read in
    sorted order so repeated runs see rows in the same order.
    """

    pattern = os.path.join(base_path, f'{table_name}*.csv')
    csv_files = sorted(glob.glob(pattern))

    if not csv_files:
        log_error(f'{table_name}: no files found matching pattern {pattern}', report)

        return None

    dfs = []
    for csv_path in csv_files:
        df = load_csv_file(csv_path, table_name, report)
        if df is not None:
            dfs.append(df)

    if not dfs:
        log_error(f'{table_name}: all matching files failed to load', report)

        return None

    combined_df = pd.concat(dfs, ignore_index=True)
    log_info(f'{table_name}: combined {len(csv_files)} file(s) into '
             f'{len(combined_df)} rows',
             report)

    return combined_df


def load_raw_tables(base_path: str,
                    report: Dict[str, List[str]]
                    ) -> Dict[str, pd.DataFrame]:
    tables: Dict[str, pd.DataFrame] = {}

    for table_name in TABLE_CONFIG:
        df = load_logical_table(base_path, table_name, report)
        if df is not None:
            tables[table_name] = df

    return tables


# ------------------------------------------------------------
# MAIN EXECUTION
# ------------------------------------------------------------

def main() -> None:
    report = init_report()

    tables = load_raw_tables(RAW_DATA_BASE_PATH, report)
    validate_tables(tables, report)

    if report['errors']:
        sys.exit(1)

    sys.exit(0)


if __name__ == '__main__':
    main()


# =============================================================================
# END OF SCRIPT
# =============================================================================
