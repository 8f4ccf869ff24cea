# =============================================================================
# Raw Data Structural Contract Enforcement
# =============================================================================
# - Enforce non-negotiable structural contracts on the raw collections feeds
# - Halt before any view is built when the schema contract is broken
# - Remove exact duplicate activity events, keep everything else as raw strings


from typing import Dict, List, Tuple
import pandas as pd

from collections_pipeline.exceptions import SchemaContractError
from collections_pipeline.validate_raw_data import (
    TABLE_CONFIG,
    log_info,
    validate_tables,
)


# ------------------------------------------------------------
# FATAL VALIDATION
# ------------------------------------------------------------

def validate_primary_key(df: pd.DataFrame, table_name: str) -> None:
    """
    account_id must be present and non-null.
    Any violation halts contract enforcement.
    """

    primary_key = TABLE_CONFIG[table_name]['primary_key']

    missing = [col for col in primary_key if col not in df.columns]
    if missing:
        raise SchemaContractError([f'{table_name}: missing primary key column(s): {missing}'])

    null_count = int(df[primary_key].isnull().any(axis=1).sum())
    if null_count > 0:
        raise SchemaContractError([f'{table_name}: {null_count} row(s) with null account_id'])


# ------------------------------------------------------------
# CONTRACT ENFORCEMENT
# ------------------------------------------------------------

def remove_unkeyed_events(df: pd.DataFrame) -> pd.DataFrame:
    """
    Remove events without an account_id; they can never join an account.
    """

    return df[df['account_id'].notna()]


def deduplicate_exact_events(df: pd.DataFrame) -> pd.DataFrame:
    """
    Remove exact duplicate rows representing the same event.
    """

    return df.drop_duplicates(keep='first').reset_index(drop=True)


def enforce_raw_data_contract(tables: Dict[str, pd.DataFrame],
                              report: Dict[str, List[str]]
                              ) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Validate both raw feeds and return contract-compliant
    (accounts, activities) frames.

    Raises SchemaContractError if validation recorded any error.
    """

    validate_tables(tables, report)
    if report['errors']:
        raise SchemaContractError(report['errors'])

    accounts = tables['stg_accounts']
    validate_primary_key(accounts, 'stg_accounts')

    activities = remove_unkeyed_events(tables['stg_activities'])
    contracted_activities = deduplicate_exact_events(activities)

    removed = len(activities) - len(contracted_activities)
    if removed > 0:
        log_info(f'stg_activities: removed {removed} exact duplicate event(s)', report)

    return accounts.reset_index(drop=True), contracted_activities


# =============================================================================
# END OF SCRIPT
# =============================================================================
