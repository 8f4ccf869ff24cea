# =============================================================================
# ASSEMBLE OPERATIONAL REPORTS
# =============================================================================
# - Join the clean account view against the canonical contact views
# - Apply report eligibility filters and the missing-contact defaults
# - Re-apply the canonical ranking so every report holds one row per account
# - Output: report row sets with a fixed, contractual column order


from typing import Dict, List, Optional
import pandas as pd

from collections_pipeline.classify_categories import ContactType, report_contact_type
from collections_pipeline.derive_canonical_views import (
    PARTITION_KEY,
    assert_one_row_per_account,
    canonicalize,
)


# ------------------------------------------------------------
# CONFIGURATIONS
# ------------------------------------------------------------

DEFAULT_COMPANY_LABEL = 'COMPANY_NAME'

NO_CONTACT = 'NO_CONTACT'
NO_PROMISE_DATE = 'NO_PROMISE_DATE'

RETAIL_DIVISION = 'RETAIL'
MORTGAGE_PRODUCT = 'MORTGAGE'
COMMERCIAL_LOAN_PRODUCT = 'COMMERCIAL_LOAN'

MORTGAGE_ORDER = [('risk_segment', False)]
RESTRUCTURING_ORDER = [('product_type', True), ('risk_segment', False)]
COMMERCIAL_ORDER = [('risk_segment', False)]

PRIMARY_JOIN_COLUMNS = ['phone_number', 'notes', 'contact_type', 'activity_date', 'collection_channel']

PORTFOLIO_REPORT_COLUMNS = [
    'company',
    'account_id',
    'account_checkdigit',
    'agent_type',
    'customer_name',
    'product_type',
    'risk_segment',
    'outstanding_balance',
    'agent_name',
    'operation_number',
    'contact_phone',
    'activity_notes',
    'contact_type',
    'last_activity_date',
    'field_visit_completed',
    'business_division',
    'customer_city',
    'coverage_area',
]

COMMERCIAL_REPORT_COLUMNS = [
    'company',
    'account_id',
    'account_checkdigit',
    'customer_name',
    'agent_type',
    'risk_segment',
    'outstanding_balance',
    'collection_channel',
    'contact_type',
    'payment_promise_active',
    'promise_date',
    'contact_phone',
    'activity_notes',
]


# ------------------------------------------------------------
# ACCOUNT ELIGIBILITY
# ------------------------------------------------------------

def is_uncontained(accounts: pd.DataFrame) -> pd.Series:
    """
    containment_percentage numerically 0. Non-numeric values are not eligible.
    """

    containment = pd.to_numeric(accounts['containment_percentage'], errors='coerce')

    return containment == 0


def eligible_accounts(accounts: pd.DataFrame, product_type: Optional[str] = None) -> pd.DataFrame:
    """
    RETAIL, uncontained accounts, optionally restricted to one product type.
    """

    mask = (accounts['business_division'] == RETAIL_DIVISION) & is_uncontained(accounts)
    if product_type is not None:
        mask &= accounts['product_type'] == product_type

    return accounts[mask]


# ------------------------------------------------------------
# JOIN HELPERS
# ------------------------------------------------------------

def _prefixed(view: pd.DataFrame, prefix: str, columns: List[str]) -> pd.DataFrame:
    """
    Project a canonical view for joining; every column except the key is
    prefixed, and the key is kept once more as `<prefix>account_id` so a match
    can be detected after a left join.
    """

    projected = view[[PARTITION_KEY] + columns].copy()
    projected = projected.rename(columns={column: f'{prefix}{column}' for column in columns})
    projected[f'{prefix}{PARTITION_KEY}'] = projected[PARTITION_KEY]

    return projected


def _left_join(base: pd.DataFrame, view: pd.DataFrame, prefix: str, columns: List[str]) -> pd.DataFrame:
    return base.merge(_prefixed(view, prefix, columns), on=PARTITION_KEY, how='left')


def _matched(joined: pd.DataFrame, prefix: str) -> pd.Series:
    return joined[f'{prefix}{PARTITION_KEY}'].notna()


def _yes_no(flags: pd.Series) -> pd.Series:
    return flags.map({True: 'YES', False: 'NO'})


def _with_default(values: pd.Series, default: str) -> pd.Series:
    return values.astype(object).where(values.notna(), default)


def _primary_contact_fields(joined: pd.DataFrame) -> pd.DataFrame:
    """
    Contact fields taken from the joined primary contact, defaulted when the
    account has no primary contact or the value is null.
    """

    joined['contact_phone'] = _with_default(joined['c_phone_number'], NO_CONTACT)
    joined['activity_notes'] = _with_default(joined['c_notes'], NO_CONTACT)
    joined['contact_type'] = joined['c_contact_type'].map(report_contact_type)
    joined['last_activity_date'] = _with_default(joined['c_activity_date'], NO_CONTACT)

    return joined


def _finalize(joined: pd.DataFrame,
              order_by,
              columns: List[str],
              company: str,
              report_name: str
              ) -> pd.DataFrame:
    joined['company'] = company
    report = canonicalize(joined, order_by)[columns]
    assert_one_row_per_account(report, report_name)

    return report.reset_index(drop=True)


# ------------------------------------------------------------
# REPORT 1: MORTGAGE PORTFOLIO TRACKING
# ------------------------------------------------------------

def mortgage_portfolio_report(views: Dict[str, pd.DataFrame],
                              company: str = DEFAULT_COMPANY_LABEL
                              ) -> pd.DataFrame:
    """
    Uncontained RETAIL mortgages with their primary contact and whether a
    field visit was ever completed.
    """

    base = eligible_accounts(views['clean_accounts'], MORTGAGE_PRODUCT)

    joined = _left_join(base, views['clean_contacts_primary'], 'c_', PRIMARY_JOIN_COLUMNS)
    joined = _left_join(joined, views['clean_contacts_field'], 'f_', [])

    joined = _primary_contact_fields(joined)
    joined['field_visit_completed'] = _yes_no(_matched(joined, 'f_'))

    return _finalize(joined, MORTGAGE_ORDER, PORTFOLIO_REPORT_COLUMNS, company,
                     'mortgage_portfolio_report')


# ------------------------------------------------------------
# REPORT 2: RESTRUCTURING PIPELINE
# ------------------------------------------------------------

def restructuring_pipeline_report(views: Dict[str, pd.DataFrame],
                                  company: str = DEFAULT_COMPANY_LABEL
                                  ) -> pd.DataFrame:
    """
    Uncontained RETAIL accounts that requested a restructuring.

    The restructure view is left joined, but only accounts whose joined
    contact type is RESTRUCTURE are kept, so accounts without a restructure
    request never appear.
    """

    base = eligible_accounts(views['clean_accounts'])

    joined = _left_join(base, views['clean_contacts_primary'], 'c_', PRIMARY_JOIN_COLUMNS)
    joined = _left_join(joined, views['clean_contacts_field'], 'f_', [])
    joined = _left_join(joined, views['clean_contacts_restructure'], 'r_', ['contact_type'])

    joined = joined[joined['r_contact_type'] == ContactType.RESTRUCTURE.label].copy()

    joined = _primary_contact_fields(joined)
    joined['field_visit_completed'] = _yes_no(_matched(joined, 'f_'))

    return _finalize(joined, RESTRUCTURING_ORDER, PORTFOLIO_REPORT_COLUMNS, company,
                     'restructuring_pipeline_report')


# ------------------------------------------------------------
# REPORT 3: COMMERCIAL LOANS WITH PAYMENT PROMISES
# ------------------------------------------------------------

def commercial_promises_report(views: Dict[str, pd.DataFrame],
                               company: str = DEFAULT_COMPANY_LABEL
                               ) -> pd.DataFrame:
    """
    Uncontained RETAIL commercial loans with their primary contact and the
    latest payment promise, if any.
    """

    base = eligible_accounts(views['clean_accounts'], COMMERCIAL_LOAN_PRODUCT)

    joined = _left_join(base, views['clean_contacts_primary'], 'c_', PRIMARY_JOIN_COLUMNS)
    joined = _left_join(joined, views['clean_contacts_promise'], 'p_', ['next_activity_date'])

    joined = _primary_contact_fields(joined)
    joined['collection_channel'] = _with_default(joined['c_collection_channel'], NO_CONTACT)
    joined['payment_promise_active'] = _yes_no(_matched(joined, 'p_'))
    joined['promise_date'] = _with_default(joined['p_next_activity_date'], NO_PROMISE_DATE)

    return _finalize(joined, COMMERCIAL_ORDER, COMMERCIAL_REPORT_COLUMNS, company,
                     'commercial_promises_report')


# ------------------------------------------------------------
# REPORT COMPOSITION
# ------------------------------------------------------------

REPORT_BUILDERS = {
    'mortgage_portfolio_report': mortgage_portfolio_report,
    'restructuring_pipeline_report': restructuring_pipeline_report,
    'commercial_promises_report': commercial_promises_report,
}


def build_reports(views: Dict[str, pd.DataFrame],
                  company: str = DEFAULT_COMPANY_LABEL
                  ) -> Dict[str, pd.DataFrame]:

    return {
        report_name: builder(views, company)
        for report_name, builder in REPORT_BUILDERS.items()
    }


# =============================================================================
# END OF SCRIPT
# =============================================================================
