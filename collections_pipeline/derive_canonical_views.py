# =============================================================================
# DERIVE CANONICAL VIEWS
# =============================================================================
# - Standardize account assignments into the clean account view
# - Select one canonical contact per account for each contact category
# - Enforce the one-row-per-account grain on every derived view


from typing import Dict, List, Tuple
import pandas as pd

from collections_pipeline.classify_categories import (
    CollectionChannel,
    ContactType,
    classify_channels,
    classify_contact_types,
    labels,
    ranks,
)
from collections_pipeline.exceptions import DuplicateAccountError
from collections_pipeline.standardize_dates import normalize_date_series


# ------------------------------------------------------------
# CONFIGURATIONS
# ------------------------------------------------------------

PARTITION_KEY = 'account_id'

METRO_CITIES = frozenset({'METRO_AREA_1', 'METRO_AREA_2', 'METRO_AREA_3'})

PAYMENT_PROMISE_OUTCOME = 'PAYMENT_PROMISE'
RESTRUCTURE_REQUEST_OUTCOME = 'RESTRUCTURE_REQUEST'

ACCOUNT_COLUMNS = [
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
]

ACTIVITY_COLUMNS = [
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
]

CONTACT_VIEW_COLUMNS = ACTIVITY_COLUMNS + ['channel_priority', 'contact_type_priority']

# (sort column, ascending) pairs, first row wins
PRIMARY_ORDER = [('channel_priority', True), ('contact_type_priority', True), ('activity_date', False)]
FIELD_ORDER = [('contact_type_priority', True), ('activity_date', False)]
LATEST_EVENT_ORDER = [('activity_date', False), ('activity_time', False)]


# ------------------------------------------------------------
# CANONICALIZER
# ------------------------------------------------------------

def canonicalize(df: pd.DataFrame,
                 order_by: List[Tuple[str, bool]],
                 partition_key: str = PARTITION_KEY
                 ) -> pd.DataFrame:
    """
    Keep the best-ranked row per partition key.

    Rows are stable-sorted on `order_by` (nulls last in either direction),
    so rows tied on every key resolve to the earliest one in input order.
    Output is ordered by partition key with a fresh index.
    """

    if df.empty:

        return df.copy().reset_index(drop=True)

    sort_columns = [column for column, _ in order_by]
    ascending = [direction for _, direction in order_by]

    ranked = df.sort_values(
        by=sort_columns,
        ascending=ascending,
        kind='mergesort',
        na_position='last',
    )

    winners = ranked.drop_duplicates(subset=[partition_key], keep='first')

    return (
        winners
        .sort_values(by=partition_key, kind='mergesort')
        .reset_index(drop=True)
    )


def assert_one_row_per_account(df: pd.DataFrame,
                               view_name: str,
                               partition_key: str = PARTITION_KEY
                               ) -> None:
    """
    Post-condition: count(view) == count(distinct account_id in view).
    """

    duplicated = df[partition_key].duplicated(keep=False)
    if duplicated.any():
        raise DuplicateAccountError(
            view_name,
            sorted(df.loc[duplicated, partition_key].astype(str).unique())
        )


# ------------------------------------------------------------
# ACCOUNT VIEW
# ------------------------------------------------------------

def clean_accounts(accounts: pd.DataFrame) -> pd.DataFrame:
    """
    Pass-through account view with derived coverage_area.
    """

    view = accounts[ACCOUNT_COLUMNS].copy()
    in_metro = view['customer_city'].isin(sorted(METRO_CITIES))
    view['coverage_area'] = in_metro.map({True: 'YES', False: 'NO'})

    return view.reset_index(drop=True)


# ------------------------------------------------------------
# CONTACT PREPROCESSING
# ------------------------------------------------------------

def _preprocess_contacts(activities: pd.DataFrame) -> pd.DataFrame:
    """
    Projection shared by every contact view: ISO dates, raw codes untouched.
    """

    contacts = activities[ACTIVITY_COLUMNS].copy()
    contacts['activity_date'] = normalize_date_series(contacts['activity_date'])
    contacts['next_activity_date'] = normalize_date_series(contacts['next_activity_date'])

    return contacts


def _with_classified_channel(contacts: pd.DataFrame, raw: pd.DataFrame) -> pd.DataFrame:
    channels = classify_channels(raw)
    contacts['collection_channel'] = labels(channels)
    contacts['channel_priority'] = ranks(channels)

    return contacts


def _with_fixed_channel(contacts: pd.DataFrame, channel: CollectionChannel) -> pd.DataFrame:
    contacts['collection_channel'] = channel.label
    contacts['channel_priority'] = channel.rank

    return contacts


def _with_classified_contact_type(contacts: pd.DataFrame,
                                  raw: pd.DataFrame,
                                  channel_fallback: bool
                                  ) -> pd.DataFrame:
    contact_types = classify_contact_types(raw, channel_fallback=channel_fallback)
    contacts['contact_type'] = labels(contact_types)
    contacts['contact_type_priority'] = ranks(contact_types)

    return contacts


def _with_fixed_contact_type(contacts: pd.DataFrame, contact_type: ContactType) -> pd.DataFrame:
    contacts['contact_type'] = contact_type.label
    contacts['contact_type_priority'] = contact_type.rank

    return contacts


# ------------------------------------------------------------
# CANONICAL CONTACT VIEWS
# ------------------------------------------------------------

def clean_contacts_primary(activities: pd.DataFrame) -> pd.DataFrame:
    """
    Latest most relevant contact per account across all channels.
    """

    contacts = _preprocess_contacts(activities)
    contacts = _with_classified_channel(contacts, activities)
    contacts = _with_classified_contact_type(contacts, activities, channel_fallback=True)

    return canonicalize(contacts[CONTACT_VIEW_COLUMNS], PRIMARY_ORDER)


def clean_contacts_field(activities: pd.DataFrame) -> pd.DataFrame:
    """
    Latest most relevant field visit per account.
    """

    field_events = activities[activities['collection_channel'] == CollectionChannel.FIELD.label]

    contacts = _preprocess_contacts(field_events)
    contacts = _with_fixed_channel(contacts, CollectionChannel.FIELD)
    contacts = _with_classified_contact_type(contacts, field_events, channel_fallback=False)

    return canonicalize(contacts[CONTACT_VIEW_COLUMNS], FIELD_ORDER)


def _latest_outcome_view(activities: pd.DataFrame,
                         outcome: str,
                         contact_type: ContactType
                         ) -> pd.DataFrame:
    outcome_events = activities[activities['contact_outcome'] == outcome]

    contacts = _preprocess_contacts(outcome_events)
    contacts = _with_classified_channel(contacts, outcome_events)
    contacts = _with_fixed_contact_type(contacts, contact_type)

    return canonicalize(contacts[CONTACT_VIEW_COLUMNS], LATEST_EVENT_ORDER)


def clean_contacts_promise(activities: pd.DataFrame) -> pd.DataFrame:
    """
    Latest payment promise per account.
    """

    return _latest_outcome_view(activities, PAYMENT_PROMISE_OUTCOME, ContactType.PROMISE)


def clean_contacts_restructure(activities: pd.DataFrame) -> pd.DataFrame:
    """
    Latest restructuring request per account.
    """

    return _latest_outcome_view(activities, RESTRUCTURE_REQUEST_OUTCOME, ContactType.RESTRUCTURE)


# ------------------------------------------------------------
# VIEW COMPOSITION
# ------------------------------------------------------------

CONTACT_VIEW_BUILDERS = {
    'clean_contacts_primary': clean_contacts_primary,
    'clean_contacts_field': clean_contacts_field,
    'clean_contacts_promise': clean_contacts_promise,
    'clean_contacts_restructure': clean_contacts_restructure,
}


def build_canonical_views(accounts: pd.DataFrame,
                          activities: pd.DataFrame
                          ) -> Dict[str, pd.DataFrame]:
    """
    Build the account view and the four canonical contact views.

    Views do not depend on each other. Each contact view is checked for the
    one-row-per-account grain before it is returned.
    """

    views = {'clean_accounts': clean_accounts(accounts)}

    for view_name, builder in CONTACT_VIEW_BUILDERS.items():
        view = builder(activities)
        assert_one_row_per_account(view, view_name)
        views[view_name] = view

    return views


# =============================================================================
# END OF SCRIPT
# =============================================================================
