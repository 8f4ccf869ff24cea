"""Pytest configuration and shared raw feed builders."""

import pandas as pd
import pytest


ACCOUNT_DEFAULTS = {
    'account_id': 'A1',
    'account_checkdigit': '7',
    'agent_type': 'INTERNAL',
    'customer_name': 'JANE DOE',
    'product_type': 'MORTGAGE',
    'risk_segment': 'B',
    'outstanding_balance': '1500.00',
    'agent_name': 'AGENT_01',
    'operation_number': 'OP-1',
    'containment_percentage': '0',
    'business_division': 'RETAIL',
    'customer_city': 'METRO_AREA_1',
}

ACTIVITY_DEFAULTS = {
    'account_id': 'A1',
    'activity_date': '05/03/2024',
    'activity_time': '10:00:00',
    'next_activity_date': '12/03/2024',
    'collection_channel': 'PHONE',
    'contact_type': 'PRIMARY',
    'contact_outcome': 'CALLBACK',
    'non_payment_reason': 'UNEMPLOYED',
    'contact_location': 'HOME',
    'next_action': 'CALL',
    'notes': 'spoke with customer',
    'phone_number': '5550001',
    'department': 'COLLECTIONS',
    'agent_name': 'AGENT_01',
}


def _frame(defaults, rows):
    records = []
    for overrides in rows:
        record = dict(defaults)
        record.update(overrides)
        records.append(record)

    return pd.DataFrame(records, columns=list(defaults), dtype=object)


@pytest.fixture
def make_accounts():
    """Build a raw account feed; each argument overrides the default row.

    Returns:
        Callable returning a DataFrame with every account feed column
    """

    def build(*rows):
        return _frame(ACCOUNT_DEFAULTS, rows)

    return build


@pytest.fixture
def make_activities():
    """Build a raw activity feed; each argument overrides the default row.

    Returns:
        Callable returning a DataFrame with every activity feed column
    """

    def build(*rows):
        return _frame(ACTIVITY_DEFAULTS, rows)

    return build


@pytest.fixture
def report():
    """Empty run report."""
    return {'errors': [], 'warnings': [], 'info': []}
