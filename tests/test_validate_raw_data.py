"""Unit tests for raw feed validation and contract enforcement."""

import pandas as pd
import pytest

from collections_pipeline.apply_raw_data_contract import (
    deduplicate_exact_events,
    enforce_raw_data_contract,
    validate_primary_key,
)
from collections_pipeline.exceptions import SchemaContractError
from collections_pipeline.validate_raw_data import (
    load_logical_table,
    load_raw_tables,
    validate_tables,
)


class TestValidateTables:
    """Structural validation findings."""

    def test_clean_feeds_have_no_findings(self, make_accounts, make_activities, report):
        tables = {'stg_accounts': make_accounts({}), 'stg_activities': make_activities({})}

        validate_tables(tables, report)

        assert report['errors'] == []
        assert report['warnings'] == []

    def test_missing_required_column_is_error(self, make_accounts, make_activities, report):
        tables = {
            'stg_accounts': make_accounts({}).drop(columns=['business_division']),
            'stg_activities': make_activities({}),
        }

        validate_tables(tables, report)

        assert any('business_division' in message for message in report['errors'])

    def test_null_account_id_in_account_feed_is_error(self, make_accounts, make_activities, report):
        tables = {
            'stg_accounts': make_accounts({'account_id': None}),
            'stg_activities': make_activities({}),
        }

        validate_tables(tables, report)

        assert any('null account_id' in message for message in report['errors'])

    def test_empty_account_feed_is_error(self, make_accounts, make_activities, report):
        tables = {'stg_accounts': make_accounts(), 'stg_activities': make_activities({})}

        validate_tables(tables, report)

        assert any('dataset is empty' in message for message in report['errors'])

    def test_missing_table_is_error(self, make_accounts, report):
        validate_tables({'stg_accounts': make_accounts({})}, report)

        assert any('stg_activities' in message for message in report['errors'])

    def test_tolerated_findings_are_warnings(self, make_accounts, make_activities, report):
        tables = {
            'stg_accounts': make_accounts({'account_id': 'A1'}, {'account_id': 'A1'}),
            'stg_activities': make_activities(
                {'account_id': 'A1', 'activity_date': '35/13/2024'},
                {'account_id': 'GHOST'},
                {'account_id': None},
            ),
        }

        validate_tables(tables, report)

        assert report['errors'] == []
        warnings = ' | '.join(report['warnings'])
        assert 'repeated account_id' in warnings
        assert 'unparsable' in warnings
        assert '1 orphan record(s)' in warnings
        assert 'null account_id' in warnings

    def test_empty_activity_feed_is_warning(self, make_accounts, make_activities, report):
        tables = {'stg_accounts': make_accounts({}), 'stg_activities': make_activities()}

        validate_tables(tables, report)

        assert report['errors'] == []
        assert any('dataset is empty' in message for message in report['warnings'])


class TestEnforceRawDataContract:
    """Fatal contract enforcement."""

    def test_schema_violation_raises(self, make_accounts, make_activities, report):
        tables = {
            'stg_accounts': make_accounts({}),
            'stg_activities': make_activities({}).drop(columns=['contact_outcome']),
        }

        with pytest.raises(SchemaContractError) as exc_info:
            enforce_raw_data_contract(tables, report)

        assert exc_info.value.errors == report['errors']

    def test_removes_exact_duplicates_and_unkeyed_events(self, make_accounts, make_activities, report):
        tables = {
            'stg_accounts': make_accounts({}),
            'stg_activities': make_activities({}, {}, {'account_id': None}, {'notes': 'different'}),
        }

        accounts, activities = enforce_raw_data_contract(tables, report)

        assert len(accounts) == 1
        assert activities['notes'].tolist() == ['spoke with customer', 'different']
        assert list(activities.index) == [0, 1]

    def test_validate_primary_key(self, make_accounts):
        with pytest.raises(SchemaContractError):
            validate_primary_key(make_accounts({'account_id': None}), 'stg_accounts')

        with pytest.raises(SchemaContractError):
            validate_primary_key(make_accounts({}).drop(columns=['account_id']), 'stg_accounts')

    def test_deduplicate_exact_events_keeps_input(self, make_activities):
        activities = make_activities({}, {})

        result = deduplicate_exact_events(activities)

        assert len(result) == 1
        assert len(activities) == 2


class TestLoading:
    """CSV loading of logical tables."""

    def test_concatenates_prefixed_files_in_sorted_order(self, tmp_path, make_accounts, report):
        make_accounts({'account_id': 'B1'}).to_csv(tmp_path / 'stg_accounts_2.csv', index=False)
        make_accounts({'account_id': 'A1'}).to_csv(tmp_path / 'stg_accounts_1.csv', index=False)

        df = load_logical_table(str(tmp_path), 'stg_accounts', report)

        assert df['account_id'].tolist() == ['A1', 'B1']
        assert report['errors'] == []

    def test_values_read_as_raw_strings(self, tmp_path, make_accounts, report):
        make_accounts({'containment_percentage': '0', 'account_checkdigit': '07'}).to_csv(
            tmp_path / 'stg_accounts.csv', index=False
        )

        df = load_logical_table(str(tmp_path), 'stg_accounts', report)

        assert df.loc[0, 'account_checkdigit'] == '07'
        assert df.loc[0, 'containment_percentage'] == '0'

    def test_missing_files_are_errors(self, tmp_path, report):
        tables = load_raw_tables(str(tmp_path), report)

        assert tables == {}
        assert len(report['errors']) == 2

    def test_blank_cells_are_null(self, tmp_path, make_activities, report):
        make_activities({'phone_number': None}).to_csv(tmp_path / 'stg_activities.csv', index=False)

        df = load_logical_table(str(tmp_path), 'stg_activities', report)

        assert pd.isna(df.loc[0, 'phone_number'])
