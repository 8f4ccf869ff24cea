# =============================================================================
# STANDARDIZE RAW ACTIVITY DATES
# =============================================================================
# - Convert fixed-width DD/MM/YYYY strings into ISO YYYY-MM-DD dates
# - Anything outside the expected layout becomes null, never an exception
# - Null means "unknown date"; it is never replaced by today or epoch


from typing import Optional
import pandas as pd


# ------------------------------------------------------------
# CONFIGURATIONS
# ------------------------------------------------------------

RAW_DATE_LENGTH = 10
RAW_DATE_SEPARATOR = '/'
ISO_DATE_FORMAT = '%Y-%m-%d'


# ------------------------------------------------------------
# SCALAR NORMALIZATION
# ------------------------------------------------------------

def normalize_date(raw_value) -> Optional[str]:
    """
    Reassemble a DD/MM/YYYY string as YYYY-MM-DD.

    Day is taken from chars 1-2, month from chars 4-5, year from chars 7-10.
    The result must be a real calendar date, so '35/13/2024' is null.
    """

    if not isinstance(raw_value, str) or len(raw_value) != RAW_DATE_LENGTH:

        return None

    if raw_value[2] != RAW_DATE_SEPARATOR or raw_value[5] != RAW_DATE_SEPARATOR:

        return None

    day, month, year = raw_value[0:2], raw_value[3:5], raw_value[6:10]
    if not (day.isdigit() and month.isdigit() and year.isdigit()):

        return None

    iso_value = f'{year}-{month}-{day}'
    parsed = pd.to_datetime(iso_value, format=ISO_DATE_FORMAT, errors='coerce')
    if pd.isna(parsed):

        return None

    return parsed.strftime(ISO_DATE_FORMAT)


# ------------------------------------------------------------
# COLUMN NORMALIZATION
# ------------------------------------------------------------

def normalize_date_series(values: pd.Series) -> pd.Series:
    """
    Normalize a whole column. Returns a new object Series holding ISO strings
    or None, aligned on the input index.
    """

    return values.map(normalize_date).astype(object)


def count_unparsable_dates(values: pd.Series) -> int:
    """
    Number of non-null raw values that did not normalize.
    """

    present = values.notna()

    return int((present & normalize_date_series(values).isna()).sum())


# =============================================================================
# END OF SCRIPT
# =============================================================================
