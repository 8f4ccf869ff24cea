# =============================================================================
# PIPELINE EXCEPTIONS
# =============================================================================
# - Fatal conditions that must stop a run before any report is written
# - Malformed values and missing contacts are data, not errors


class CollectionsPipelineError(Exception):
    """Base exception for all pipeline errors."""

    pass


class SchemaContractError(CollectionsPipelineError):
    """
    Raised when a raw feed breaks its structural contract
    (missing required column, null account_id, empty feed).
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors) or 'raw data contract violated')


class DuplicateAccountError(CollectionsPipelineError):
    """Raised when a view or report holds more than one row for an account."""

    def __init__(self, view_name: str, duplicated_ids):
        self.view_name = view_name
        self.duplicated_ids = list(duplicated_ids)
        super().__init__(
            f'{view_name}: {len(self.duplicated_ids)} account_id(s) with more '
            f'than one row: {self.duplicated_ids[:10]}'
        )


# =============================================================================
# END OF SCRIPT
# =============================================================================
