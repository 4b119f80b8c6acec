"""Error taxonomy for the migration pipeline.

Only ConnectionSetupError is ever allowed to escape to the CLI. The others are
carried inside ``Err`` results and end up as ``error`` strings in the report.
"""


class MigrationError(Exception):
    """Base class for every error the pipeline knows how to record."""


class ConnectionSetupError(MigrationError):
    """Source or target could not be configured or reached at startup."""


class SourceQueryError(MigrationError):
    """A read against the source REST API failed."""

    def __init__(self, table: str, message: str):
        super().__init__(f"Failed to fetch data from {table}: {message}")
        self.table = table


class WriteError(MigrationError):
    """A batch insert failed for a reason other than a uniqueness conflict."""

    def __init__(self, table: str, original: Exception):
        super().__init__(f"Failed to insert batch into {table}: {original}")
        self.table = table
        self.original = original


class ValidationQueryError(MigrationError):
    """A row-count query failed during the validation pass."""


class UserSynthesisWriteError(MigrationError):
    """A single synthesized user could not be inserted."""

    def __init__(self, email: str, original: Exception):
        super().__init__(f"Failed to insert user {email}: {original}")
        self.email = email
        self.original = original
