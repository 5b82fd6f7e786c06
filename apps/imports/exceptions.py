"""Error taxonomy shared by the CSV importer and batch generation.

Fatal errors (InputError, TransactionFailure) abort a whole request.
RowError subclasses are collected per row and never stop sibling rows.
"""


class InputError(Exception):
    """Bad request: missing file, wrong file type, missing parameters."""


class RowError(Exception):
    """A single CSV row could not be imported."""


class RowValidationError(RowError):
    """Missing required field or unparseable value."""


class UnresolvedReferenceError(RowError):
    """A natural key (department code, student ID, ...) did not resolve."""


class ConstraintViolationError(RowError):
    """The database rejected the write (uniqueness, foreign key, ...)."""


class TransactionFailure(Exception):
    """Unexpected error while the transaction was open; everything rolled back."""
