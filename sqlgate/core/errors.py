"""
Error kinds raised by the Gate facade.

Every kind wraps a driver (or binding) failure: ``str(err)`` is the original
message and ``err.__cause__`` the original exception.
"""


class GateError(Exception):
    """Base class for every sqlgate failure."""


class DatabaseConnectionError(GateError):
    """Opening a connection failed."""


class TransactionError(GateError):
    """begin / commit / rollback failed."""


class PrepareError(GateError):
    """A statement could not be prepared."""


class ExecutionError(GateError):
    """A non-query statement failed."""


class IntegrityViolationError(ExecutionError):
    """A statement violated an integrity constraint (SQLSTATE class 23)."""


class QueryError(GateError):
    """A statement returning rows failed."""


class QueryAllError(GateError):
    """Fetching every row of a result failed."""


class QueryColumnError(GateError):
    """Fetching a single column value failed."""


class QueryObjectError(GateError):
    """Building an object from the first row failed."""


class QueryOneError(GateError):
    """Fetching a single row failed."""
