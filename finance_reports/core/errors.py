class FinanceReportsError(Exception):
    """Base class for errors raised by the reporting engine."""


class DataSourceUnavailable(FinanceReportsError):
    """The transaction store could not be read."""


class InvalidArgument(FinanceReportsError, ValueError):
    """A caller supplied an argument outside the accepted contract."""
