class SalesOutlookError(Exception):
    """Base class for every error raised by the forecasting engine."""


class InsufficientDataError(SalesOutlookError, ValueError):
    """History is too short for the requested computation."""


class InvalidConfigError(SalesOutlookError, ValueError):
    """A forecast parameter is outside its documented range or unknown."""


class DataValidationError(SalesOutlookError, ValueError):
    """Input sales data failed ingestion checks."""
