"""Exception hierarchy for farm-log."""


class FarmLogError(Exception):
    """Base class for all farm-log errors."""


class StorageError(FarmLogError):
    """Entity store failure (connection, SQL or persistence error)."""


class QueryError(FarmLogError):
    """Malformed entity query."""


class InvalidCriteriaError(QueryError, ValueError):
    """A recognized log query criterion has an invalid value."""


class ConfigurationError(FarmLogError):
    """Invalid status defaults or workflow configuration."""
