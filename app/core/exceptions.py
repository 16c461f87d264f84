# File: app/core/exceptions.py


class SessionNotSetError(Exception):
    """Raised when a repository is requested outside an active unit of work."""

    def __init__(self):
        super().__init__("Database session is not set.")


class InvalidSortPropertyError(ValueError):
    """Raised when a sort property does not map to a column of the model."""

    def __init__(self, property_name: str, model_name: str):
        self.property_name = property_name
        super().__init__(f"No property '{property_name}' found for type '{model_name}'.")


class UnsupportedDialectError(Exception):
    """Raised when a query plan is requested from a database we cannot EXPLAIN."""

    def __init__(self, dialect_name: str):
        super().__init__(f"EXPLAIN is not supported for dialect '{dialect_name}'.")
