class PortfolioError(Exception):
    """Base class for errors raised by the portfolio service."""


class ConfigurationError(PortfolioError):
    """Required settings are missing or invalid."""


class StorageError(PortfolioError):
    """The object store could not be reached or returned an error."""


class ObjectNotFoundError(StorageError):
    """The requested object key does not exist in the bucket."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key


__all__ = ["PortfolioError", "ConfigurationError", "StorageError", "ObjectNotFoundError"]
